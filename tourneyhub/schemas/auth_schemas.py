from pydantic import BaseModel
from typing import Optional

class CurrentUser(BaseModel):
    # Identity asserted by the authentication service through request headers
    uuid: str
    name: Optional[str] = None
