# Import all models here to ensure they are registered with Base
from .user import User
from .tournament import Game, Tournament
from .registration import Registration
from .team import Team, TeamMember
from .wallet import Wallet, WalletTransaction
