"""
Error taxonomy shared by services and endpoints.

Every error is an ``HTTPException`` so services can raise it directly, the same
way they raise ``HTTPException`` for a 404. The application-level handlers in
``tourneyhub.main`` render all of them as ``{"success": false, "error": detail}``.
"""
from typing import Optional

from fastapi import HTTPException, status


class TourneyError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Operation failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class Unauthenticated(TourneyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class ValidationFailed(TourneyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class NotFound(TourneyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Forbidden(TourneyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"


class BusinessRuleViolation(TourneyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request rejected"


class CapacityExceeded(BusinessRuleViolation):
    default_detail = "Tournament is full"


class RegistrationClosed(BusinessRuleViolation):
    default_detail = "Tournament is not accepting registrations"


class NotRegistered(BusinessRuleViolation):
    default_detail = "You are not registered for this tournament"


class CooldownActive(BusinessRuleViolation):
    def __init__(self, minutes_remaining: int):
        self.minutes_remaining = minutes_remaining
        unit = "minute" if minutes_remaining == 1 else "minutes"
        super().__init__(f"Please wait {minutes_remaining} {unit} before unregistering to prevent abuse")


class DuplicateName(ValidationFailed):
    default_detail = "Name is already taken"


class InternalError(TourneyError):
    pass
