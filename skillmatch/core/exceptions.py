"""
Exceptions raised by the matching core.

Every error carries a human-readable message and an internal diagnostic
code. Raw store errors are chained as ``__cause__`` but never placed in
the message.
"""

from typing import Optional

from skillmatch.utils.constants import ErrorCode


class SkillMatchError(Exception):
    """Base exception for matching and retrieval errors."""

    code: ErrorCode

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, str]:
        """Payload suitable for an API error response."""
        return {"message": self.message, "code": self.code.value}


class RequesterNotFoundError(SkillMatchError):
    """Raised when the requesting user id does not resolve to a profile."""

    code = ErrorCode.REQUESTER_NOT_FOUND

    def __init__(self, user_id: str):
        super().__init__("User not found")
        self.user_id = user_id


class StoreUnavailableError(SkillMatchError):
    """Raised when the candidate store cannot be reached or queried."""

    code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, operation: str):
        super().__init__("Candidate store is unavailable, please try again later")
        self.operation = operation
