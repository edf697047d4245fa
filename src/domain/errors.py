"""
Typed domain errors for the SRS scheduler.

Each error carries the structured detail a caller needs to render a message
(the core never formats user-facing text) plus a stable ``code`` and a
``retryable`` flag so the API layer can map them without string matching.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    code = "DOMAIN_ERROR"
    retryable = False

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": str(self),
            "retryable": self.retryable,
            "details": self.details,
        }


class NotFound(DomainError):
    """Set, session or card does not exist or is not visible to the caller."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"{resource} {resource_id} not found",
            {"resource": resource, "resource_id": resource_id},
        )


class Unauthorized(DomainError):
    """Session exists but belongs to a different user."""

    code = "UNAUTHORIZED"

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(
            f"Session {session_id} does not belong to user",
            {"session_id": session_id},
        )


class DailyLimitReached(DomainError):
    """Both the new-card and review quotas are exhausted for today."""

    code = "DAILY_LIMIT_REACHED"

    def __init__(
        self,
        new_cards_today: int,
        new_cards_limit: int,
        reviews_today: int,
        reviews_limit: int,
    ) -> None:
        self.new_cards_today = new_cards_today
        self.new_cards_limit = new_cards_limit
        self.reviews_today = reviews_today
        self.reviews_limit = reviews_limit
        super().__init__(
            "Daily limits reached for both new cards and reviews",
            {
                "new_cards_today": new_cards_today,
                "new_cards_limit": new_cards_limit,
                "reviews_today": reviews_today,
                "reviews_limit": reviews_limit,
            },
        )


class ValidationError(DomainError):
    """Caller supplied an out-of-range rating or session limit."""

    code = "VALIDATION_FAILED"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None) -> None:
        self.fields = fields or {}
        super().__init__(message, dict(self.fields))


class StoreUnavailable(DomainError):
    """Card or Set Store call failed or timed out. Safe to retry with backoff."""

    code = "STORE_UNAVAILABLE"
    retryable = True

    def __init__(self, operation: str, reason: str = "") -> None:
        self.operation = operation
        self.reason = reason
        message = f"Store call {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"operation": operation})
