"""
Domain exceptions and their HTTP mapping.

Services and the pure core raise these; the global handler in ``main`` turns
them into ``{"success": false, "error": {...}}`` responses. No error here is
fatal to the process.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class SmartHourlyException(Exception):
    code = "ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(SmartHourlyException):
    """A required field is missing or invalid; nothing was written."""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class InvalidShiftError(ValidationError):
    code = "INVALID_SHIFT"

    def __init__(self, shift: Any):
        super().__init__(f"Invalid shift '{shift}'. Expected one of A, B, C.", field="shift")
        self.shift = shift


class DuplicateSlotError(SmartHourlyException):
    code = "SLOT_ALREADY_RECORDED"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entry_date, shift: str, line: str, time_slot: str):
        super().__init__(
            f"Slot {time_slot} on {line} (shift {shift}, {entry_date}) is already recorded.",
            {"entry_date": str(entry_date), "shift": shift, "line": line, "time_slot": time_slot},
        )


class NotFoundError(SmartHourlyException):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any, message: Optional[str] = None):
        super().__init__(message or f"{entity} with id {entity_id} not found.", {"id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class EntryNotPendingError(NotFoundError):
    """The entry exists but has already left the pending state."""

    code = "ENTRY_NOT_PENDING"

    def __init__(self, entry_id: Any, current_status: str):
        super().__init__(
            "ProductionEntry",
            entry_id,
            message=f"Entry {entry_id} is no longer pending (status: {current_status}).",
        )
        self.details["approver_status"] = current_status
        self.current_status = current_status


class InvalidTransitionError(SmartHourlyException):
    code = "INVALID_TRANSITION"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, from_state: str, action: str):
        super().__init__(
            f"Cannot {action} an entry in state '{from_state}'.",
            {"from_state": from_state, "action": action},
        )


class BusinessRuleViolationError(SmartHourlyException):
    code = "BUSINESS_RULE_VIOLATION"
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(SmartHourlyException):
    code = "AUTHENTICATION_FAILED"
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(SmartHourlyException):
    code = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN


class RemoteUnavailableError(SmartHourlyException):
    """The database or the factory API failed or timed out."""

    code = "REMOTE_UNAVAILABLE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} unavailable: {message}", {"service": service})
        self.service = service


def to_http_exception(exc: SmartHourlyException) -> HTTPException:
    detail = {"code": exc.code, "message": exc.message}
    if exc.details:
        detail["details"] = exc.details
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return HTTPException(status_code=exc.status_code, detail=detail, headers=headers)
