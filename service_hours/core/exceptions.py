# service_hours/core/exceptions.py - Error taxonomy shared by services and routers
from typing import Any, Dict, Optional


class ServiceHoursError(Exception):
    """Base class for every error a service operation can raise."""

    status_code = 400
    error_code = "service_hours_error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detail": self.message, "error": self.error_code}
        if self.context:
            payload["context"] = self.context
        return payload


class ValidationError(ServiceHoursError):
    """Bad input: non-positive hours, missing field, exceeded balance."""

    error_code = "validation_error"


class InsufficientStudentHours(ValidationError):
    error_code = "insufficient_student_hours"

    def __init__(self, requested: float, available: float, student_id: Optional[str] = None):
        super().__init__(
            f"Cannot assign {requested:g} hours. Student only has {available:g} remaining hours available.",
            requested=requested,
            available=available,
            student_id=student_id,
        )


class InsufficientRequestHours(ValidationError):
    error_code = "insufficient_request_hours"

    def __init__(self, requested: float, available: float, request_id: Optional[str] = None):
        super().__init__(
            f"Cannot assign {requested:g} hours. Service request only has {available:g} remaining hours available.",
            requested=requested,
            available=available,
            request_id=request_id,
        )


class InvalidTransition(ServiceHoursError):
    status_code = 409
    error_code = "invalid_transition"

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(
            f"Cannot move {entity} from '{current}' to '{target}'",
            entity=entity,
            current=current,
            target=target,
        )


class NotFound(ServiceHoursError):
    status_code = 404
    error_code = "not_found"

    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity} not found", entity=entity, id=str(identifier))


class StoreError(ServiceHoursError):
    """The store call itself failed; callers may retry."""

    status_code = 503
    error_code = "store_error"
    retryable = True

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["retry"] = self.retryable
        return payload


class DuplicateRecord(StoreError):
    status_code = 409
    error_code = "duplicate_record"
    retryable = False


class ConcurrencyConflict(StoreError):
    status_code = 409
    error_code = "concurrency_conflict"


class LedgerInconsistency(StoreError):
    """A stored balance no longer matches its committed assignments."""

    status_code = 500
    error_code = "ledger_inconsistency"
    retryable = False


__all__ = [
    "ServiceHoursError",
    "ValidationError",
    "InsufficientStudentHours",
    "InsufficientRequestHours",
    "InvalidTransition",
    "NotFound",
    "StoreError",
    "DuplicateRecord",
    "ConcurrencyConflict",
    "LedgerInconsistency",
]
