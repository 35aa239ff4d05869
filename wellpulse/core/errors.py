"""Domain error taxonomy.

Services raise these; ``wellpulse.main`` maps them onto HTTP responses via
``status_code``. ``ValidationError`` also subclasses ``ValueError`` so
Pydantic validators can raise it directly.
"""
from typing import Any, Dict, Optional


class WellPulseError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.field = field
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        body.update(self.details)
        return body


class ValidationError(WellPulseError, ValueError):
    status_code = 400
    code = "validation_error"


class PreconditionError(WellPulseError):
    status_code = 403
    code = "precondition_failed"


class SeatLimitReached(PreconditionError):
    status_code = 409
    code = "SEAT_LIMIT_REACHED"

    def __init__(self, used_seats: int, seat_limit: int):
        super().__init__(
            f"Seat limit reached ({used_seats}/{seat_limit}). Please contact super admin.",
            details={"seat_limit": seat_limit, "used_seats": used_seats},
        )
        self.used_seats = used_seats
        self.seat_limit = seat_limit


class ConflictError(WellPulseError):
    status_code = 409
    code = "conflict"


class NotFoundError(WellPulseError):
    status_code = 404
    code = "not_found"


class ExpiredError(WellPulseError):
    status_code = 410
    code = "expired"


class NoRecipientsError(WellPulseError):
    status_code = 422
    code = "no_recipients"


class TransientError(WellPulseError):
    """A retryable infrastructure failure (DNS timeout, SERVFAIL)."""

    status_code = 503
    code = "transient_error"


class DeliveryError(WellPulseError):
    """Raised by notifiers when an email could not be handed off."""

    status_code = 502
    code = "delivery_failed"
