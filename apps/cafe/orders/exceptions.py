"""Order placement and approval exceptions."""

from decimal import Decimal


class OrderError(Exception):
    """Base exception for order errors; carries the HTTP status to report."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class OrderValidationError(OrderError):
    """Malformed or missing request field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class CatalogViolation(OrderError):
    """Referenced item, breakfast, option or supplement is unusable."""


class PriceMismatch(OrderError):
    """Client-declared price differs from the server-computed price."""

    def __init__(self, message: str, expected: Decimal, provided: Decimal) -> None:
        super().__init__(message)
        self.expected = expected
        self.provided = provided


class DuplicateSubmission(OrderError):
    """Same cart and request id seen within the duplicate window."""

    status_code = 429


class AuthorizationError(OrderError):
    """Caller lacks the required role."""

    status_code = 403


class OrderNotFound(OrderError):
    """Referenced order or table does not exist."""

    status_code = 404


class AlreadyApproved(OrderError):
    """Approval requested for an order that is already approved."""


class PersistenceError(OrderError):
    """The order transaction failed and was rolled back."""

    status_code = 500
