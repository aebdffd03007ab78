"""
Custom exceptions for the order service.

Input validation failures are reported with pydantic's own ValidationError,
raised while the input models are built. A missing order is a normal
result (None / False), not an exception.
"""


class OrderServiceError(Exception):
    """Base class for exceptions raised by the order service."""


class StorageError(OrderServiceError):
    """The database rejected or failed to execute a statement.

    The driver-level exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"Storage failure during {operation}")
