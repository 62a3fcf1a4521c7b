"""Exceptions raised by propfile."""


class PropfileError(Exception):
    """Base class for all propfile errors."""


class UnsupportedOperationError(PropfileError, NotImplementedError):
    """Raised for map operations that cannot keep the document's formatting."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} is not supported on a formatted properties document")
        self.operation = operation
