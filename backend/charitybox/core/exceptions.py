class DonationError(Exception):
    """Base class for errors raised by the donation ledger."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(DonationError):
    """Raised when a caller-supplied value is malformed or out of range."""


class StorageError(DonationError):
    """Raised when the database cannot complete a read or write."""

    def __init__(self, message: str, detail: str | None = None):
        self.detail = detail
        super().__init__(message)
