"""Exceptions raised by the ledger service."""


class PharmaError(Exception):
    """Base exception for all service errors."""
    pass


class DatabaseUnavailableError(PharmaError):
    """Raised when no database connection is configured."""
    pass


class SeedDataError(PharmaError):
    """Raised when seed input cannot be read or has the wrong shape."""
    pass


class BulkDeleteError(PharmaError):
    """Raised when a delete batch fails part way through a bulk delete.

    Batches committed before the failure stay deleted; ``deleted`` is how
    many documents they removed.
    """

    def __init__(self, message: str, deleted: int = 0, collection: str | None = None):
        super().__init__(message)
        self.deleted = deleted
        self.collection = collection
