from django.core.exceptions import PermissionDenied


class LedgerPermissionDenied(PermissionDenied):
    """Raised when the caller is not allowed to use the finance back office.

    Raised before any lookup, so it never tells the caller whether the
    targeted account or transaction exists.
    """
    pass


class LedgerStorageError(Exception):
    """Raised when the database rejects or aborts a ledger unit of work.

    The whole atomic block has been rolled back; nothing was written.
    Callers may simply retry the same operation.
    """
    retryable = True

    def __init__(self, operation, original=None):
        self.operation = operation
        self.original = original
        super().__init__(f"{operation} failed and was rolled back: {original}")
