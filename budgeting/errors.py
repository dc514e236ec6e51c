"""Errors raised by the budget engine and its store."""


class StoreError(Exception):
    """A store operation failed.

    Attributes:
        operation: Name of the attempted store operation, e.g. 'list_budgets'.
    """

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(message or f"Store operation '{operation}' failed")


class StoreReadFailure(StoreError):
    """Listing budgets, transactions or categories failed."""


class StoreWriteFailure(StoreError):
    """Creating, updating or deleting a budget failed."""


class ReconciliationError(StoreError):
    """Auto-generation stopped part way through.

    Budgets written before the failure are not rolled back.

    Attributes:
        result: ReconcileResult with the counts processed before the failure.
    """

    def __init__(self, operation: str, result, message: str = ""):
        self.result = result
        super().__init__(
            operation,
            message
            or (
                f"Auto-generate failed during '{operation}' after creating "
                f"{result.created} and carrying forward {result.carried_forward} budget(s)"
            ),
        )
