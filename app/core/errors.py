"""Error taxonomy shared by the store boundary and calendar sync."""


class RecordValidationError(ValueError):
    """Input rejected before any store call (e.g. a save without a weight)."""


class StoreError(RuntimeError):
    """The persistence collaborator failed. Reported once, never retried."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
