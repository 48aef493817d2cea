"""Error taxonomy for ward operations.

Validation errors are raised before any backend call. Everything the backend
or the transport can go wrong with is a BackendError; callers surface those
as a single generic failure notice.
"""


class WardError(Exception):
    """Base class for ward manager errors."""


class DischargeValidationError(WardError):
    def __init__(self, message: str = "Please fill in all required fields"):
        self.message = message
        super().__init__(message)


class QueryError(WardError):
    """A query references a column the target table does not have."""


class BackendError(WardError):
    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}" if reason else f"{operation} failed")


class PatientNotFoundError(BackendError):
    def __init__(self, mrn: str):
        self.mrn = mrn
        super().__init__("discharge", f"no patient with MRN {mrn}")


class DischargeConflictError(BackendError):
    def __init__(self, mrn: str):
        self.mrn = mrn
        super().__init__("discharge", f"patient {mrn} is no longer active")
