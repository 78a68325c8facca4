"""
Contract error taxonomy.

Every failure of an invocation is one of these; the API maps them to HTTP
statuses and the host rolls back all writes of the failed invocation.
"""


class LedgerError(Exception):
    """Base exception for all contract errors"""

    code = "INTERNAL"
    http_status = 500

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "details": self.details}


class InvalidArgument(LedgerError):
    """Raised when an argument is malformed or out of range"""
    code = "INVALID_ARGUMENT"
    http_status = 400


class NotFound(LedgerError):
    """Raised when an account, hold, order or auction record is missing"""
    code = "NOT_FOUND"
    http_status = 404


class FailedPrecondition(LedgerError):
    """Raised when the current state does not allow the operation"""
    code = "FAILED_PRECONDITION"
    http_status = 412


class PermissionDenied(LedgerError):
    """Raised when the caller is not the seller or not in the privileged organization"""
    code = "PERMISSION_DENIED"
    http_status = 403


class Conflict(LedgerError):
    """Raised when a record that must be new already exists"""
    code = "ALREADY_EXISTS"
    http_status = 409
