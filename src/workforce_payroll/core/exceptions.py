class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``code`` is a short machine-readable identifier returned to API clients.
    """

    def __init__(self, message: str, code: str = "invalid_request"):
        super().__init__(message)
        self.code = code


class AuthenticationError(DomainError):
    """Raised when the caller is not signed in."""


class AuthorizationError(DomainError):
    """Raised when a manager acts outside the stores they manage."""

    def __init__(self, message: str, code: str = "forbidden"):
        super().__init__(message)
        self.code = code


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""


class ComputationError(DomainError):
    """Raised when report input is malformed (e.g. an unparseable timestamp).

    Never coerced to zero: a wrong payroll number is worse than no number.
    """


class DataSourceError(DomainError):
    """Raised by repositories when the backing store cannot be read."""
