# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str,*, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., deciding an already decided expense)."""


class AuthorizationError(DomainError):
    """Raised when the caller's project role does not allow the operation."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message, code=code or "FORBIDDEN")


class ExternalServiceError(DomainError):
    """Raised when an external collaborator (analysis service, blob store) fails."""


class ExternalServiceTimeout(ExternalServiceError):
    """Raised when an external call exceeds its time budget. Callers may retry."""
