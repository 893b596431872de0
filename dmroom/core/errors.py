class DomainError(Exception):
    """Base domain error."""


class ValidationError(DomainError):
    pass


class AuthError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class PermissionDenied(DomainError):
    pass


class ConflictError(DomainError):
    pass


class StorageError(DomainError):
    """A transaction failed and was rolled back."""
