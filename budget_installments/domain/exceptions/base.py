"""Base domain exceptions and the error taxonomy."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationException(DomainException):
    """Input failed a business validation rule."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, code=code)


class NotFoundException(DomainException):
    """A referenced entity is missing or belongs to another tenant."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message=message, code=code)


class ConflictException(DomainException):
    """The entity is in a state that forbids the requested transition."""

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message=message, code=code)


class PersistenceException(DomainException):
    """The storage layer failed; the unit of work was rolled back."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message=message, code="PERSISTENCE_ERROR")


class MissingTenantException(DomainException):
    """Raised when a request carries no caller identity."""

    def __init__(self, header: str):
        super().__init__(
            message=f"Missing tenant header: {header}",
            code="MISSING_TENANT",
        )
        self.header = header
