"""Custom exception classes."""

from typing import Any, Optional, Union

ErrorBody = Union[str, dict[str, Any]]


class AppException(Exception):
    """Base application exception.

    ``error`` is what ends up under the ``error`` key of the JSON response:
    usually the message string, or a structured object for field validation.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: int = 400,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    @property
    def error(self) -> ErrorBody:
        return self.message


# ========== Auth Exceptions ==========
class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication failed", code: str = "AUTHENTICATION_ERROR"):
        super().__init__(code=code, message=message, status_code=401)


class MissingTokenError(AuthenticationError):
    """No bearer token was presented."""

    def __init__(self):
        super().__init__(message="Missing token", code="MISSING_TOKEN")


class InvalidTokenError(AuthenticationError):
    """Token signature, type or expiry check failed."""

    def __init__(self):
        super().__init__(message="Invalid token", code="INVALID_TOKEN")


class InvalidCredentialsError(AuthenticationError):
    """Invalid credentials provided."""

    def __init__(self):
        super().__init__(message="Invalid credentials", code="INVALID_CREDENTIALS")


# ========== Resource Exceptions ==========
class ResourceNotFoundError(AppException):
    """Resource not found."""

    def __init__(self, message: str):
        super().__init__(code="RESOURCE_NOT_FOUND", message=message, status_code=404)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self):
        super().__init__("User not found")


class ProductNotFoundError(ResourceNotFoundError):
    def __init__(self):
        super().__init__("Product not found")


# ========== Validation Exceptions ==========
class ValidationError(AppException):
    """Validation failed.

    Carries either a plain message or per-field errors. Field errors are
    rendered in the ``{"formErrors": [...], "fieldErrors": {...}}`` shape the
    web client already understands.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[dict[str, list[str]]] = None,
        form_errors: Optional[list[str]] = None,
    ):
        self.field_errors = field_errors or {}
        self.form_errors = form_errors or []
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            details={"fieldErrors": self.field_errors, "formErrors": self.form_errors},
            status_code=400,
        )

    @property
    def error(self) -> ErrorBody:
        if self.field_errors or self.form_errors:
            return {"formErrors": self.form_errors, "fieldErrors": self.field_errors}
        return self.message


class ConflictError(AppException):
    """Request conflicts with the current state of a resource."""

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[dict[str, Any]] = None):
        super().__init__(code=code, message=message, details=details, status_code=409)


class DuplicateResourceError(ConflictError):
    """Resource already exists."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="DUPLICATE_RESOURCE",
            details={"field": field} if field else None,
        )


class EmailAlreadyRegisteredError(DuplicateResourceError):
    def __init__(self):
        super().__init__("Email already registered", field="email")


# ========== System Exceptions ==========
class InternalError(AppException):
    """Unexpected failure that must not leak internals."""

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(code="INTERNAL_ERROR", message=message, status_code=500)
