from .base import (
    AppError,
    AuthenticationRequiredError,
    DomainError,
    FailedValidationError,
    InfrastructureError,
    InvalidAuthenticationTokenError,
    NotPermittedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthenticationRequiredError",
    "DomainError",
    "FailedValidationError",
    "InfrastructureError",
    "InvalidAuthenticationTokenError",
    "NotPermittedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
