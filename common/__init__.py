from .log import configure_logging
from .observability import configure_observability, run_health_checks
from .database import Base, create_database_engines, make_get_db, resolve_async_url
from .security import extract_bearer_token
from .config import BaseServiceSettings, DatabaseServiceSettings, make_get_settings
from .roles import MISSING_ROLE_FALLBACK, Role, UnknownRoleError, parse_role, resolve_role
from .contracts import ValidationResult
from .errors import (
    AuthenticationFailure,
    AuthorizationFailure,
    Conflict,
    EmailAlreadyExists,
    InvalidCredentials,
    NotFound,
    ServiceError,
    ValidationFailure,
    install_error_handlers,
)

__all__ = [
    "configure_logging",
    "configure_observability",
    "run_health_checks",
    # Database
    "Base",
    "create_database_engines",
    "make_get_db",
    "resolve_async_url",
    # Security
    "extract_bearer_token",
    # Config
    "BaseServiceSettings",
    "DatabaseServiceSettings",
    "make_get_settings",
    # Roles and contracts
    "MISSING_ROLE_FALLBACK",
    "Role",
    "UnknownRoleError",
    "parse_role",
    "resolve_role",
    "ValidationResult",
    # Errors
    "AuthenticationFailure",
    "AuthorizationFailure",
    "Conflict",
    "EmailAlreadyExists",
    "InvalidCredentials",
    "NotFound",
    "ServiceError",
    "ValidationFailure",
    "install_error_handlers",
]
