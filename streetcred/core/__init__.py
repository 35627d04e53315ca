# Core modules for GetStreetCred backend
from .casing import camel_to_snake, snake_to_camel, to_storage, to_wire
from .config import Settings, get_settings
from .database import Base, build_engine, build_session_factory, create_all_tables
from .errors import (
    BackendError,
    ConflictError,
    Forbidden,
    NotConfigured,
    NotFound,
    StreetCredError,
    Unauthorized,
    ValidationError,
)
from .security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)

__all__ = [
    # Casing
    "camel_to_snake",
    "snake_to_camel",
    "to_storage",
    "to_wire",
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "build_engine",
    "build_session_factory",
    "create_all_tables",
    # Errors
    "BackendError",
    "ConflictError",
    "Forbidden",
    "NotConfigured",
    "NotFound",
    "StreetCredError",
    "Unauthorized",
    "ValidationError",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
