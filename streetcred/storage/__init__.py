"""
Persistence backends for GetStreetCred.

    from streetcred.storage import build_storage
    storage = build_storage(get_settings())

The backend is built once at application startup and injected into the
routes; see streetcred.main.lifespan and streetcred.api.deps.get_storage.
"""

from streetcred.core.config import Settings
from streetcred.core.database import build_engine

from .base import (
    MUTABLE_PROJECT_FIELDS,
    MUTABLE_USER_FIELDS,
    StorageBackend,
    format_rating,
)
from .sql import SqlStorage
from .supabase import SupabaseStorage


def build_storage(settings: Settings) -> StorageBackend:
    """
    Construct the backend selected by STORAGE_BACKEND.

    Raises:
        NotConfigured: supabase selected without usable credentials
    """
    if settings.storage_backend == "supabase":
        return SupabaseStorage(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.supabase_timeout,
        )
    return SqlStorage(build_engine(settings.database_url, echo=settings.sql_echo))


__all__ = [
    "MUTABLE_PROJECT_FIELDS",
    "MUTABLE_USER_FIELDS",
    "SqlStorage",
    "StorageBackend",
    "SupabaseStorage",
    "build_storage",
    "format_rating",
]
