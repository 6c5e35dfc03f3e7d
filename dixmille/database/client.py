"""
Dix Mille - Storage Client

Cached factory for the configured key-value storage backend.
"""

from functools import lru_cache

from dixmille.config.settings import Settings, get_settings
from dixmille.database.storage import FileStorage, LocalStorage, MemoryStorage


def create_storage(settings: Settings) -> LocalStorage:
    """Build the storage backend named in the settings."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return FileStorage(settings.data_dir)


@lru_cache(maxsize=1)
def get_storage() -> LocalStorage:
    """Create and cache the storage backend from application settings."""
    return create_storage(get_settings())
