"""
Object storage backends.

create_object_store() picks the backend named by settings.storage_backend.
"""

from ..enums import StorageBackend
from ..exceptions import ConfigurationError
from .base import ObjectStore, StoredObject
from .local_store import LocalObjectStore
from .s3_store import S3ObjectStore


def create_object_store(settings) -> ObjectStore:
    """
    Build the configured object store.

    Raises:
        ConfigurationError: If the backend is unknown or missing required settings
    """
    try:
        backend = StorageBackend(settings.storage_backend)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported storage backend: {settings.storage_backend!r}"
        ) from e

    if backend is StorageBackend.S3:
        if not settings.s3_bucket:
            raise ConfigurationError("s3_bucket must be set for the s3 storage backend")
        return S3ObjectStore.from_settings(settings)

    return LocalObjectStore.from_settings(settings)


__all__ = [
    "ObjectStore",
    "StoredObject",
    "LocalObjectStore",
    "S3ObjectStore",
    "create_object_store",
]
