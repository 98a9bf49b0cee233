"""Filesystem object store backend, for development and tests."""

from pathlib import Path
from typing import Optional

from ..enums import LogEmoji, LoggerName
from ..exceptions import StorageError
from ..services.logger import get_service_logger
from .base import ObjectStore, StoredObject

logger = get_service_logger(LoggerName.OBJECT_STORE)

DEFAULT_URL_PREFIX = "/media"


class LocalObjectStore(ObjectStore):
    """
    Stores each object as a file under root_directory, keyed by relative path.

    URLs are root-relative under url_prefix unless public_base_url is set.
    """

    def __init__(
        self,
        root_directory: str,
        public_base_url: Optional[str] = None,
        url_prefix: str = DEFAULT_URL_PREFIX,
    ):
        self.root = Path(root_directory).resolve()
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.url_prefix = "/" + url_prefix.strip("/")

    @classmethod
    def from_settings(cls, settings) -> "LocalObjectStore":
        return cls(
            settings.local_storage_directory,
            public_base_url=settings.storage_public_base_url,
        )

    def _path_for(self, key: str, operation: str) -> Path:
        if not key or key.startswith("/") or ".." in Path(key).parts:
            raise StorageError(f"Invalid storage key: {key!r}", key=key, operation=operation)
        return self.root / key

    def exists(self, key: str) -> bool:
        return self._path_for(key, "exists").is_file()

    def read(self, key: str) -> bytes:
        path = self._path_for(key, "read")
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}", key=key, operation="read") from e

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"{self.url_prefix}/{key}"

    def upload(self, key: str, data: bytes, content_type: str) -> StoredObject:
        path = self._path_for(key, "upload")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(
                f"Failed to write {key}: {e}", key=key, operation="upload"
            ) from e

        logger.debug(
            f"Stored {key} ({content_type})",
            extra_context={"bytes": len(data)},
            emoji=LogEmoji.UPLOAD,
        )
        return StoredObject(key=key, url=self.public_url(key))

    def delete(self, key: str) -> None:
        path = self._path_for(key, "delete")
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to delete {key}: {e}", key=key, operation="delete"
            ) from e

        logger.debug(f"Deleted {key}")
