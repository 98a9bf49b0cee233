# gallery_media/exceptions.py
"""
Custom exceptions for the gallery media pipeline.

Centralized location for all pipeline exception classes so callers can catch
a whole stage (IngestionError) or a single failure kind.
"""

from typing import List, Optional


class GalleryMediaError(Exception):
    """Base exception for all gallery media errors."""

    pass


class IngestionError(GalleryMediaError):
    """Base exception for failures of a single ingestion run."""

    pass


class ValidationError(IngestionError):
    """Raised before any transform or storage work when the input is rejected."""

    def __init__(self, reasons: List[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "Validation failed")


class DecodeError(IngestionError):
    """The input buffer could not be parsed as an image."""

    pass


class EncodeError(IngestionError):
    """The requested format/quality combination could not be produced."""

    pass


class StorageError(IngestionError):
    """Object store I/O failure."""

    def __init__(
        self, message: str, key: Optional[str] = None, operation: Optional[str] = None
    ):
        super().__init__(message)
        self.key = key
        self.operation = operation


class PersistenceError(IngestionError):
    """
    Metadata persistence failed after the primary object was stored.

    The compensating storage delete has already been attempted when this is
    raised. If it failed too, its error is kept on ``cleanup_error`` rather
    than replacing the original cause.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException,
        storage_key: Optional[str] = None,
        cleanup_error: Optional[BaseException] = None,
    ):
        super().__init__(f"{message}: {cause}")
        self.cause = cause
        self.storage_key = storage_key
        self.cleanup_error = cleanup_error

    @property
    def cleanup_succeeded(self) -> bool:
        return self.cleanup_error is None


class AssetNotFoundError(GalleryMediaError):
    """No active image asset exists for the given id."""

    def __init__(self, asset_id: int):
        super().__init__(f"Image asset {asset_id} not found")
        self.asset_id = asset_id


class ConfigurationError(GalleryMediaError):
    """Invalid or incomplete runtime configuration."""

    pass
