# gallery_media/enums.py
"""
Application Enums - Centralized enum definitions.

Kept separate from constants.py and the models package so both can import
them without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# IMAGE FORMATS
# =============================================================================


class ImageFormat(str, Enum):
    """Output formats the transcoder can encode."""

    JPEG = "jpeg"
    WEBP = "webp"
    PNG = "png"

    @property
    def pil_format(self) -> str:
        """Pillow encoder name for this format."""
        return self.value.upper()

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        """File extension used for storage keys."""
        if self is ImageFormat.JPEG:
            return "jpg"
        return self.value


class ThumbnailPreset(str, Enum):
    """Named thumbnail box sizes. Dimensions live in constants.THUMBNAIL_SIZES."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ThumbnailStrategy(str, Enum):
    """
    How the thumbnail URL of an ingested asset is produced.

    DERIVE uploads only the primary. The thumbnail is still encoded, which
    fails a broken source before any storage work, but its bytes are not
    stored; the URL comes from replacing ``/original/`` with ``/thumbnails/``
    in the primary URL. Storage keys carry no such segment, so the public
    base URL must (e.g. a CDN serving ``.../original/`` and resizing under
    ``.../thumbnails/``). Without it the thumbnail URL equals the primary URL.

    UPLOAD stores the thumbnail bytes as a second object.
    """

    DERIVE = "derive"
    UPLOAD = "upload"


class StorageBackend(str, Enum):
    S3 = "s3"
    LOCAL = "local"


# =============================================================================
# GALLERY ASSETS
# =============================================================================


class AssetCategory(str, Enum):
    """Allowed gallery categories. Must match the image_assets CHECK constraint."""

    WORKSHOP = "workshop"
    CALLIGRAPHY = "calligraphy"
    EVENTS = "events"
    COMMUNITY = "community"
    HISTORICAL = "historical"
    ARTWORK = "artwork"
    GENERAL = "general"


class AssetSortOrder(str, Enum):
    """Sort orders for gallery listings."""

    RECENT = "recent"
    PRIORITY = "priority"
    OLDEST = "oldest"
    TITLE = "title"


# =============================================================================
# LOGGING SYSTEM
# =============================================================================


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    SUCCESS = "✅"
    FAILED = "❌"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    PROCESSING = "🔄"
    UPLOAD = "📤"
    CLEANUP = "🧹"
    IMAGE = "🖼️"
    DATABASE = "🗄️"
    ROLLBACK = "↩️"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    MEDIA_PIPELINE = "media_pipeline"
    IMAGE_VALIDATOR = "image_validator"
    TRANSCODER = "transcoder"
    THUMBNAIL_GENERATOR = "thumbnail_generator"
    RESPONSIVE_GENERATOR = "responsive_generator"
    OBJECT_STORE = "object_store"
    DATABASE = "database"
    SYSTEM = "system"
