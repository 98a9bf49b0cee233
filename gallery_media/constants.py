# gallery_media/constants.py
"""
Gallery Media Constants

Default limits and encoder settings shared by the validator, the generators
and the metadata store. The metadata store schema uses the same limits, so
change them together.
"""

from .enums import AssetCategory, ImageFormat, ThumbnailPreset

# =============================================================================
# UPLOAD VALIDATION
# =============================================================================

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
MAX_IMAGE_WIDTH = 5000
MAX_IMAGE_HEIGHT = 5000
ALLOWED_IMAGE_FORMATS = ("jpeg", "png", "webp", "gif")

# Pillow reports MPO for some camera JPEGs
FORMAT_ALIASES = {"jpg": "jpeg", "mpo": "jpeg"}

# =============================================================================
# ENCODER SETTINGS
# =============================================================================

# jpeg/webp values are perceptual quality, png is a zlib compression level 0-9
DEFAULT_QUALITY = {
    ImageFormat.JPEG: 85,
    ImageFormat.WEBP: 80,
    ImageFormat.PNG: 9,
}
QUALITY_RANGES = {
    ImageFormat.JPEG: (1, 100),
    ImageFormat.WEBP: (1, 100),
    ImageFormat.PNG: (0, 9),
}
WEBP_EFFORT = 6

DEFAULT_MAX_WIDTH = 2000
DEFAULT_MAX_HEIGHT = 2000

# Web optimized set (jpeg + optional webp twin)
WEB_OPTIMIZED_MAX_SIZE = 1200

# Background used when flattening alpha for formats without transparency
FLATTEN_BACKGROUND = (255, 255, 255)

# =============================================================================
# THUMBNAILS AND RESPONSIVE SETS
# =============================================================================

THUMBNAIL_SIZES = {
    ThumbnailPreset.SMALL: (150, 150),
    ThumbnailPreset.MEDIUM: (400, 400),
    ThumbnailPreset.LARGE: (800, 800),
}

DEFAULT_RESPONSIVE_WIDTHS = (400, 800, 1200, 1600)
MAX_CONCURRENT_WORKERS = 4

# =============================================================================
# STORAGE
# =============================================================================

ORIGINAL_PATH_SEGMENT = "/original/"
THUMBNAIL_PATH_SEGMENT = "/thumbnails/"
THUMBNAIL_KEY_FOLDER = "thumbnails"
STORAGE_SUFFIX_LENGTH = 8

# =============================================================================
# IMAGE ASSET FIELD LIMITS
# =============================================================================

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
ALT_MAX_LENGTH = 300
PRIORITY_MIN = -100
PRIORITY_MAX = 100
DEFAULT_PRIORITY = 0
HIGH_PRIORITY_THRESHOLD = 50  # featured listings use >=, is_high_priority uses >
ASSET_DIMENSION_MAX = 10000
DEFAULT_CATEGORY = AssetCategory.GENERAL
ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)

# =============================================================================
# LISTING
# =============================================================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
