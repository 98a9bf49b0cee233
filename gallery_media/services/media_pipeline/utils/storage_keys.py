# gallery_media/services/media_pipeline/utils/storage_keys.py
"""
Storage key and URL naming helpers.

Keys are unique by timestamp plus random suffix, not by coordination. Two
ingestions in the same millisecond can only collide if their suffixes match.
"""

import uuid
from typing import Optional

from ....constants import (
    ORIGINAL_PATH_SEGMENT,
    STORAGE_SUFFIX_LENGTH,
    THUMBNAIL_KEY_FOLDER,
    THUMBNAIL_PATH_SEGMENT,
)
from ....enums import AssetCategory, ImageFormat
from ....utils.time_utils import utc_timestamp_ms


def generate_random_suffix(length: int = STORAGE_SUFFIX_LENGTH) -> str:
    return uuid.uuid4().hex[:length]


def generate_storage_key(category: AssetCategory, image_format: ImageFormat) -> str:
    """
    Build a key of the form ``{category}/{timestamp}-{suffix}.{ext}``.

    Args:
        category: Gallery category, used as the top-level folder
        image_format: Encoded format, decides the extension

    Returns:
        Object store key
    """
    category_value = AssetCategory(category).value
    return (
        f"{category_value}/{utc_timestamp_ms()}-{generate_random_suffix()}"
        f".{image_format.extension}"
    )


def derive_thumbnail_key(
    storage_key: str, image_format: Optional[ImageFormat] = None
) -> str:
    """
    Key for a separately uploaded thumbnail: ``{category}/thumbnails/{name}``.

    When image_format is given the extension is swapped to match it.
    """
    folder, sep, name = storage_key.rpartition("/")
    if image_format is not None:
        stem, dot, _ = name.rpartition(".")
        name = f"{stem if dot else name}.{image_format.extension}"
    if not sep:
        return f"{THUMBNAIL_KEY_FOLDER}/{name}"
    return f"{folder}/{THUMBNAIL_KEY_FOLDER}/{name}"


def derive_thumbnail_url(image_url: str) -> str:
    """
    Thumbnail URL by path convention: the first ``/original/`` segment
    becomes ``/thumbnails/``. URLs without the segment are returned as is.
    """
    return image_url.replace(ORIGINAL_PATH_SEGMENT, THUMBNAIL_PATH_SEGMENT, 1)
