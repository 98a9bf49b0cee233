"""
Media Pipeline Utility Functions

Shared utilities for the media pipeline:
- In-memory decode/encode and resize helpers
- Storage key and URL naming
- Byte-size helpers
"""

from ....utils.file_helpers import calculate_compression_ratio, format_file_size
from .image_utils import (
    build_variant,
    calculate_fit_inside_dimensions,
    describe_image,
    encode_image,
    extract_metadata,
    open_image,
    probe_image,
    resize_to_cover,
    resize_to_fit_inside,
    validate_quality,
)
from .storage_keys import (
    derive_thumbnail_key,
    derive_thumbnail_url,
    generate_storage_key,
)

__all__ = [
    "build_variant",
    "calculate_compression_ratio",
    "calculate_fit_inside_dimensions",
    "describe_image",
    "encode_image",
    "extract_metadata",
    "format_file_size",
    "open_image",
    "probe_image",
    "resize_to_cover",
    "resize_to_fit_inside",
    "validate_quality",
    "derive_thumbnail_key",
    "derive_thumbnail_url",
    "generate_storage_key",
]
