# gallery_media/services/media_pipeline/generators/thumbnail_generator.py
"""
Thumbnail Generator Component

Produces fixed-box thumbnails with a "cover" fit: the output always fills
the requested box exactly, center-cropping whatever overflows. This is the
one place in the pipeline that crops; primary and responsive variants only
ever downscale.
"""

from typing import Optional, Tuple, Union

from ....enums import LoggerName, ThumbnailPreset
from ....models import ProcessedVariant, ThumbnailOptions, ThumbnailSize
from ...logger import get_service_logger
from ..utils.image_utils import (
    build_variant,
    encode_image,
    open_image,
    resize_to_cover,
    validate_quality,
)

logger = get_service_logger(LoggerName.THUMBNAIL_GENERATOR)

SizeSpec = Union[ThumbnailSize, ThumbnailPreset, str, Tuple[int, int]]


class ThumbnailGenerator:
    """Component responsible for cover-fit thumbnails."""

    def __init__(
        self,
        default_size: SizeSpec = ThumbnailPreset.MEDIUM,
        default_options: Optional[ThumbnailOptions] = None,
    ):
        """
        Args:
            default_size: Preset name or (width, height) used when none is given
            default_options: Encoder options used when none are given
        """
        self.default_size = ThumbnailSize.resolve(default_size)
        self.default_options = default_options or ThumbnailOptions()

        logger.debug(
            f"ThumbnailGenerator initialized (size={self.default_size.as_tuple()}, "
            f"format={self.default_options.format.value})"
        )

    def thumbnail(
        self,
        buffer: bytes,
        size: Optional[SizeSpec] = None,
        options: Optional[ThumbnailOptions] = None,
    ) -> ProcessedVariant:
        """
        Generate a thumbnail that exactly fills the requested box.

        Args:
            buffer: Source image bytes
            size: small/medium/large preset or an explicit (width, height)
            options: Format and quality

        Returns:
            ProcessedVariant whose width/height equal the box

        Raises:
            DecodeError: buffer is not a readable image
            EncodeError: the format/quality combination cannot be produced
        """
        box = ThumbnailSize.resolve(size) if size is not None else self.default_size
        options = options or self.default_options
        quality = options.resolved_quality()
        validate_quality(options.format, quality)

        img = open_image(buffer)
        cropped = resize_to_cover(img, box.as_tuple())
        variant = build_variant(encode_image(cropped, options.format, quality), options.format)

        logger.debug(
            f"Generated {variant.width}x{variant.height} thumbnail from "
            f"{img.width}x{img.height}",
            extra_context={"output_bytes": variant.size},
        )
        return variant
