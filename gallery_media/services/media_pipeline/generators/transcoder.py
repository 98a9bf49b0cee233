# gallery_media/services/media_pipeline/generators/transcoder.py
"""
Transcoder Component

The single decode -> fit-inside resize -> encode primitive that every other
generator builds on.
"""

from typing import Optional

from ....enums import LoggerName
from ....models import ProcessedVariant, TranscodeOptions
from ...logger import get_service_logger
from ..utils.image_utils import (
    build_variant,
    encode_image,
    open_image,
    resize_to_fit_inside,
    validate_quality,
)

logger = get_service_logger(LoggerName.TRANSCODER)


class Transcoder:
    """
    Re-encodes an image at a target format, quality and bounding box.

    Images larger than the box are downscaled to fit inside it with their
    aspect ratio preserved. Smaller images are never enlarged.
    """

    def __init__(self, default_options: Optional[TranscodeOptions] = None):
        """
        Args:
            default_options: Options used when transcode() is called without any
        """
        self.default_options = default_options or TranscodeOptions()

    def transcode(
        self, buffer: bytes, options: Optional[TranscodeOptions] = None
    ) -> ProcessedVariant:
        """
        Decode, resize if needed, and encode.

        Args:
            buffer: Source image bytes
            options: Target format, quality and max box

        Returns:
            ProcessedVariant with dimensions read back from the encoded bytes

        Raises:
            DecodeError: buffer is not a readable image
            EncodeError: the format/quality combination cannot be produced
        """
        options = options or self.default_options
        quality = options.resolved_quality()

        # Reject bad quality before paying for the decode
        validate_quality(options.format, quality)

        img = open_image(buffer)
        source_size = img.size
        resized = resize_to_fit_inside(img, (options.max_width, options.max_height))

        encoded = encode_image(resized, options.format, quality)
        variant = build_variant(encoded, options.format)

        logger.debug(
            f"Transcoded {source_size[0]}x{source_size[1]} -> "
            f"{variant.width}x{variant.height} {variant.format.value}",
            extra_context={
                "source_bytes": len(buffer),
                "output_bytes": variant.size,
                "quality": quality,
            },
        )
        return variant
