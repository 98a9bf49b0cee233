# gallery_media/services/media_pipeline/generators/web_optimizer.py
"""
Web Optimizer Component

Builds a web-ready jpeg and, optionally, a webp twin at the same bounds so
callers can serve the smaller one to browsers that accept it.
"""

from typing import Optional

from ....constants import DEFAULT_QUALITY, WEB_OPTIMIZED_MAX_SIZE
from ....enums import ImageFormat, LoggerName
from ....models import TranscodeOptions, WebOptimizedSet
from ....utils.file_helpers import calculate_compression_ratio
from ...logger import get_service_logger
from .transcoder import Transcoder

logger = get_service_logger(LoggerName.TRANSCODER)


class WebOptimizer:
    def __init__(self, transcoder: Optional[Transcoder] = None):
        self.transcoder = transcoder or Transcoder()

    def optimize_for_web(
        self,
        buffer: bytes,
        max_width: int = WEB_OPTIMIZED_MAX_SIZE,
        max_height: int = WEB_OPTIMIZED_MAX_SIZE,
        quality: int = DEFAULT_QUALITY[ImageFormat.JPEG],
        generate_webp: bool = True,
    ) -> WebOptimizedSet:
        """
        Raises:
            DecodeError / EncodeError: from the underlying transcodes
        """
        jpeg = self.transcoder.transcode(
            buffer,
            TranscodeOptions(
                format=ImageFormat.JPEG,
                quality=quality,
                max_width=max_width,
                max_height=max_height,
            ),
        )

        webp = None
        if generate_webp:
            # webp always uses its own default quality
            webp = self.transcoder.transcode(
                buffer,
                TranscodeOptions(
                    format=ImageFormat.WEBP,
                    quality=DEFAULT_QUALITY[ImageFormat.WEBP],
                    max_width=max_width,
                    max_height=max_height,
                ),
            )

        logger.debug(
            f"Web optimized {len(buffer)} bytes -> jpeg {jpeg.size} bytes "
            f"({calculate_compression_ratio(len(buffer), jpeg.size)}% saved)"
        )
        return WebOptimizedSet(jpeg=jpeg, webp=webp)
