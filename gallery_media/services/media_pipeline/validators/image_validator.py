# gallery_media/services/media_pipeline/validators/image_validator.py
"""
Image Validator Component

Cheap pre-flight checks on raw upload bytes. Runs before any transform or
storage work and reports every violation it finds in one pass.
"""

from typing import Iterable, List, Optional

from ....constants import (
    ALLOWED_IMAGE_FORMATS,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    MAX_UPLOAD_BYTES,
)
from ....enums import LoggerName
from ....exceptions import DecodeError
from ....models import ImageMetadata, ValidationResult
from ...logger import get_service_logger
from ..utils.image_utils import normalize_format_name, probe_image

logger = get_service_logger(LoggerName.IMAGE_VALIDATOR)

CORRUPTED_IMAGE_REASON = "Invalid image file or corrupted data"


class ImageValidator:
    """
    Validates raw image buffers against size, dimension and format limits.

    Pure: the result depends only on the buffer and the limits given here.
    """

    def __init__(
        self,
        max_bytes: int = MAX_UPLOAD_BYTES,
        max_width: int = MAX_IMAGE_WIDTH,
        max_height: int = MAX_IMAGE_HEIGHT,
        allowed_formats: Iterable[str] = ALLOWED_IMAGE_FORMATS,
    ):
        self.max_bytes = max_bytes
        self.max_width = max_width
        self.max_height = max_height
        self.allowed_formats = tuple(
            normalize_format_name(fmt) for fmt in allowed_formats
        )

    def validate(self, buffer: bytes) -> ValidationResult:
        """
        Run all checks and collect every violation.

        A buffer that does not decode gets a single corruption reason; the
        dimension and format checks need decoded metadata and are skipped.
        The size check always runs.
        """
        reasons: List[str] = []
        metadata: Optional[ImageMetadata] = None

        if len(buffer) > self.max_bytes:
            reasons.append(
                f"File size too large. Maximum size is "
                f"{self.max_bytes / (1024 * 1024):g}MB"
            )

        try:
            metadata = probe_image(buffer)
        except DecodeError as e:
            logger.debug(f"Buffer failed to decode: {e}")
            reasons.append(CORRUPTED_IMAGE_REASON)

        if metadata is not None:
            if metadata.width > self.max_width:
                reasons.append(
                    f"Image width too large. Maximum width is {self.max_width}px"
                )
            if metadata.height > self.max_height:
                reasons.append(
                    f"Image height too large. Maximum height is {self.max_height}px"
                )
            if metadata.format not in self.allowed_formats:
                reasons.append(
                    f"Unsupported format. Allowed formats: "
                    f"{', '.join(self.allowed_formats)}"
                )

        if reasons:
            logger.debug(
                "Image rejected",
                extra_context={"reasons": reasons, "size": len(buffer)},
            )

        return ValidationResult(reasons=reasons, metadata=metadata)
