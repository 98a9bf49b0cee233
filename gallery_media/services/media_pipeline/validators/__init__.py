"""Pre-flight validation of raw upload bytes."""

from .image_validator import CORRUPTED_IMAGE_REASON, ImageValidator

__all__ = ["ImageValidator", "CORRUPTED_IMAGE_REASON"]
