# gallery_media/models/media_models.py
"""
Value objects that flow through the media pipeline.

None of these are persisted. Variants are independent of each other and of
the metadata they were derived from.
"""

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH, DEFAULT_QUALITY, THUMBNAIL_SIZES
from ..enums import ImageFormat, ThumbnailPreset


class RawUpload(BaseModel):
    """Raw uploaded bytes plus what the client declared about them."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    mime_type: str = Field(..., description="Declared MIME type")
    filename: str = Field(..., description="Declared original filename")

    @property
    def size(self) -> int:
        return len(self.data)


class ImageMetadata(BaseModel):
    """Decoded properties of an image buffer. Recomputed after every transform."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    format: str = Field(..., description="Detected format, lowercase (jpeg, png, ...)")
    color_space: str = Field(..., description="srgb, cmyk, b-w, ...")
    mode: str = Field(..., description="Pillow pixel mode")
    has_alpha: bool = False
    size: int = Field(..., ge=0, description="Byte size of the buffer that was read")
    density: int = Field(default=72, description="Pixels per inch")

    @property
    def aspect_ratio(self) -> float:
        if not self.width or not self.height:
            return 0.0
        return round(self.width / self.height, 2)


class ProcessedVariant(BaseModel):
    """One encoded derivative of an input image."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    format: ImageFormat
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    size: int = Field(..., ge=0)

    @property
    def mime_type(self) -> str:
        return self.format.mime_type


class ValidationResult(BaseModel):
    """
    Outcome of validating a raw buffer.

    reasons is exhaustive: every independent check runs, so callers can
    report all problems at once.
    """

    reasons: List[str] = Field(default_factory=list)
    metadata: Optional[ImageMetadata] = None

    @property
    def valid(self) -> bool:
        return len(self.reasons) == 0


class TranscodeOptions(BaseModel):
    """
    Options for a single transcode call.

    Unknown fields are rejected so a typo never silently falls back to a
    default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: ImageFormat = ImageFormat.JPEG
    quality: Optional[int] = Field(
        default=None,
        description="jpeg/webp quality 1-100 or png compression level 0-9 (None = format default)",
    )
    max_width: int = Field(default=DEFAULT_MAX_WIDTH, gt=0)
    max_height: int = Field(default=DEFAULT_MAX_HEIGHT, gt=0)

    def resolved_quality(self) -> int:
        if self.quality is None:
            return DEFAULT_QUALITY[self.format]
        return self.quality


class ThumbnailOptions(BaseModel):
    """Encoder options for thumbnails. Box size is passed separately."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: ImageFormat = ImageFormat.JPEG
    quality: Optional[int] = None

    def resolved_quality(self) -> int:
        if self.quality is None:
            return DEFAULT_QUALITY[self.format]
        return self.quality


class ThumbnailSize(BaseModel):
    """Explicit thumbnail box."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @classmethod
    def resolve(
        cls, size: Union["ThumbnailSize", ThumbnailPreset, str, Tuple[int, int]]
    ) -> "ThumbnailSize":
        """Accept a preset name, a (width, height) pair or an instance."""
        if isinstance(size, ThumbnailSize):
            return size
        if isinstance(size, (ThumbnailPreset, str)):
            width, height = THUMBNAIL_SIZES[ThumbnailPreset(size)]
            return cls(width=width, height=height)
        width, height = size
        return cls(width=width, height=height)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.width, self.height)


class ResponsiveVariant(BaseModel):
    """A responsive-set entry: the requested width bound and its variant."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    variant: ProcessedVariant


class WebOptimizedSet(BaseModel):
    """A jpeg variant and, when requested, a webp twin at the same bounds."""

    model_config = ConfigDict(frozen=True)

    jpeg: ProcessedVariant
    webp: Optional[ProcessedVariant] = None

    @field_validator("jpeg")
    @classmethod
    def must_be_jpeg(cls, v: ProcessedVariant) -> ProcessedVariant:
        if v.format is not ImageFormat.JPEG:
            raise ValueError("jpeg variant must be encoded as jpeg")
        return v
