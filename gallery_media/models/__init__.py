"""Pydantic models for pipeline value objects and the persisted image asset."""

from .image_asset_model import (
    AssetFields,
    CategoryCount,
    GalleryStatistics,
    ImageAsset,
    ImageAssetCreate,
    ImageAssetUpdate,
    clamp_priority,
)
from .media_models import (
    ImageMetadata,
    ProcessedVariant,
    RawUpload,
    ResponsiveVariant,
    ThumbnailOptions,
    ThumbnailSize,
    TranscodeOptions,
    ValidationResult,
    WebOptimizedSet,
)

__all__ = [
    "AssetFields",
    "CategoryCount",
    "GalleryStatistics",
    "ImageAsset",
    "ImageAssetCreate",
    "ImageAssetUpdate",
    "clamp_priority",
    "ImageMetadata",
    "ProcessedVariant",
    "RawUpload",
    "ResponsiveVariant",
    "ThumbnailOptions",
    "ThumbnailSize",
    "TranscodeOptions",
    "ValidationResult",
    "WebOptimizedSet",
]
