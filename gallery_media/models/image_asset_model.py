# gallery_media/models/image_asset_model.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from ..constants import (
    ALLOWED_MIME_TYPES,
    ALT_MAX_LENGTH,
    ASSET_DIMENSION_MAX,
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DESCRIPTION_MAX_LENGTH,
    HIGH_PRIORITY_THRESHOLD,
    PRIORITY_MAX,
    PRIORITY_MIN,
    TITLE_MAX_LENGTH,
)
from ..enums import AssetCategory
from ..utils.file_helpers import format_file_size


def clamp_priority(value: Any) -> int:
    """Coerce to int and clamp into [PRIORITY_MIN, PRIORITY_MAX]. Non-numeric input counts as the default."""
    if value is None or isinstance(value, bool):
        return DEFAULT_PRIORITY
    try:
        priority = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    return max(PRIORITY_MIN, min(PRIORITY_MAX, priority))


def _validate_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if value.startswith(("http://", "https://", "/")):
        return value
    raise ValueError("URL must be an http(s) URL or a root-relative path")


class AssetFields(BaseModel):
    """Caller-declared fields for a new gallery image."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    alt: str = Field(
        ...,
        min_length=1,
        max_length=ALT_MAX_LENGTH,
        description="Alt text, required for accessibility",
    )
    category: AssetCategory = Field(default=DEFAULT_CATEGORY)
    priority: int = Field(default=DEFAULT_PRIORITY, ge=PRIORITY_MIN, le=PRIORITY_MAX)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        if v is None or v == "":
            return DEFAULT_CATEGORY
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> int:
        return clamp_priority(v)

    @field_validator("description")
    @classmethod
    def empty_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ImageAssetCreate(AssetFields):
    """Full record handed to the metadata store after a successful upload."""

    storage_key: str = Field(..., min_length=1)
    thumbnail_key: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    file_size: int = Field(..., ge=0)
    mime_type: str
    width: Optional[int] = Field(None, ge=1, le=ASSET_DIMENSION_MAX)
    height: Optional[int] = Field(None, ge=1, le=ASSET_DIMENSION_MAX)

    @field_validator("image_url", "thumbnail_url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_url(v)

    @field_validator("mime_type")
    @classmethod
    def check_mime_type(cls, v: str) -> str:
        if v not in ALLOWED_MIME_TYPES:
            raise ValueError(f"Invalid file type: {v}")
        return v


class ImageAssetUpdate(BaseModel):
    """Metadata-only patch. Unset fields are left untouched."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    alt: Optional[str] = Field(None, min_length=1, max_length=ALT_MAX_LENGTH)
    category: Optional[AssetCategory] = None
    priority: Optional[int] = Field(None, ge=PRIORITY_MIN, le=PRIORITY_MAX)
    is_active: Optional[bool] = None

    @field_validator("priority", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        return clamp_priority(v)

    @model_validator(mode="after")
    def required_fields_not_cleared(self) -> "ImageAssetUpdate":
        # description is the only nullable column
        for name in ("title", "alt", "category", "priority", "is_active"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def to_patch(self) -> Dict[str, Any]:
        """Column -> value mapping of the fields the caller actually set."""
        return self.model_dump(exclude_unset=True, mode="json")


class ImageAsset(BaseModel):
    """Persisted gallery image record"""

    id: int
    title: str
    description: Optional[str] = None
    alt: str
    category: AssetCategory = DEFAULT_CATEGORY
    storage_key: str
    thumbnail_key: Optional[str] = None
    image_url: str
    thumbnail_url: Optional[str] = None
    file_size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    priority: int = DEFAULT_PRIORITY
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def aspect_ratio(self) -> Optional[float]:
        if self.width and self.height:
            return round(self.width / self.height, 2)
        return None

    @computed_field
    @property
    def formatted_file_size(self) -> str:
        return format_file_size(self.file_size)

    @computed_field
    @property
    def is_high_priority(self) -> bool:
        return self.priority > HIGH_PRIORITY_THRESHOLD


class CategoryCount(BaseModel):
    category: AssetCategory
    count: int = Field(..., ge=0)


class GalleryStatistics(BaseModel):
    """Aggregate figures over the image_assets table"""

    total_images: int = 0
    active_images: int = 0
    category_breakdown: List[CategoryCount] = Field(default_factory=list)
    total_file_size: int = 0

    @computed_field
    @property
    def formatted_file_size(self) -> str:
        return format_file_size(self.total_file_size)
