# gallery_media/config.py
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import constants
from .enums import (
    ImageFormat,
    LogLevel,
    StorageBackend,
    ThumbnailPreset,
    ThumbnailStrategy,
)


def get_project_root() -> Path:
    """Get project root directory - ONLY use for initial config setup"""
    return Path(__file__).parent.parent


class Settings(BaseSettings):
    environment: str = "development"
    log_level: LogLevel = LogLevel.INFO
    log_directory: Optional[str] = Field(
        default=None, description="Directory for rotating log files (unset = stderr only)"
    )

    # Database
    database_url: str = Field(
        default="postgresql://localhost:5432/gallery",
        description="PostgreSQL connection string",
    )
    db_pool_min_size: int = Field(default=1, ge=1, le=100)
    db_pool_max_size: int = Field(
        default=10, ge=1, le=100, description="Database connection pool size"
    )
    db_pool_timeout: int = Field(
        default=30, ge=1, le=300, description="Connection checkout timeout in seconds"
    )

    # ============= UPLOAD VALIDATION =============
    max_upload_bytes: int = Field(default=constants.MAX_UPLOAD_BYTES, gt=0)
    max_image_width: int = Field(default=constants.MAX_IMAGE_WIDTH, gt=0, le=constants.ASSET_DIMENSION_MAX)
    max_image_height: int = Field(default=constants.MAX_IMAGE_HEIGHT, gt=0, le=constants.ASSET_DIMENSION_MAX)
    # Can be set via ALLOWED_IMAGE_FORMATS env var as comma-separated string
    allowed_image_formats: Union[str, List[str]] = Field(
        default=list(constants.ALLOWED_IMAGE_FORMATS),
        description="Decoded formats accepted by the validator",
    )

    @property
    def allowed_image_formats_list(self) -> List[str]:
        """Convert allowed_image_formats to a list of lowercase format names"""
        if isinstance(self.allowed_image_formats, str):
            values = self.allowed_image_formats.split(",")
        else:
            values = self.allowed_image_formats
        return [value.strip().lower() for value in values if value.strip()]

    # ============= PRIMARY VARIANT =============
    primary_format: ImageFormat = ImageFormat.JPEG
    primary_quality: Optional[int] = Field(
        default=None, description="Encoder quality (None = format default)"
    )
    primary_max_width: int = Field(default=constants.DEFAULT_MAX_WIDTH, gt=0)
    primary_max_height: int = Field(default=constants.DEFAULT_MAX_HEIGHT, gt=0)

    # ============= THUMBNAILS =============
    thumbnail_size: ThumbnailPreset = ThumbnailPreset.MEDIUM
    thumbnail_format: ImageFormat = ImageFormat.JPEG
    thumbnail_strategy: ThumbnailStrategy = ThumbnailStrategy.DERIVE

    # ============= RESPONSIVE SET =============
    responsive_widths: Union[str, List[int]] = Field(
        default=list(constants.DEFAULT_RESPONSIVE_WIDTHS),
        description="Responsive widths. Can be comma-separated string.",
    )
    responsive_max_workers: int = Field(
        default=constants.MAX_CONCURRENT_WORKERS, ge=1, le=16
    )

    @property
    def responsive_widths_list(self) -> List[int]:
        if isinstance(self.responsive_widths, str):
            return [int(w) for w in self.responsive_widths.split(",") if w.strip()]
        return list(self.responsive_widths)

    # ============= OBJECT STORAGE =============
    storage_backend: StorageBackend = StorageBackend.S3
    s3_bucket: str = "gallery-uploads"
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    s3_public_read: bool = True
    storage_public_base_url: Optional[str] = Field(
        default=None,
        description="Prefix for public object URLs, e.g. a CDN origin",
    )
    local_storage_directory: str = "./data/uploads"

    @field_validator("storage_public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @property
    def primary_max_size(self) -> Tuple[int, int]:
        return (self.primary_max_width, self.primary_max_height)

    model_config = SettingsConfigDict(
        env_file=str(get_project_root() / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
