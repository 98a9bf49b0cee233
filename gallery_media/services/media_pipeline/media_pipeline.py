# gallery_media/services/media_pipeline/media_pipeline.py
"""
Ingestion Pipeline - Main Orchestrator

Sequences validation, transforms, object storage and metadata persistence for
one upload at a time, and owns the failure contract between them:

- Validation, transform and upload failures surface immediately. No record
  exists yet and nothing needs undoing.
- A persistence failure after the upload triggers a compensating delete of
  every object this run stored. A failed cleanup is attached to the
  PersistenceError, never raised in its place.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

import psycopg
from pydantic import ValidationError as PydanticValidationError

from ...config import Settings
from ...config import settings as default_settings
from ...database import (
    DatabaseOperationError,
    SyncDatabase,
    SyncImageAssetOperations,
)
from ...enums import LogEmoji, LoggerName, ThumbnailStrategy
from ...exceptions import (
    AssetNotFoundError,
    PersistenceError,
    StorageError,
    ValidationError,
)
from ...models import (
    AssetFields,
    ImageAsset,
    ImageAssetCreate,
    ImageAssetUpdate,
    RawUpload,
    ResponsiveVariant,
    ThumbnailOptions,
    TranscodeOptions,
)
from ...storage import ObjectStore, create_object_store
from ..logger import get_service_logger
from .generators import (
    ResponsiveSetGenerator,
    ThumbnailGenerator,
    Transcoder,
    WebOptimizer,
)
from .utils.storage_keys import (
    derive_thumbnail_key,
    derive_thumbnail_url,
    generate_storage_key,
)
from .validators import ImageValidator

logger = get_service_logger(LoggerName.MEDIA_PIPELINE)

PERSISTENCE_FAILURES = (DatabaseOperationError, psycopg.Error, PydanticValidationError)


def _field_error_reasons(error: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into 'field: message' reasons."""
    reasons = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "fields"
        reasons.append(f"{location}: {err.get('msg', 'invalid value')}")
    return reasons


class IngestionPipeline:
    """
    Ingestion orchestrator with injected collaborators.

    Holds no per-request state, so one instance can serve concurrent
    ingestions.
    """

    def __init__(
        self,
        validator: ImageValidator,
        transcoder: Transcoder,
        thumbnail_generator: ThumbnailGenerator,
        object_store: ObjectStore,
        asset_ops: SyncImageAssetOperations,
        responsive_generator: Optional[ResponsiveSetGenerator] = None,
        web_optimizer: Optional[WebOptimizer] = None,
        thumbnail_strategy: ThumbnailStrategy = ThumbnailStrategy.DERIVE,
    ):
        """
        Args:
            validator: Pre-flight buffer checks
            transcoder: Produces the primary variant from its default options
            thumbnail_generator: Produces the thumbnail from its default size/options
            object_store: Durable storage for variant bytes
            asset_ops: Metadata store for ImageAsset records
            responsive_generator: Responsive set generator, built from transcoder if omitted
            web_optimizer: Web optimized set generator, built from transcoder if omitted
            thumbnail_strategy: derive the thumbnail URL or upload the thumbnail
        """
        self.validator = validator
        self.transcoder = transcoder
        self.thumbnail_generator = thumbnail_generator
        self.object_store = object_store
        self.asset_ops = asset_ops
        self.responsive_generator = responsive_generator or ResponsiveSetGenerator(
            transcoder
        )
        self.web_optimizer = web_optimizer or WebOptimizer(transcoder)
        self.thumbnail_strategy = ThumbnailStrategy(thumbnail_strategy)

    # ------------------------------------------------------------------
    # Ingest
    # ------------------------------------------------------------------

    def ingest(
        self, upload: RawUpload, fields: Union[AssetFields, Dict[str, Any]]
    ) -> ImageAsset:
        """
        Validate, transform, store and persist one upload.

        Args:
            upload: Raw bytes plus declared MIME type and filename
            fields: title, description, alt, category, priority

        Returns:
            The persisted ImageAsset

        Raises:
            ValidationError: image or declared fields rejected; nothing was done
            DecodeError / EncodeError: a variant could not be produced
            StorageError: an upload failed; nothing is left behind in storage
            PersistenceError: the record could not be saved; stored objects
                were deleted (or the cleanup failure is attached)
        """
        declared = self._validate(upload, fields)

        logger.debug(
            f"Processing upload {upload.filename}",
            extra_context={"bytes": upload.size, "category": declared.category.value},
            emoji=LogEmoji.PROCESSING,
        )

        primary = self.transcoder.transcode(upload.data)
        thumbnail = self.thumbnail_generator.thumbnail(upload.data)
        storage_key = generate_storage_key(declared.category, primary.format)

        stored = self.object_store.upload(storage_key, primary.data, primary.mime_type)
        stored_keys = [storage_key]

        thumbnail_key: Optional[str] = None
        if self.thumbnail_strategy is ThumbnailStrategy.UPLOAD:
            thumbnail_key = derive_thumbnail_key(storage_key, thumbnail.format)
            try:
                thumbnail_url = self.object_store.upload(
                    thumbnail_key, thumbnail.data, thumbnail.mime_type
                ).url
            except StorageError:
                self._compensate(stored_keys, reason="thumbnail upload failed")
                raise
            stored_keys.append(thumbnail_key)
        else:
            # Thumbnail bytes are only an encode check here, see ThumbnailStrategy
            thumbnail_url = derive_thumbnail_url(stored.url)
            if thumbnail_url == stored.url:
                logger.warning(
                    f"No /original/ segment in {stored.url}, thumbnail URL is the primary URL",
                    extra_context={"storage_key": storage_key},
                )

        try:
            record = ImageAssetCreate(
                **declared.model_dump(),
                storage_key=storage_key,
                thumbnail_key=thumbnail_key,
                image_url=stored.url,
                thumbnail_url=thumbnail_url,
                file_size=primary.size,
                mime_type=primary.mime_type,
                width=primary.width,
                height=primary.height,
            )
            asset = self.asset_ops.create_asset(record)
        except PERSISTENCE_FAILURES as e:
            logger.error(
                f"Failed to persist asset for {storage_key}, removing stored objects",
                exception=e,
                extra_context={"storage_key": storage_key},
                emoji=LogEmoji.ROLLBACK,
            )
            cleanup_error = self._compensate(stored_keys, reason="persistence failed")
            raise PersistenceError(
                "Failed to persist image asset",
                cause=e,
                storage_key=storage_key,
                cleanup_error=cleanup_error,
            ) from e

        logger.info(
            f"Ingested image asset {asset.id}",
            extra_context={
                "storage_key": storage_key,
                "width": primary.width,
                "height": primary.height,
                "bytes": primary.size,
            },
            emoji=LogEmoji.SUCCESS,
        )
        return asset

    def _validate(
        self, upload: RawUpload, fields: Union[AssetFields, Dict[str, Any]]
    ) -> AssetFields:
        """Run the image checks and the field checks, reporting both together."""
        result = self.validator.validate(upload.data)
        reasons = list(result.reasons)

        declared: Optional[AssetFields] = None
        if isinstance(fields, AssetFields):
            declared = fields
        else:
            try:
                declared = AssetFields.model_validate(fields)
            except PydanticValidationError as e:
                reasons.extend(_field_error_reasons(e))

        if reasons:
            logger.info(
                f"Rejected upload {upload.filename}",
                extra_context={"reasons": reasons},
                emoji=LogEmoji.FAILED,
            )
            raise ValidationError(reasons)
        return declared

    def _compensate(
        self, keys: Sequence[str], reason: str
    ) -> Optional[StorageError]:
        """
        Delete objects stored by a failed run.

        Every key is attempted. Returns the first delete failure, or None.
        """
        first_error: Optional[StorageError] = None
        for key in keys:
            try:
                self.object_store.delete(key)
                logger.info(
                    f"Removed {key} after {reason}",
                    emoji=LogEmoji.CLEANUP,
                )
            except StorageError as e:
                logger.error(
                    f"Compensating delete of {key} failed, object is orphaned",
                    exception=e,
                    extra_context={"storage_key": key, "reason": reason},
                )
                if first_error is None:
                    first_error = e
        return first_error

    # ------------------------------------------------------------------
    # Metadata-only paths
    # ------------------------------------------------------------------

    def get_asset(self, asset_id: int) -> ImageAsset:
        """
        Raises:
            AssetNotFoundError: no active asset has this id
        """
        asset = self.asset_ops.get_active_asset_by_id(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    def update_metadata(
        self, asset_id: int, patch: Union[ImageAssetUpdate, Dict[str, Any]]
    ) -> ImageAsset:
        """
        Apply a metadata patch to an active asset. No transform or storage work.

        Raises:
            ValidationError: the patch itself is invalid
            AssetNotFoundError: no active asset has this id
        """
        if not isinstance(patch, ImageAssetUpdate):
            try:
                patch = ImageAssetUpdate.model_validate(patch)
            except PydanticValidationError as e:
                raise ValidationError(_field_error_reasons(e)) from e

        asset = self.asset_ops.update_asset(asset_id, patch)
        if asset is None:
            raise AssetNotFoundError(asset_id)

        logger.info(
            f"Updated image asset {asset_id}",
            extra_context={"fields": sorted(patch.to_patch())},
            emoji=LogEmoji.SUCCESS,
        )
        return asset

    def delete_asset(self, asset_id: int, permanent: bool = False) -> None:
        """
        Soft delete by default: the record is deactivated and storage is kept.

        permanent=True deletes the stored objects best-effort, then removes
        the record whether or not storage cleanup succeeded. Soft-deleted
        assets can still be deleted permanently.

        Raises:
            AssetNotFoundError: no matching asset
        """
        if not permanent:
            asset = self.asset_ops.update_asset(
                asset_id, ImageAssetUpdate(is_active=False)
            )
            if asset is None:
                raise AssetNotFoundError(asset_id)
            logger.info(f"Soft deleted image asset {asset_id}", emoji=LogEmoji.SUCCESS)
            return

        asset = self.asset_ops.get_asset_by_id(asset_id, include_inactive=True)
        if asset is None:
            raise AssetNotFoundError(asset_id)

        for key in (asset.storage_key, asset.thumbnail_key):
            if not key:
                continue
            try:
                self.object_store.delete(key)
            except StorageError as e:
                logger.warning(
                    f"Could not delete {key} for asset {asset_id}, removing record anyway",
                    exception=e,
                    extra_context={"asset_id": asset_id, "storage_key": key},
                )

        if not self.asset_ops.delete_asset(asset_id):
            raise AssetNotFoundError(asset_id)

        logger.info(
            f"Permanently deleted image asset {asset_id}",
            extra_context={"storage_key": asset.storage_key},
            emoji=LogEmoji.CLEANUP,
        )

    # ------------------------------------------------------------------
    # Variant helpers
    # ------------------------------------------------------------------

    def responsive_set(
        self,
        buffer: bytes,
        widths: Optional[Sequence[int]] = None,
        options: Optional[ThumbnailOptions] = None,
    ) -> List[ResponsiveVariant]:
        return self.responsive_generator.responsive_set(buffer, widths, options)

    def optimize_for_web(self, buffer: bytes, **kwargs):
        return self.web_optimizer.optimize_for_web(buffer, **kwargs)


def create_ingestion_pipeline(
    settings: Optional[Settings] = None,
    database: Optional[SyncDatabase] = None,
    object_store: Optional[ObjectStore] = None,
    asset_ops: Optional[SyncImageAssetOperations] = None,
) -> IngestionPipeline:
    """
    Factory function to create an ingestion pipeline from settings.

    Collaborators that are passed in are used as is. A database created here
    is initialized before use.

    Args:
        settings: Settings to build from (defaults to the process settings)
        database: Sync database for the metadata store
        object_store: Storage backend (defaults to settings.storage_backend)
        asset_ops: Metadata store operations (defaults to one over database)

    Returns:
        Configured IngestionPipeline instance
    """
    settings = settings or default_settings

    if asset_ops is None:
        if database is None:
            database = SyncDatabase.from_settings(settings)
            database.initialize()
        asset_ops = SyncImageAssetOperations(database)

    transcoder = Transcoder(
        TranscodeOptions(
            format=settings.primary_format,
            quality=settings.primary_quality,
            max_width=settings.primary_max_width,
            max_height=settings.primary_max_height,
        )
    )

    return IngestionPipeline(
        validator=ImageValidator(
            max_bytes=settings.max_upload_bytes,
            max_width=settings.max_image_width,
            max_height=settings.max_image_height,
            allowed_formats=settings.allowed_image_formats_list,
        ),
        transcoder=transcoder,
        thumbnail_generator=ThumbnailGenerator(
            default_size=settings.thumbnail_size,
            default_options=ThumbnailOptions(format=settings.thumbnail_format),
        ),
        object_store=object_store or create_object_store(settings),
        asset_ops=asset_ops,
        responsive_generator=ResponsiveSetGenerator(
            transcoder,
            max_workers=settings.responsive_max_workers,
            default_widths=settings.responsive_widths_list,
        ),
        thumbnail_strategy=settings.thumbnail_strategy,
    )
