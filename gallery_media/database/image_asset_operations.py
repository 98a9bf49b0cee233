"""
Image asset database operations - Composition-based architecture.

The metadata store half of the ingestion pipeline. Holds every query against
the image_assets table and returns pydantic models, never raw rows.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg

from ..constants import (
    ALT_MAX_LENGTH,
    DEFAULT_PAGE_SIZE,
    DESCRIPTION_MAX_LENGTH,
    HIGH_PRIORITY_THRESHOLD,
    MAX_PAGE_SIZE,
    PRIORITY_MAX,
    PRIORITY_MIN,
    TITLE_MAX_LENGTH,
)
from ..enums import AssetCategory, AssetSortOrder
from ..models import (
    CategoryCount,
    GalleryStatistics,
    ImageAsset,
    ImageAssetCreate,
    ImageAssetUpdate,
)
from ..utils.time_utils import utc_now
from .core import SyncDatabase
from .exceptions import ImageAssetOperationError

_CATEGORY_VALUES = ", ".join(f"'{c.value}'" for c in AssetCategory)

IMAGE_ASSETS_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS image_assets (
    id SERIAL PRIMARY KEY,
    title VARCHAR({TITLE_MAX_LENGTH}) NOT NULL,
    description VARCHAR({DESCRIPTION_MAX_LENGTH}),
    alt VARCHAR({ALT_MAX_LENGTH}) NOT NULL,
    category VARCHAR(32) NOT NULL DEFAULT 'general'
        CHECK (category IN ({_CATEGORY_VALUES})),
    storage_key TEXT NOT NULL UNIQUE,
    thumbnail_key TEXT,
    image_url TEXT NOT NULL,
    thumbnail_url TEXT,
    file_size INTEGER NOT NULL CHECK (file_size >= 0),
    mime_type VARCHAR(32) NOT NULL,
    width INTEGER,
    height INTEGER,
    priority INTEGER NOT NULL DEFAULT 0
        CHECK (priority BETWEEN {PRIORITY_MIN} AND {PRIORITY_MAX}),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_image_assets_category_active
    ON image_assets (category, is_active);
CREATE INDEX IF NOT EXISTS idx_image_assets_priority_created
    ON image_assets (priority DESC, created_at DESC);
"""

# AssetSortOrder -> ORDER BY clause. Only these strings are ever interpolated.
SORT_CLAUSES = {
    AssetSortOrder.RECENT: "created_at DESC, id DESC",
    AssetSortOrder.PRIORITY: "priority DESC, created_at DESC, id DESC",
    AssetSortOrder.OLDEST: "created_at ASC, id ASC",
    AssetSortOrder.TITLE: "title ASC, id ASC",
}

# Columns a metadata patch may touch
UPDATABLE_COLUMNS = tuple(ImageAssetUpdate.model_fields.keys())


def _row_to_asset(row: Dict[str, Any]) -> ImageAsset:
    """Filter row fields down to the ImageAsset model and build it."""
    fields = {k: v for k, v in row.items() if k in ImageAsset.model_fields}
    return ImageAsset(**fields)


def _build_set_clause(patch: Dict[str, Any]) -> str:
    unknown = set(patch) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
    return ", ".join(f"{column} = %({column})s" for column in patch)


class SyncImageAssetOperations:
    """
    Sync image asset operations.

    Every query error is re-raised as ImageAssetOperationError chained from
    the psycopg error. Nothing here logs.
    """

    def __init__(self, db: SyncDatabase) -> None:
        self.db = db

    def ensure_schema(self) -> None:
        """Create the image_assets table and its indexes when missing."""
        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(IMAGE_ASSETS_SCHEMA)
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to create image_assets schema", operation="ensure_schema"
            ) from e

    def create_asset(self, asset_data: ImageAssetCreate) -> ImageAsset:
        """
        Insert a new asset record.

        Args:
            asset_data: Validated record built after a successful upload

        Returns:
            The persisted ImageAsset with id and timestamps
        """
        query = """
        INSERT INTO image_assets (
            title, description, alt, category, storage_key, thumbnail_key,
            image_url, thumbnail_url, file_size, mime_type, width, height,
            priority, is_active, created_at, updated_at
        ) VALUES (
            %(title)s, %(description)s, %(alt)s, %(category)s, %(storage_key)s,
            %(thumbnail_key)s, %(image_url)s, %(thumbnail_url)s, %(file_size)s,
            %(mime_type)s, %(width)s, %(height)s, %(priority)s, TRUE,
            %(created_at)s, %(updated_at)s
        ) RETURNING *
        """
        now = utc_now()
        params = asset_data.model_dump(mode="json")
        params.update({"created_at": now, "updated_at": now})

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to create image asset",
                operation="create_asset",
                details={"storage_key": asset_data.storage_key},
            ) from e

        if not row:
            raise ImageAssetOperationError(
                "Insert returned no row",
                operation="create_asset",
                details={"storage_key": asset_data.storage_key},
            )
        return _row_to_asset(row)

    def get_asset_by_id(
        self, asset_id: int, include_inactive: bool = False
    ) -> Optional[ImageAsset]:
        query = "SELECT * FROM image_assets WHERE id = %(id)s"
        if not include_inactive:
            query += " AND is_active = TRUE"

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, {"id": asset_id})
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to fetch image asset",
                operation="get_asset_by_id",
                details={"asset_id": asset_id},
            ) from e

        return _row_to_asset(row) if row else None

    def get_active_asset_by_id(self, asset_id: int) -> Optional[ImageAsset]:
        return self.get_asset_by_id(asset_id, include_inactive=False)

    def update_asset(
        self, asset_id: int, update_data: ImageAssetUpdate
    ) -> Optional[ImageAsset]:
        """
        Apply a metadata patch to an active asset.

        Returns:
            The updated asset, or None if no active asset has this id
        """
        patch = update_data.to_patch()
        if not patch:
            return self.get_active_asset_by_id(asset_id)

        query = f"""
        UPDATE image_assets
        SET {_build_set_clause(patch)}, updated_at = %(updated_at)s
        WHERE id = %(id)s AND is_active = TRUE
        RETURNING *
        """
        params = dict(patch, id=asset_id, updated_at=utc_now())

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to update image asset",
                operation="update_asset",
                details={"asset_id": asset_id, "fields": sorted(patch)},
            ) from e

        return _row_to_asset(row) if row else None

    def delete_asset(self, asset_id: int) -> bool:
        """
        Remove the record, active or not.

        Returns:
            True if a row was deleted
        """
        query = "DELETE FROM image_assets WHERE id = %(id)s RETURNING id"

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, {"id": asset_id})
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to delete image asset",
                operation="delete_asset",
                details={"asset_id": asset_id},
            ) from e

        return row is not None

    def list_active_assets(
        self,
        category: Optional[str] = None,
        featured: bool = False,
        sort: AssetSortOrder = AssetSortOrder.RECENT,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[ImageAsset], int]:
        """
        Page through active assets.

        Args:
            category: Category to filter on; None or "all" means every category
            featured: Only assets with priority >= the high priority threshold
            sort: recent, priority, oldest or title
            page: 1-based page number
            limit: Page size, clamped to 1..MAX_PAGE_SIZE

        Returns:
            (assets on this page, total matching assets)
        """
        page = max(1, int(page))
        limit = max(1, min(MAX_PAGE_SIZE, int(limit)))
        order_by = SORT_CLAUSES[AssetSortOrder(sort)]

        where_clauses = ["is_active = TRUE"]
        params: Dict[str, Any] = {}

        if category and category != "all":
            where_clauses.append("category = %(category)s")
            params["category"] = AssetCategory(category).value

        if featured:
            where_clauses.append("priority >= %(featured_threshold)s")
            params["featured_threshold"] = HIGH_PRIORITY_THRESHOLD

        where_sql = " AND ".join(where_clauses)
        count_query = f"SELECT COUNT(*) AS total FROM image_assets WHERE {where_sql}"
        page_query = (
            f"SELECT * FROM image_assets WHERE {where_sql} "
            f"ORDER BY {order_by} LIMIT %(limit)s OFFSET %(offset)s"
        )
        page_params = dict(params, limit=limit, offset=(page - 1) * limit)

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(count_query, params)
                    count_row = cur.fetchone()
                    cur.execute(page_query, page_params)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to list image assets",
                operation="list_active_assets",
                details={"category": category, "page": page, "limit": limit},
            ) from e

        total = count_row["total"] if count_row else 0
        return [_row_to_asset(row) for row in rows], total

    def get_categories(self) -> List[str]:
        """Distinct categories that have at least one active asset, sorted."""
        query = """
        SELECT DISTINCT category FROM image_assets
        WHERE is_active = TRUE
        ORDER BY category
        """

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to fetch categories", operation="get_categories"
            ) from e

        return [row["category"] for row in rows]

    def get_statistics(self) -> GalleryStatistics:
        totals_query = """
        SELECT
            COUNT(*) AS total_images,
            COUNT(*) FILTER (WHERE is_active) AS active_images,
            COALESCE(SUM(file_size) FILTER (WHERE is_active), 0) AS total_file_size
        FROM image_assets
        """
        breakdown_query = """
        SELECT category, COUNT(*) AS count
        FROM image_assets
        WHERE is_active = TRUE
        GROUP BY category
        ORDER BY count DESC, category ASC
        """

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(totals_query)
                    totals = cur.fetchone() or {}
                    cur.execute(breakdown_query)
                    breakdown = cur.fetchall()
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to compute gallery statistics", operation="get_statistics"
            ) from e

        return GalleryStatistics(
            total_images=totals.get("total_images", 0),
            active_images=totals.get("active_images", 0),
            total_file_size=int(totals.get("total_file_size", 0)),
            category_breakdown=[
                CategoryCount(category=row["category"], count=row["count"])
                for row in breakdown
            ],
        )

    def bulk_update_assets(
        self, asset_ids: Sequence[int], update_data: ImageAssetUpdate
    ) -> Tuple[int, int]:
        """
        Apply one patch to many active assets.

        Returns:
            (matched, modified): active assets among asset_ids, and how many
            of those actually changed
        """
        ids = list(dict.fromkeys(asset_ids))
        patch = update_data.to_patch()
        if not ids:
            return 0, 0
        if not patch:
            raise ValueError("Bulk update requires at least one field")

        set_clause = _build_set_clause(patch)
        changed_clause = " OR ".join(
            f"{column} IS DISTINCT FROM %({column})s" for column in patch
        )
        match_query = """
        SELECT COUNT(*) AS matched FROM image_assets
        WHERE id = ANY(%(ids)s) AND is_active = TRUE
        """
        update_query = f"""
        UPDATE image_assets
        SET {set_clause}, updated_at = %(updated_at)s
        WHERE id = ANY(%(ids)s) AND is_active = TRUE AND ({changed_clause})
        """
        params = dict(patch, ids=ids, updated_at=utc_now())

        try:
            with self.db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(match_query, {"ids": ids})
                    match_row = cur.fetchone()
                    cur.execute(update_query, params)
                    modified = cur.rowcount
        except psycopg.Error as e:
            raise ImageAssetOperationError(
                "Failed to bulk update image assets",
                operation="bulk_update_assets",
                details={"count": len(ids), "fields": sorted(patch)},
            ) from e

        matched = match_row["matched"] if match_row else 0
        return matched, max(0, modified)
