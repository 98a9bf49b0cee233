# tests/unit/test_image_asset_operations.py
"""
Tests for SyncImageAssetOperations against a mocked psycopg connection.

Covers query shape, parameter binding, row conversion and error wrapping.
"""

from unittest.mock import Mock

import psycopg
import pytest

from gallery_media.database import (
    DatabaseOperationError,
    ImageAssetOperationError,
    SyncDatabaseCore,
    SyncImageAssetOperations,
)
from gallery_media.enums import AssetCategory, AssetSortOrder
from gallery_media.models import ImageAssetCreate, ImageAssetUpdate


def _executed(cursor, call_index=-1):
    """(query, params) of one cursor.execute call."""
    args = cursor.execute.call_args_list[call_index].args
    return args[0], (args[1] if len(args) > 1 else None)


@pytest.fixture
def create_payload():
    return ImageAssetCreate(
        title="Workshop opening",
        alt="People gathered at a workbench",
        category="workshop",
        storage_key="workshop/1705320000000-abcd1234.jpg",
        image_url="https://cdn.example.com/workshop/1705320000000-abcd1234.jpg",
        thumbnail_url="https://cdn.example.com/workshop/1705320000000-abcd1234.jpg",
        file_size=204800,
        mime_type="image/jpeg",
        width=1200,
        height=800,
    )


@pytest.mark.unit
@pytest.mark.database
class TestCreateAndFetch:
    """Test insert and lookup operations."""

    def test_create_asset(self, mock_sync_db, test_data, create_payload):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = test_data.create_asset_row()
        ops = SyncImageAssetOperations(db)

        asset = ops.create_asset(create_payload)

        query, params = _executed(cursor)
        assert "INSERT INTO image_assets" in query
        assert "RETURNING *" in query
        assert params["storage_key"] == create_payload.storage_key
        assert params["category"] == "workshop"
        assert params["created_at"] == params["updated_at"]
        assert asset.id == 1
        assert asset.category is AssetCategory.WORKSHOP

    def test_create_asset_wraps_psycopg_error(self, mock_sync_db, create_payload):
        db, conn, cursor = mock_sync_db
        cursor.execute.side_effect = psycopg.OperationalError("connection lost")
        ops = SyncImageAssetOperations(db)

        with pytest.raises(ImageAssetOperationError) as exc_info:
            ops.create_asset(create_payload)

        error = exc_info.value
        assert isinstance(error, DatabaseOperationError)
        assert error.operation == "create_asset"
        assert error.details["storage_key"] == create_payload.storage_key
        assert isinstance(error.__cause__, psycopg.OperationalError)
        assert str(error).startswith("create_asset: ")

    def test_create_asset_without_row(self, mock_sync_db, create_payload):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = None

        with pytest.raises(ImageAssetOperationError):
            SyncImageAssetOperations(db).create_asset(create_payload)

    def test_get_active_asset(self, mock_sync_db, test_data):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = test_data.create_asset_row(id=7)

        asset = SyncImageAssetOperations(db).get_active_asset_by_id(7)

        query, params = _executed(cursor)
        assert "is_active = TRUE" in query
        assert params == {"id": 7}
        assert asset.id == 7

    def test_get_including_inactive(self, mock_sync_db, test_data):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = test_data.create_asset_row(is_active=False)

        asset = SyncImageAssetOperations(db).get_asset_by_id(1, include_inactive=True)

        query, _ = _executed(cursor)
        assert "is_active" not in query
        assert asset.is_active is False

    def test_get_missing(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = None

        assert SyncImageAssetOperations(db).get_active_asset_by_id(404) is None

    def test_ensure_schema(self, mock_sync_db):
        db, conn, cursor = mock_sync_db

        SyncImageAssetOperations(db).ensure_schema()

        query, _ = _executed(cursor)
        assert "CREATE TABLE IF NOT EXISTS image_assets" in query
        assert "'calligraphy'" in query
        assert "BETWEEN -100 AND 100" in query


@pytest.mark.unit
@pytest.mark.database
class TestUpdateAndDelete:
    """Test patch and delete operations."""

    def test_update_sets_only_patched_columns(self, mock_sync_db, test_data):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = test_data.create_asset_row(title="Renamed")

        asset = SyncImageAssetOperations(db).update_asset(
            1, ImageAssetUpdate(title="Renamed", priority=-300)
        )

        query, params = _executed(cursor)
        assert "title = %(title)s" in query
        assert "priority = %(priority)s" in query
        assert "alt =" not in query
        assert "WHERE id = %(id)s AND is_active = TRUE" in query
        assert params["priority"] == -100
        assert params["id"] == 1
        assert "updated_at" in params
        assert asset.title == "Renamed"

    def test_update_missing_returns_none(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = None

        assert SyncImageAssetOperations(db).update_asset(9, ImageAssetUpdate(alt="x")) is None

    def test_empty_patch_reads_current(self, mock_sync_db, test_data):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = test_data.create_asset_row()

        SyncImageAssetOperations(db).update_asset(1, ImageAssetUpdate())

        query, _ = _executed(cursor)
        assert query.startswith("SELECT")

    def test_update_error(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.execute.side_effect = psycopg.errors.CheckViolation("priority")

        with pytest.raises(ImageAssetOperationError) as exc_info:
            SyncImageAssetOperations(db).update_asset(1, ImageAssetUpdate(priority=5))

        assert exc_info.value.operation == "update_asset"

    @pytest.mark.parametrize("row,expected", [({"id": 3}, True), (None, False)])
    def test_delete(self, mock_sync_db, row, expected):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = row

        assert SyncImageAssetOperations(db).delete_asset(3) is expected
        query, _ = _executed(cursor)
        assert query.startswith("DELETE FROM image_assets")

    def test_bulk_update(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = {"matched": 3}
        cursor.rowcount = 2

        matched, modified = SyncImageAssetOperations(db).bulk_update_assets(
            [1, 2, 3, 3], ImageAssetUpdate(category="events")
        )

        assert (matched, modified) == (3, 2)
        update_query, params = _executed(cursor)
        assert "id = ANY(%(ids)s)" in update_query
        assert "category IS DISTINCT FROM %(category)s" in update_query
        assert params["ids"] == [1, 2, 3]

    def test_bulk_update_no_ids(self, mock_sync_db):
        db, conn, cursor = mock_sync_db

        result = SyncImageAssetOperations(db).bulk_update_assets([], ImageAssetUpdate(priority=1))

        assert result == (0, 0)
        cursor.execute.assert_not_called()

    def test_bulk_update_requires_fields(self, mock_sync_db):
        db, conn, cursor = mock_sync_db

        with pytest.raises(ValueError):
            SyncImageAssetOperations(db).bulk_update_assets([1], ImageAssetUpdate())


@pytest.mark.unit
@pytest.mark.database
class TestListingAndStatistics:
    """Test listing, categories and statistics queries."""

    def test_list_defaults(self, mock_sync_db, test_data):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = {"total": 2}
        cursor.fetchall.return_value = [
            test_data.create_asset_row(id=1),
            test_data.create_asset_row(id=2, storage_key="workshop/2.jpg"),
        ]

        assets, total = SyncImageAssetOperations(db).list_active_assets()

        assert total == 2
        assert [a.id for a in assets] == [1, 2]
        page_query, params = _executed(cursor)
        assert "ORDER BY created_at DESC" in page_query
        assert params == {"limit": 20, "offset": 0}

    def test_list_filters_and_paging(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = {"total": 0}
        cursor.fetchall.return_value = []

        SyncImageAssetOperations(db).list_active_assets(
            category="events", featured=True, sort=AssetSortOrder.PRIORITY, page=3, limit=500
        )

        count_query, count_params = _executed(cursor, 0)
        page_query, page_params = _executed(cursor, 1)
        assert "category = %(category)s" in count_query
        assert "priority >= %(featured_threshold)s" in count_query
        assert count_params == {"category": "events", "featured_threshold": 50}
        assert "ORDER BY priority DESC" in page_query
        assert page_params["limit"] == 100
        assert page_params["offset"] == 200

    def test_list_all_categories(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = {"total": 0}
        cursor.fetchall.return_value = []

        SyncImageAssetOperations(db).list_active_assets(category="all", sort="title")

        count_query, count_params = _executed(cursor, 0)
        assert "category" not in count_query
        assert count_params == {}

    def test_list_unknown_category(self, mock_sync_db):
        db, conn, cursor = mock_sync_db

        with pytest.raises(ValueError):
            SyncImageAssetOperations(db).list_active_assets(category="landscapes")

    def test_get_categories(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchall.return_value = [{"category": "artwork"}, {"category": "events"}]

        assert SyncImageAssetOperations(db).get_categories() == ["artwork", "events"]

    def test_get_statistics(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.fetchone.return_value = {
            "total_images": 5,
            "active_images": 4,
            "total_file_size": 3 * 1024 * 1024,
        }
        cursor.fetchall.return_value = [
            {"category": "events", "count": 3},
            {"category": "general", "count": 1},
        ]

        stats = SyncImageAssetOperations(db).get_statistics()

        assert stats.total_images == 5
        assert stats.active_images == 4
        assert stats.formatted_file_size == "3 MB"
        assert [c.category for c in stats.category_breakdown] == [
            AssetCategory.EVENTS,
            AssetCategory.GENERAL,
        ]

    def test_statistics_error(self, mock_sync_db):
        db, conn, cursor = mock_sync_db
        cursor.execute.side_effect = psycopg.Error("boom")

        with pytest.raises(ImageAssetOperationError) as exc_info:
            SyncImageAssetOperations(db).get_statistics()

        assert exc_info.value.operation == "get_statistics"


@pytest.mark.unit
@pytest.mark.database
class TestSyncDatabaseCore:
    """Test pool lifecycle guards."""

    def test_connection_requires_initialize(self):
        db = SyncDatabaseCore("postgresql://localhost/test")

        with pytest.raises(RuntimeError):
            with db.get_connection():
                pass

    def test_pool_stats_before_initialize(self):
        db = SyncDatabaseCore("postgresql://localhost/test")

        assert db.get_pool_stats() == {"pool_initialized": False}
        assert db.check_pool_health() is False
        assert db.is_initialized is False

    def test_from_settings(self):
        settings = Mock(
            database_url="postgresql://db/gallery",
            db_pool_min_size=2,
            db_pool_max_size=8,
            db_pool_timeout=12,
        )

        db = SyncDatabaseCore.from_settings(settings)

        assert (db.database_url, db.min_size, db.max_size, db.timeout) == (
            "postgresql://db/gallery",
            2,
            8,
            12,
        )

    def test_close_without_pool(self):
        SyncDatabaseCore("postgresql://localhost/test").close()
