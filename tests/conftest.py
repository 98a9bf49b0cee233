# tests/conftest.py
"""
Pytest configuration and shared fixtures for gallery media tests.

Codec paths run against real Pillow-generated images. The metadata store is
either a mocked psycopg connection/cursor or an in-memory fake, and object
storage lives in a temporary directory, so no test needs a database or
network.
"""

import io
import struct
import zlib
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
from PIL import Image

from gallery_media.database import ImageAssetOperationError
from gallery_media.exceptions import StorageError
from gallery_media.models import ImageAsset, ImageAssetCreate, ImageAssetUpdate
from gallery_media.services.media_pipeline import (
    ImageValidator,
    IngestionPipeline,
    ThumbnailGenerator,
    Transcoder,
)
from gallery_media.storage import LocalObjectStore


def make_image_bytes(
    width: int = 640,
    height: int = 480,
    fmt: str = "JPEG",
    mode: str = "RGB",
    color: Any = (200, 80, 40),
) -> bytes:
    """Encode a solid-colour image in memory."""
    if mode == "RGBA" and len(color) == 3:
        color = (*color, 128)
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, fmt)
    return buffer.getvalue()


@pytest.fixture
def image_factory():
    """Provide the in-memory image encoder to tests."""
    return make_image_bytes


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes(640, 480)


def make_png_header(width: int, height: int) -> bytes:
    """
    Well-formed PNG whose header declares width x height over a tiny IDAT.

    Opens and verifies fine but would never decode, so it stands in for
    images past Pillow's decompression bomb limit without the memory.
    """

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def oversized_png():
    """PNG header declaring 20000x20000, past the decompression bomb limit."""
    return make_png_header(20000, 20000)


@pytest.fixture
def mock_sync_db():
    """
    Mock sync database connection for testing sync database operations.

    Returns:
        tuple: (db_mock, connection_mock, cursor_mock) for easy access in tests
    """
    db = Mock()
    conn = Mock()
    cursor = Mock()

    db.get_connection.return_value.__enter__ = Mock(return_value=conn)
    db.get_connection.return_value.__exit__ = Mock(return_value=None)
    conn.cursor.return_value.__enter__ = Mock(return_value=cursor)
    conn.cursor.return_value.__exit__ = Mock(return_value=None)

    return db, conn, cursor


@pytest.fixture
def mock_current_time():
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestDataFactory:
    """Factory for consistent image_assets rows."""

    __test__ = False

    @staticmethod
    def create_asset_row(**overrides) -> Dict[str, Any]:
        now = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        defaults = {
            "id": 1,
            "title": "Workshop opening",
            "description": None,
            "alt": "People gathered at a workbench",
            "category": "workshop",
            "storage_key": "workshop/1705320000000-abcd1234.jpg",
            "thumbnail_key": None,
            "image_url": "https://cdn.example.com/workshop/1705320000000-abcd1234.jpg",
            "thumbnail_url": "https://cdn.example.com/workshop/1705320000000-abcd1234.jpg",
            "file_size": 204800,
            "mime_type": "image/jpeg",
            "width": 1200,
            "height": 800,
            "priority": 0,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        defaults.update(overrides)
        return defaults


@pytest.fixture
def test_data():
    """Provide test data factory to tests."""
    return TestDataFactory


class InMemoryAssetOperations:
    """
    Stand-in for SyncImageAssetOperations keeping records in a dict.

    Set fail_create to an exception to simulate a failing insert.
    """

    def __init__(self):
        self.records: Dict[int, ImageAsset] = {}
        self.next_id = 1
        self.fail_create: Optional[BaseException] = None
        self.created: List[ImageAssetCreate] = []

    def create_asset(self, asset_data: ImageAssetCreate) -> ImageAsset:
        self.created.append(asset_data)
        if self.fail_create is not None:
            raise self.fail_create
        now = datetime.now(timezone.utc)
        asset = ImageAsset(
            id=self.next_id,
            **asset_data.model_dump(),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.records[asset.id] = asset
        self.next_id += 1
        return asset

    def get_asset_by_id(self, asset_id: int, include_inactive: bool = False):
        asset = self.records.get(asset_id)
        if asset is None or (not include_inactive and not asset.is_active):
            return None
        return asset

    def get_active_asset_by_id(self, asset_id: int):
        return self.get_asset_by_id(asset_id)

    def update_asset(self, asset_id: int, update_data: ImageAssetUpdate):
        asset = self.get_active_asset_by_id(asset_id)
        if asset is None:
            return None
        changes = update_data.model_dump(exclude_unset=True)
        changes["updated_at"] = datetime.now(timezone.utc)
        updated = asset.model_copy(update=changes)
        self.records[asset_id] = updated
        return updated

    def delete_asset(self, asset_id: int) -> bool:
        return self.records.pop(asset_id, None) is not None


class FlakyObjectStore(LocalObjectStore):
    """Local store whose upload/delete can be made to fail per key prefix."""

    def __init__(self, root_directory: str):
        super().__init__(root_directory, public_base_url="https://cdn.example.com")
        self.fail_upload_for: List[str] = []
        self.fail_delete = False
        self.uploads: List[str] = []
        self.deletes: List[str] = []

    def upload(self, key, data, content_type):
        self.uploads.append(key)
        if any(marker in key for marker in self.fail_upload_for):
            raise StorageError(f"Simulated upload failure for {key}", key=key, operation="upload")
        return super().upload(key, data, content_type)

    def delete(self, key):
        self.deletes.append(key)
        if self.fail_delete:
            raise StorageError(f"Simulated delete failure for {key}", key=key, operation="delete")
        super().delete(key)


@pytest.fixture
def asset_ops():
    return InMemoryAssetOperations()


@pytest.fixture
def object_store(tmp_path):
    return FlakyObjectStore(str(tmp_path / "objects"))


@pytest.fixture
def pipeline(object_store, asset_ops):
    """Pipeline over the in-memory metadata store and a temp-dir object store."""
    return IngestionPipeline(
        validator=ImageValidator(),
        transcoder=Transcoder(),
        thumbnail_generator=ThumbnailGenerator(),
        object_store=object_store,
        asset_ops=asset_ops,
    )


@pytest.fixture
def declared_fields():
    return {
        "title": "  Calligraphy class  ",
        "alt": "Brush strokes on rice paper",
        "category": "calligraphy",
        "priority": "12",
    }


@pytest.fixture
def persistence_failure():
    return ImageAssetOperationError("insert failed", operation="create_asset")
