"""
Metadata store for ingested image assets.

SyncDatabase owns the psycopg pool; SyncImageAssetOperations holds the
image_assets queries and is what the ingestion pipeline talks to.
"""

from .core import SyncDatabase, SyncDatabaseCore
from .exceptions import DatabaseOperationError, ImageAssetOperationError
from .image_asset_operations import SyncImageAssetOperations

__all__ = [
    "SyncDatabase",
    "SyncDatabaseCore",
    "DatabaseOperationError",
    "ImageAssetOperationError",
    "SyncImageAssetOperations",
]
