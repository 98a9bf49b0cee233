"""
Database Operation Exceptions

Database operations raise these instead of logging. The service layer
catches them, logs, and maps them onto the pipeline error taxonomy.

Usage:
    try:
        cur.execute(query, params)
    except psycopg.Error as e:
        raise ImageAssetOperationError(
            "Failed to create image asset", operation="create_asset"
        ) from e
"""

from typing import Any, Dict, Optional


class DatabaseOperationError(Exception):
    """Base exception for all database operation failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}

    def __str__(self):
        if self.operation:
            return f"{self.operation}: {super().__str__()}"
        return super().__str__()


class ImageAssetOperationError(DatabaseOperationError):
    """Image asset specific database operation errors."""

    pass
