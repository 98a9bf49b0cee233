# gallery_media/database/core.py

"""
Sync database core for the metadata store.

Owns the psycopg connection pool. Built from explicit settings and passed
into operation classes, never read from a module-level global.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ..enums import LogEmoji, LoggerName
from ..services.logger import get_service_logger
from ..utils.time_utils import utc_now

logger = get_service_logger(LoggerName.DATABASE, LogEmoji.DATABASE)


class SyncDatabaseCore:
    """
    Core sync database functionality for composition-based architecture.

    Operation classes receive an instance and borrow connections through
    get_connection(). Each borrowed connection runs inside one transaction.
    """

    def __init__(
        self,
        database_url: str,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 30,
    ) -> None:
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max(min_size, max_size)
        self.timeout = timeout

        self._pool: Optional[ConnectionPool] = None
        self._connection_attempts = 0
        self._failed_connections = 0
        self._last_health_check = None
        self._pool_created_at = None

    @classmethod
    def from_settings(cls, settings) -> "SyncDatabaseCore":
        return cls(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            timeout=settings.db_pool_timeout,
        )

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    def initialize(self) -> None:
        """
        Initialize the sync connection pool.

        Must be called before using any database operations.

        Raises:
            psycopg.Error: If the pool cannot be opened
        """
        try:
            self._pool = ConnectionPool(
                self.database_url,
                min_size=self.min_size,
                max_size=self.max_size,
                timeout=self.timeout,
                kwargs={
                    "row_factory": dict_row,
                    "connect_timeout": 15,
                },
                open=False,
            )
            self._pool.open()
            self._pool_created_at = utc_now()
            self._connection_attempts = 0
            self._failed_connections = 0
            logger.info(
                "Database pool initialized",
                extra_context={"min_size": self.min_size, "max_size": self.max_size},
            )
        except (psycopg.Error, ConnectionError, OSError) as e:
            self._failed_connections += 1
            self._pool = None
            logger.error("Failed to initialize database pool", exception=e)
            raise

    def close(self) -> None:
        """Close the connection pool. Safe to call more than once."""
        if self._pool:
            self._pool.close()
            self._pool = None

    def check_pool_health(self) -> bool:
        """
        Check if the database connection pool is healthy.

        Returns:
            True if pool is healthy, False otherwise
        """
        if not self._pool:
            return False

        try:
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    cur.fetchone()

            self._last_health_check = utc_now()
            return True
        except psycopg.Error as e:
            self._failed_connections += 1
            logger.warning("Database health check failed", exception=e)
            return False

    def get_pool_stats(self) -> Dict[str, Any]:
        if not self._pool:
            return {"pool_initialized": False}

        return {
            "pool_initialized": True,
            "pool_created_at": self._pool_created_at,
            "connection_attempts": self._connection_attempts,
            "failed_connections": self._failed_connections,
            "last_health_check": self._last_health_check,
            "pool_size": self.max_size,
        }

    @contextmanager
    def get_connection(self) -> Generator[Any, None, None]:
        """
        Borrow a connection wrapped in a transaction.

        The transaction commits when the block exits normally and rolls back
        when it raises. Failures are not retried; the error reaches the
        caller unchanged.

        Yields:
            Connection: A sync database connection with dict_row factory

        Raises:
            RuntimeError: If the pool was never initialized
            psycopg.Error: On connection or query failure

        Usage:
            with db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT * FROM image_assets")
                    data = cur.fetchall()
        """
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        self._connection_attempts += 1
        try:
            with self._pool.connection() as conn:
                with conn.transaction():
                    yield conn
        except psycopg.OperationalError:
            self._failed_connections += 1
            raise


SyncDatabase = SyncDatabaseCore
