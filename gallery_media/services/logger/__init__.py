"""
Centralized Logger Service Module.

Usage:
    from gallery_media.services.logger import get_service_logger
    from gallery_media.enums import LoggerName

    logger = get_service_logger(LoggerName.MEDIA_PIPELINE)
    logger.info("Ingested asset", extra_context={"asset_id": 12})
"""

from ...enums import LogEmoji, LoggerName, LogLevel
from .logger_service import configure_logging, get_service_logger

__all__ = [
    "configure_logging",
    "get_service_logger",
    "LogEmoji",
    "LoggerName",
    "LogLevel",
]
