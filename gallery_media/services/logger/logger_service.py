# gallery_media/services/logger/logger_service.py
"""
Service logger factory built on loguru.

Every module asks for a logger bound to its LoggerName; the bound name and
any extra_context travel with the record so sinks can filter or serialize
them.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from ...enums import LogEmoji, LoggerName, LogLevel

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[logger_name]}</cyan> | "
    "<level>{message}</level>"
)
LOG_FILE_NAME = "gallery_media_{time:YYYY-MM-DD}.log"
LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "14 days"

logger.configure(extra={"logger_name": LoggerName.SYSTEM.value})


def configure_logging(settings) -> None:
    """
    Install the console sink and, when a log directory is configured, a
    rotating JSON file sink.

    Call once from the process entry point.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=LogLevel(settings.log_level).value,
        format=CONSOLE_FORMAT,
        colorize=sys.stderr.isatty(),
    )

    if settings.log_directory:
        log_dir = Path(settings.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / LOG_FILE_NAME),
            level=LogLevel(settings.log_level).value,
            rotation=LOG_FILE_ROTATION,
            retention=LOG_FILE_RETENTION,
            compression="gz",
            serialize=True,
            enqueue=True,
        )


def get_service_logger(
    logger_name: LoggerName,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Emoji priority (highest to lowest): passed to the log call, set on the
    service logger, level fallback.

    Example:
        logger = get_service_logger(LoggerName.MEDIA_PIPELINE)
        logger.error("Upload failed", exception=e, extra_context={"key": key})
    """
    bound = logger.bind(logger_name=logger_name.value)

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    def _emit(
        level: str,
        message: str,
        emoji: LogEmoji,
        extra_context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        target = bound.bind(**(extra_context or {}))
        # opt() replaces earlier options, so exception and depth go in one call.
        # depth=2 so records point at the caller, not this wrapper
        target.opt(exception=exception, depth=2).log(level, f"{emoji.value} {message}")

    class ServiceLogger:
        name = logger_name

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit(
                "ERROR",
                message,
                _resolve_emoji(emoji, LogEmoji.ERROR),
                extra_context,
                exception,
            )

        @staticmethod
        def warning(
            message: str,
            exception: Optional[BaseException] = None,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit(
                "WARNING",
                message,
                _resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context,
                exception,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit("INFO", message, _resolve_emoji(emoji, LogEmoji.INFO), extra_context)

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit(
                "DEBUG", message, _resolve_emoji(emoji, LogEmoji.DEBUG), extra_context
            )

    return ServiceLogger()
