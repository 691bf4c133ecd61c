"""Logging for the sync: colored console output, an optional rotating log file and run summaries."""

import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'notion_markdown_sync'

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LEVEL_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

# Index is the -v count, capped at the last entry
VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

REDACTED = '***REDACTED***'
SENSITIVE_KEYS = ('api_key', 'secret', 'token', 'password', 'auth_header')

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _resolve_level(verbosity: int, level: Optional[str]) -> int:
    """An explicit level name wins over the -v count."""
    if not level:
        return VERBOSITY_LEVELS[min(max(verbosity, 0), len(VERBOSITY_LEVELS) - 1)]

    name = level.upper()
    if name not in LEVEL_COLORS:
        raise ValueError(f"Invalid log level '{level}'. Must be one of: {sorted(LEVEL_COLORS)}")
    return getattr(logging, name)


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``notion_markdown_sync`` logger.

    Calling it again replaces the handlers installed by the previous call,
    so the CLI can reconfigure once the config file has been read.

    Args:
        verbosity: Number of -v flags (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Also write records to this file, rotated at 10MB
        log_format: Record format, shared by console and file
        date_format: strftime format for %(asctime)s
        level: Level name that overrides verbosity

    Returns:
        The configured package logger

    Raises:
        ValueError: If level is not a standard level name
    """
    log_level = _resolve_level(verbosity, level)
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors=LEVEL_COLORS
    ))
    logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding='utf-8'
            )
        except OSError as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
            logger.addHandler(file_handler)
            logger.info(f"Logging to {log_file} at {logging.getLevelName(log_level)}")

    return logger


class ProgressTracker:
    """Counts written and skipped pages and logs a summary when the block exits."""

    def __init__(self, total_items: int, item_type: str = "pages"):
        self.total_items = total_items
        self.item_type = item_type
        self.processed_items = 0
        self.written_items = 0
        self.skipped_items = 0
        self.start_time: Optional[float] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    def __enter__(self) -> 'ProgressTracker':
        self.start_time = time.monotonic()
        self.logger.info(f"Syncing {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return

        if exc_type is not None:
            log_method = self.logger.error
        elif self.skipped_items:
            log_method = self.logger.warning
        else:
            log_method = self.logger.info

        summary = (
            ('Total', self.total_items),
            ('Processed', self.processed_items),
            ('Written', self.written_items),
            ('Skipped', self.skipped_items),
            ('Elapsed Time', self._format_elapsed(time.monotonic() - self.start_time)),
        )
        log_method(f"=== Progress Summary: {self.item_type.upper()} ===")
        for label, value in summary:
            log_method(f"{label}: {value}")

    def increment(self, written: bool = True) -> None:
        """Record one page; ``written=False`` counts it as skipped."""
        self.processed_items += 1
        if written:
            self.written_items += 1
        else:
            self.skipped_items += 1

        if self.processed_items % 10 == 0:
            self.logger.info(
                f"{self.processed_items}/{self.total_items} {self.item_type} done"
            )

    @staticmethod
    def _format_elapsed(seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes, seconds = divmod(int(seconds), 60)
        return f"{minutes}m {seconds}s"


def log_section(title: str) -> None:
    """Log a banner line around ``title``."""
    logger = logging.getLogger(LOGGER_NAME)
    separator = "=" * 60
    for line in (separator, f"  {title.upper()}", separator):
        logger.info(line)


def log_config(config: Dict[str, Any]) -> None:
    """
    Log the effective settings at INFO, with credentials masked.

    Args:
        config: Merged configuration dictionary
    """
    logger = logging.getLogger(LOGGER_NAME)
    settings = _sanitize_config(config)
    notion = settings.get('notion', {})
    sync = settings.get('sync', {})
    export_settings = settings.get('export', {})

    log_section("Configuration")
    logger.info(f"Notion API: {notion.get('base_url', 'Not Set')} (version {notion.get('api_version', 'Not Set')})")
    logger.info(f"API Key: {notion.get('api_key') or 'Not Set'}")
    logger.info(f"Database ID: {notion.get('database_id', 'Not Set')}")
    logger.info(f"Published Only: {sync.get('published_only', False)}")
    logger.info(f"Throttle: {sync.get('throttle_ms', 334)} ms")
    logger.info(f"Default Docs Locale: {sync.get('default_doc_locale', 'en')}")
    logger.info(f"Content Root: {export_settings.get('content_root', 'src/content')}")
    logger.info(f"Images Directory: {export_settings.get('images_directory', 'public/images')}")


def _sanitize_config(data: Any) -> Any:
    """Return a copy of ``data`` with string values under credential-like keys masked."""
    if isinstance(data, dict):
        return {
            key: REDACTED
            if isinstance(value, str) and any(part in key.lower() for part in SENSITIVE_KEYS)
            else _sanitize_config(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_sanitize_config(item) for item in data]
    return data


__all__ = [
    'LOGGER_NAME',
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config'
]
