"""Logging configuration for customsource."""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from customsource.utils.files import get_logs_path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value.

    'ALL' means every record. Unknown names fall back to DEBUG.
    """
    if level.upper() == 'ALL':
        return logging.NOTSET
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.DEBUG


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, '_customsource', False)


def setup_local_logging(
    level: str = 'DEBUG',
    console_level: str | None = None,
    console: Console | None = None,
) -> Path:
    """Set up file logging for one run, and optionally echo records to the console.

    Creates ``run_<timestamp>.log`` in .customsource/logs/ and attaches it to
    the root logger. When ``console_level`` is given, records at or above it
    are also rendered through rich on ``console``. Handlers added by an
    earlier call are replaced, so calling this twice does not duplicate
    output.

    Args:
        level: File log level (e.g., 'DEBUG', 'INFO', 'ALL'). Defaults to 'DEBUG'.
        console_level: Console log level, or None to keep the console quiet
        console: Rich console for the console handler. Defaults to a new one.

    Returns:
        Path: The path to the created log file.

    """
    logs_dir = get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = logs_dir / f'run_{timestamp}.log'

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if _is_ours(h)]:
        root_logger.removeHandler(handler)
        handler.close()

    file_level = resolve_level(level)
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler._customsource = True
    root_logger.addHandler(file_handler)
    levels = [file_level]

    if console_level is not None:
        console_handler = RichHandler(console=console, show_path=False, markup=False)
        console_handler.setLevel(resolve_level(console_level))
        console_handler._customsource = True
        root_logger.addHandler(console_handler)
        levels.append(console_handler.level)

    root_logger.setLevel(min(levels))
    return log_file
