"""
Logging for sink dialects.

Modules log through ``get_logger(__name__)``; the bound name is what the
configured format prints, so dialect and registry messages show where they
came from.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from sink_dialects.config import LoggingConfig, get_config

# Records logged without get_logger() still need a name for the format
_logger.configure(extra={"name": __package__})


def setup_logger(
    config: Optional[LoggingConfig] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Replace the loguru handlers with the ones a LoggingConfig describes.

    Args:
        config: Logging section; defaults to ``get_config().logging``
        level: Overrides the configured level
        log_file: Overrides the configured file path and enables the file handler
    """
    config = config or get_config().logging
    level = level or config.level

    _logger.remove()

    if config.console_enabled:
        _logger.add(
            sys.stderr,
            format=config.format,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    if config.file_enabled or log_file is not None:
        log_path = Path(log_file or config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        _logger.add(
            log_path,
            format=config.format,
            level=level,
            rotation=config.rotation,
            retention=config.retention,
            encoding="utf-8",
            enqueue=True,  # Thread-safe logging
            backtrace=True,
            diagnose=True,
        )


def get_logger(name: str):
    """Get a logger bound to a module name.

    Args:
        name: Module name, typically ``__name__``

    Returns:
        Logger instance whose records carry ``extra["name"]``
    """
    return _logger.bind(name=name)


__all__ = [
    "setup_logger",
    "get_logger",
]
