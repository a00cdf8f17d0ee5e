"""
Centralized logging configuration for tabtree.

Key behaviors
-------------
* ``get_logger`` is the single entry point, so every module shares the same
  console handler and master log file.
* Per-module log files (``logs/tabtree_loader_reader.log`` etc.) can be
  switched off with ``logging.module_files: false`` in ``config/tabtree.yml``.
* ``debug: true`` in the config forces DEBUG output everywhere.
"""

from __future__ import annotations

import logging
from logging import Logger, StreamHandler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from tabtree.config import get_config

PROJECT_ROOT = Path(__file__).resolve().parents[3]
BASE_LOGGER_NAME = "tabtree"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger_cache: Dict[str, Logger] = {}
_base_configured: bool = False
_effective_level: int = logging.INFO
_module_files: bool = True
_rotate_logs: bool = False


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

def _log_dir() -> Path:
    """Resolve (and create) the log directory from configuration."""
    cfg = get_config()

    configured = cfg.logging.get("dir") or cfg.paths.get("logs_dir") or "logs"
    log_dir = Path(configured)
    if not log_dir.is_absolute():
        log_dir = PROJECT_ROOT / log_dir

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(path: Path) -> logging.Handler:
    if _rotate_logs:
        handler: logging.Handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setLevel(_effective_level)
    handler.setFormatter(_formatter())
    return handler


def _configure_base_logger() -> Logger:
    """Attach console + master file handlers to the package logger, once."""
    global _base_configured, _effective_level, _module_files, _rotate_logs

    base_logger = logging.getLogger(BASE_LOGGER_NAME)
    if _base_configured:
        return base_logger

    cfg = get_config()
    _rotate_logs = bool(cfg.logging.get("rotate", False))
    _module_files = bool(cfg.logging.get("module_files", True))
    master_name = cfg.logging.get("file", "tabtree.log")

    level_name = str(cfg.logging.get("level", "INFO")).upper()
    debug_enabled = bool(cfg.debug)
    _effective_level = (
        logging.DEBUG if debug_enabled else getattr(logging, level_name, logging.INFO)
    )

    base_logger.setLevel(_effective_level)
    base_logger.propagate = False
    base_logger.addHandler(_file_handler(_log_dir() / master_name))

    # Console stays at WARNING unless debugging, so CLI output is not drowned
    console = StreamHandler()
    console.setLevel(logging.DEBUG if debug_enabled else logging.WARNING)
    console.setFormatter(_formatter())
    base_logger.addHandler(console)

    _base_configured = True
    return base_logger


def _attach_module_handler(logger: Logger) -> None:
    if any(getattr(h, "is_module_handler", False) for h in logger.handlers):
        return

    filename = f"{logger.name.replace('.', '_')}.log"
    handler = _file_handler(_log_dir() / filename)
    handler.is_module_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def get_logger(name: str | None = None) -> Logger:
    """Return a logger wired to the project-wide handlers.

    Names outside the ``tabtree`` namespace are nested under it so that they
    still reach the shared console and master file handlers.
    """
    base_logger = _configure_base_logger()

    logger_name = name or BASE_LOGGER_NAME
    if logger_name != BASE_LOGGER_NAME and not logger_name.startswith(BASE_LOGGER_NAME + "."):
        logger_name = f"{BASE_LOGGER_NAME}.{logger_name}"

    if logger_name == BASE_LOGGER_NAME:
        return base_logger

    logger = logging.getLogger(logger_name)
    logger.setLevel(_effective_level)
    logger.propagate = True
    if _module_files:
        _attach_module_handler(logger)

    _logger_cache[logger_name] = logger
    return logger


def set_debug(enabled: bool) -> None:
    """Switch every tabtree logger between DEBUG and the configured level."""
    global _effective_level

    base_logger = _configure_base_logger()
    cfg = get_config()
    level_name = str(cfg.logging.get("level", "INFO")).upper()
    _effective_level = logging.DEBUG if enabled else getattr(logging, level_name, logging.INFO)

    for logger in [base_logger, *_logger_cache.values()]:
        logger.setLevel(_effective_level)
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler):
                handler.setLevel(_effective_level)
            else:
                handler.setLevel(logging.DEBUG if enabled else logging.WARNING)
