from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path

from . import config

LOGGER = logging.getLogger("casestatus")
_LOGGER_INITIALISED = False
# Serialises handler setup across request threads.
_LOGGER_LOCK = threading.RLock()


def _configure_logger(log_path: Path) -> None:
    """Configure the shared application logger to write to ``log_path``."""

    global _LOGGER_INITIALISED

    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    with _LOGGER_LOCK:
        for handler in list(LOGGER.handlers):
            LOGGER.removeHandler(handler)
            try:
                handler.close()
            except Exception:  # noqa: BLE001
                continue

        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)

        LOGGER.setLevel(logging.INFO)
        LOGGER.addHandler(stream_handler)
        LOGGER.addHandler(file_handler)
        LOGGER.propagate = False

        _LOGGER_INITIALISED = True


def _ensure_logger() -> None:
    """Initialise the logger lazily using the default log file."""

    if _LOGGER_INITIALISED:
        return

    with _LOGGER_LOCK:
        # Another thread may have finished setup while this one waited.
        if not _LOGGER_INITIALISED:
            _configure_logger(config.LOG_FILE)


def setup_run_logger() -> Path:
    """Rotate to a fresh timestamped log file for a CLI lookup."""

    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    log_path = config.LOG_DIR / f"lookup_{timestamp}.log"
    _configure_logger(log_path)
    LOGGER.info("Logging to %s", log_path)
    return log_path


def ensure_dirs() -> None:
    """Ensure that the application's expected directory structure exists."""

    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    config.CAPTCHA_DIR.mkdir(parents=True, exist_ok=True)
    config.DEBUG_DIR.mkdir(parents=True, exist_ok=True)


def log_line(message: str) -> None:
    """Write a timestamped log line to stdout and the active log file."""

    _ensure_logger()
    LOGGER.info(message)


def log_exception(message: str) -> None:
    """Write ``message`` followed by the active traceback."""

    _ensure_logger()
    LOGGER.exception(message)


def short_error_message(exc: BaseException, max_length: int = 200) -> str:
    """Return a single-line, bounded description of ``exc``."""

    text = f"{type(exc).__name__}: {exc}".replace("\n", " ").strip()
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


__all__ = [
    "LOGGER",
    "ensure_dirs",
    "log_exception",
    "log_line",
    "setup_run_logger",
    "short_error_message",
]
