"""core/logging.py — Structured JSON logging with optional rotating file output.

Call configure_logging() once at application startup (lifespan in api/main.py);
calling it again replaces the handlers it installed before.
After that, use standard logging.getLogger(__name__) throughout the app.

Output:
  - Console — JSON lines to stdout
  - File    — JSON lines, rotated at 10 MB, 5 backups kept.
              Relative paths resolve against the project root; an empty
              path disables the file handler entirely.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys

from pythonjsonlogger.json import JsonFormatter


_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
_MAX_BYTES = 10 * 1024 * 1024   # 10 MB per file
_BACKUP_COUNT = 5                # keep 5 rotated files

_installed_handlers: list[logging.Handler] = []


def configure_logging(log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger with a JSON console handler and, optionally, a file.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
                   Passed from settings.log_level at startup.
        log_file:  Path of the rotating log file, or None/"" for console only.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    fmt = "%(asctime)s %(name)s %(levelname)s %(message)s"
    formatter = JsonFormatter(fmt)

    handlers: list[logging.Handler] = []

    # ── Console handler ────────────────────────────────────────────────────────
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    # ── Rotating file handler ──────────────────────────────────────────────────
    log_path = None
    if log_file:
        log_path = log_file if os.path.isabs(log_file) else os.path.join(_PROJECT_ROOT, log_file)
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        handlers.append(file_handler)

    # ── Root logger ────────────────────────────────────────────────────────────
    # Only handlers installed by an earlier call are replaced; handlers owned
    # by the host (a test runner, a process manager) stay attached.
    root = logging.getLogger()
    root.setLevel(level)
    reset_logging()
    for handler in handlers:
        root.addHandler(handler)
    _installed_handlers.extend(handlers)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={"log_level": log_level, "log_file": log_path},
    )


def reset_logging() -> None:
    """Detach and close every handler configure_logging() installed."""
    root = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.close()
