"""Logging setup helper with rotating file handler for reliability."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional


def setup_logging(cfg: Dict[str, Any]) -> logging.Logger:
    """Configure the root logger with a rotating-file and optional console output.

    Both outputs are opt-in: the file handler needs ``file`` and the console
    handler needs ``console: true``, since the console doubles as the blink
    display.  A log file that cannot be opened is skipped with a warning
    rather than stopping the diagnosis.

    Parameters
    ----------
    cfg : dict
        The ``logging`` section of ``blinky.yaml``.

    Returns
    -------
    logging.Logger
        The configured root logger.
    """
    level = cfg.get("level", "INFO")
    log_file = cfg.get("file")
    fmt = cfg.get("format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    rotate = cfg.get("rotate", {})
    max_bytes = rotate.get("max_bytes", 1_048_576)
    backup_count = rotate.get("backup_count", 3)

    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = []

    file_error: Optional[OSError] = None
    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count
            )
        except OSError as exc:
            file_error = exc
        else:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    if cfg.get("console", False):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers = handlers

    if file_error is not None:
        logging.getLogger(__name__).warning("Log file %s unavailable: %s", log_file, file_error)

    return root
