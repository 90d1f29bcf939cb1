"""
Logging for the tax receipt package.

Modules log through ``get_logger("<module>")``, which hangs off the
``tax_receipt`` logger.  ``ReceiptPipeline`` calls ``configure_logging`` with
the level and optional log file from ``ReceiptConfig``; repeated calls
(one per pipeline) update the level and never stack duplicate handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "tax_receipt"

# Marks the console handler this module installed
_CONSOLE_ATTR = "_tax_receipt_console"


def _file_handler_for(root: logging.Logger, path: str) -> Optional[logging.FileHandler]:
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return handler
    return None


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Attach handlers to the ``tax_receipt`` logger and set its level.

    A stdout handler is installed on the first call.  When *log_file* is
    given, a UTF-8 ``FileHandler`` for that path is added unless one is
    already attached.  Returns the package logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(getattr(h, _CONSOLE_ATTR, False) for h in root.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        setattr(console, _CONSOLE_ATTR, True)
        root.addHandler(console)

    if log_file:
        path = os.path.abspath(os.fspath(log_file))
        if _file_handler_for(root, path) is None:
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)

    for handler in root.handlers:
        handler.setLevel(level)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``tax_receipt`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
