"""Utilities shared by localpdf components."""

from __future__ import annotations

import logging
import re
from pathlib import Path

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    resolved = Path(path).expanduser().resolve()
    return resolved


def base_name(display_name: str) -> str:
    """Return ``display_name`` without a trailing ``.pdf`` suffix."""

    return _PDF_SUFFIX.sub("", display_name) or "document"
