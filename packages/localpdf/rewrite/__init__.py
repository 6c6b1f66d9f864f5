"""Rewrite engine adapter (decryption and recompression)."""

from __future__ import annotations

from .adapter import RewriteAdapter, get_rewrite_adapter, reset_rewrite_adapter
from .backends import Backend, BackendType, RewriteEngineError

__all__ = [
    "Backend",
    "BackendType",
    "RewriteAdapter",
    "RewriteEngineError",
    "get_rewrite_adapter",
    "reset_rewrite_adapter",
]
