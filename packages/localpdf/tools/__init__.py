"""Namespace for the operations dispatched by the job engine."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_operations() -> None:
    from .combiner import combine  # noqa: F401  # register combine
    from .extractor import extract  # noqa: F401
    from .shrinker import shrink  # noqa: F401
    from .rasterizer import rasterize  # noqa: F401

    registry.check_complete()


__all__ = ["registry", "load_builtin_operations"]
