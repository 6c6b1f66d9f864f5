"""Runtime configuration for the localpdf engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

BACKEND_CHOICES = ("auto", "qpdf", "pypdf")
DEFAULT_JPEG_QUALITY = 85


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Settings controlling the rewrite backend and rendering output."""

    backend: str = "auto"
    qpdf_executable: str | None = None
    work_dir: Path | None = None
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    log_level: str | None = None

    def __post_init__(self) -> None:
        if self.backend not in BACKEND_CHOICES:
            raise ValueError(
                f"Unsupported backend '{self.backend}', expected one of {', '.join(BACKEND_CHOICES)}"
            )
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("JPEG quality must be between 1 and 100")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        env = os.environ if environ is None else environ

        raw_quality = env.get("LOCALPDF_JPEG_QUALITY")
        jpeg_quality = DEFAULT_JPEG_QUALITY
        if raw_quality:
            try:
                jpeg_quality = int(raw_quality)
            except ValueError as exc:
                raise ValueError(f"LOCALPDF_JPEG_QUALITY must be an integer, got {raw_quality!r}") from exc

        work_dir = env.get("LOCALPDF_WORKDIR")
        log_level = env.get("LOCALPDF_LOG_LEVEL")
        if log_level and not isinstance(logging.getLevelName(log_level.upper()), int):
            raise ValueError(f"LOCALPDF_LOG_LEVEL is not a valid level: {log_level!r}")

        return cls(
            backend=(env.get("LOCALPDF_BACKEND") or "auto").lower(),
            qpdf_executable=env.get("LOCALPDF_QPDF") or None,
            work_dir=Path(work_dir).expanduser() if work_dir else None,
            jpeg_quality=jpeg_quality,
            log_level=log_level.upper() if log_level else None,
        )

    def apply_logging(self) -> None:
        """Apply :attr:`log_level` to the ``localpdf`` logger hierarchy."""

        if self.log_level:
            logging.getLogger("localpdf").setLevel(self.log_level)


__all__ = ["EngineSettings", "BACKEND_CHOICES", "DEFAULT_JPEG_QUALITY"]
