"""Store-only archive packaging for multi-output jobs."""

from __future__ import annotations

from .zipstore import ArchiveEntry, build_archive, crc32, dos_date_time

__all__ = ["ArchiveEntry", "build_archive", "crc32", "dos_date_time"]
