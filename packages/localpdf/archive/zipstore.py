"""Minimal ZIP encoder using the *store* method.

Outputs are packaged without compression: rendered pages and PDF documents
are already compressed, so the encoder only writes the container records.
Every entry is laid out as::

    local header | name | payload      (repeated per entry)
    central directory record | name   (repeated per entry)
    end of central directory record

All integers are little-endian.
"""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Sequence

from ..core.exceptions import ArchiveError
from ..core.utils import get_logger

LOGGER = get_logger("localpdf.archive")

LOCAL_HEADER_SIGNATURE = 0x04034B50
CENTRAL_HEADER_SIGNATURE = 0x02014B50
END_OF_DIRECTORY_SIGNATURE = 0x06054B50

VERSION = 20
METHOD_STORE = 0
FLAG_UTF8 = 0x0800

_LOCAL_HEADER = struct.Struct("<IHHHHHIIIHH")
_CENTRAL_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")
_END_OF_DIRECTORY = struct.Struct("<IHHHHIIH")

_MAX_ENTRIES = 0xFFFF
_MAX_SIZE = 0xFFFFFFFF


def crc32(data: bytes) -> int:
    """Return the CRC-32 checksum of ``data``."""

    return zlib.crc32(data) & 0xFFFFFFFF


def dos_date_time(moment: datetime) -> tuple[int, int]:
    """Pack ``moment`` into 16-bit DOS ``(time, date)`` values."""

    year = max(moment.year, 1980)
    time = (moment.hour << 11) | (moment.minute << 5) | (moment.second // 2)
    date = ((year - 1980) << 9) | (moment.month << 5) | moment.day
    return time & 0xFFFF, date & 0xFFFF


@dataclass(frozen=True)
class ArchiveEntry:
    """A named payload stored in an archive."""

    name: str
    data: bytes


def _encode_name(name: str) -> tuple[bytes, int]:
    try:
        return name.encode("ascii"), 0
    except UnicodeEncodeError:
        return name.encode("utf-8"), FLAG_UTF8


def _check_entries(entries: Sequence[ArchiveEntry]) -> None:
    if len(entries) > _MAX_ENTRIES:
        raise ArchiveError(f"Too many archive entries: {len(entries)} (limit {_MAX_ENTRIES})")
    seen: set[str] = set()
    for entry in entries:
        if not entry.name:
            raise ArchiveError("Archive entry names must not be empty")
        if entry.name in seen:
            raise ArchiveError(f"Duplicate archive entry name: {entry.name}")
        seen.add(entry.name)


def build_archive(
    entries: Iterable[ArchiveEntry],
    *,
    clock: Callable[[], datetime] | None = None,
) -> bytes:
    """Package ``entries`` into a single store-only ZIP archive.

    Entries keep their insertion order in the central directory. Timestamps
    come from ``clock`` (default: the current local time), so output is only
    byte-for-byte reproducible when a fixed clock is supplied.

    Raises:
        ArchiveError: On duplicate or empty names, or when the archive would
            need ZIP64 records.
    """

    items = list(entries)
    _check_entries(items)
    time, date = dos_date_time((clock or datetime.now)())

    body = bytearray()
    directory = bytearray()
    for entry in items:
        data = bytes(entry.data)
        name, flags = _encode_name(entry.name)
        offset = len(body)
        if len(data) > _MAX_SIZE or offset > _MAX_SIZE:
            raise ArchiveError(f"Archive entry too large for a store archive: {entry.name}")
        checksum = crc32(data)

        body += _LOCAL_HEADER.pack(
            LOCAL_HEADER_SIGNATURE,
            VERSION,
            flags,
            METHOD_STORE,
            time,
            date,
            checksum,
            len(data),
            len(data),
            len(name),
            0,
        )
        body += name
        body += data

        directory += _CENTRAL_HEADER.pack(
            CENTRAL_HEADER_SIGNATURE,
            VERSION,
            VERSION,
            flags,
            METHOD_STORE,
            time,
            date,
            checksum,
            len(data),
            len(data),
            len(name),
            0,  # extra length
            0,  # comment length
            0,  # disk number start
            0,  # internal attributes
            0,  # external attributes
            offset,
        )
        directory += name

    if len(body) > _MAX_SIZE:
        raise ArchiveError("Archive exceeds the 4 GiB store limit")

    end = _END_OF_DIRECTORY.pack(
        END_OF_DIRECTORY_SIGNATURE,
        0,
        0,
        len(items),
        len(items),
        len(directory),
        len(body),
        0,
    )
    LOGGER.debug("Packed %d archive entries (%d bytes)", len(items), len(body) + len(directory) + len(end))
    return bytes(body + directory + end)


__all__ = ["ArchiveEntry", "build_archive", "crc32", "dos_date_time"]
