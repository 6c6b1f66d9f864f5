"""Rewrite engine backends used by :mod:`localpdf.rewrite.adapter`.

Two backends are supported. ``qpdf`` is preferred when its executable is
available; the ``pypdf`` backend provides the same two commands in-process
so the engine keeps working on machines without qpdf.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from pypdf import PasswordType, PdfReader, PdfWriter

from ..core.config import EngineSettings
from ..core.utils import get_logger

LOGGER = get_logger("localpdf.rewrite.backends")

# qpdf exits with 3 when it succeeded but printed warnings.
_QPDF_OK_CODES = (0, 3)


class BackendType(str, Enum):
    """Enumeration of supported rewrite backends."""

    QPDF = "qpdf"
    PYPDF = "pypdf"


class RewriteEngineError(Exception):
    """Raised by a backend command; the message carries the engine diagnostic."""


@dataclass(frozen=True)
class Backend:
    """Represents a rewrite backend and, for qpdf, its executable."""

    type: BackendType
    executable: str | None = None


def which(executables: Sequence[str]) -> str | None:
    """Return the first executable from *executables* found on ``PATH``."""

    for candidate in executables:
        found = shutil.which(candidate)
        if found:
            LOGGER.debug("Detected external tool: %s -> %s", candidate, found)
            return found
    return None


def detect_backend(settings: EngineSettings) -> Backend:
    """Pick the backend described by *settings*.

    ``auto`` selects qpdf when an executable is found and falls back to
    pypdf otherwise. Asking for ``qpdf`` explicitly fails when it is missing.
    """

    if settings.backend == BackendType.PYPDF.value:
        return Backend(BackendType.PYPDF)

    candidates = [settings.qpdf_executable] if settings.qpdf_executable else ["qpdf"]
    executable = which(candidates)
    if executable:
        return Backend(BackendType.QPDF, executable)
    if settings.backend == BackendType.QPDF.value:
        raise RewriteEngineError(f"qpdf executable not found: {candidates[0]}")

    LOGGER.info("qpdf not available; using the pypdf rewrite backend")
    return Backend(BackendType.PYPDF)


def build_decrypt_command(executable: str, source: Path, output: Path, password: str) -> list[str]:
    """Construct the qpdf decrypt command."""

    return [
        executable,
        "--decrypt",
        f"--password={password}",
        str(source),
        str(output),
    ]


def build_recompress_command(executable: str, source: Path, output: Path) -> list[str]:
    """Construct the qpdf command rewriting object streams and recompressing streams."""

    return [
        executable,
        "--object-streams=generate",
        "--stream-data=compress",
        "--recompress-flate",
        str(source),
        str(output),
    ]


def _redact(command: Sequence[str]) -> str:
    return " ".join(
        "--password=***" if part.startswith("--password=") else part for part in command
    )


def run_qpdf(command: Sequence[str]) -> None:
    """Run a qpdf *command* raising :class:`RewriteEngineError` on failure."""

    LOGGER.debug("Executing command: %s", _redact(command))
    try:
        completed = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            text=True,
        )
    except OSError as exc:
        raise RewriteEngineError(f"Failed to execute qpdf: {exc}") from exc

    LOGGER.debug("qpdf finished with exit code %s", completed.returncode)
    if completed.returncode not in _QPDF_OK_CODES:
        diagnostic = (completed.stderr or completed.stdout or "").strip()
        raise RewriteEngineError(diagnostic or f"qpdf exited with code {completed.returncode}")


def _open_reader(source: Path) -> PdfReader:
    try:
        return PdfReader(str(source))
    except Exception as exc:  # pypdf exceptions vary
        raise RewriteEngineError(str(exc) or exc.__class__.__name__) from exc


def _write(writer: PdfWriter, output: Path) -> None:
    try:
        with output.open("wb") as handle:
            writer.write(handle)
    except Exception as exc:  # pypdf exceptions vary
        raise RewriteEngineError(f"Unable to write rewritten PDF: {exc}") from exc


def pypdf_decrypt(source: Path, output: Path, password: str) -> None:
    """Write a decrypted copy of *source* to *output* using pypdf."""

    reader = _open_reader(source)
    if reader.is_encrypted:
        try:
            status = reader.decrypt(password)
        except Exception as exc:  # decrypt errors vary
            raise RewriteEngineError(f"Failed to decrypt: {exc}") from exc
        if status == PasswordType.NOT_DECRYPTED:
            raise RewriteEngineError("invalid password")
    try:
        writer = PdfWriter(clone_from=reader)
    except Exception as exc:  # pypdf exceptions vary
        raise RewriteEngineError(str(exc) or exc.__class__.__name__) from exc
    _write(writer, output)


def pypdf_recompress(source: Path, output: Path) -> None:
    """Rewrite *source* with compressed content streams and shared objects."""

    reader = _open_reader(source)
    try:
        writer = PdfWriter(clone_from=reader)
        for page in writer.pages:
            page.compress_content_streams()
        writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)
    except Exception as exc:  # pypdf exceptions vary
        raise RewriteEngineError(str(exc) or exc.__class__.__name__) from exc
    _write(writer, output)


def run_decrypt(backend: Backend, source: Path, output: Path, password: str) -> None:
    """Execute the decrypt command of *backend*."""

    if backend.type is BackendType.QPDF:
        run_qpdf(build_decrypt_command(backend.executable or "qpdf", source, output, password))
    elif backend.type is BackendType.PYPDF:
        pypdf_decrypt(source, output, password)
    else:  # pragma: no cover - closed enumeration
        raise ValueError(f"Unsupported backend: {backend.type}")


def run_recompress(backend: Backend, source: Path, output: Path) -> None:
    """Execute the recompress command of *backend*."""

    if backend.type is BackendType.QPDF:
        run_qpdf(build_recompress_command(backend.executable or "qpdf", source, output))
    elif backend.type is BackendType.PYPDF:
        pypdf_recompress(source, output)
    else:  # pragma: no cover - closed enumeration
        raise ValueError(f"Unsupported backend: {backend.type}")


__all__ = [
    "Backend",
    "BackendType",
    "RewriteEngineError",
    "build_decrypt_command",
    "build_recompress_command",
    "detect_backend",
    "run_decrypt",
    "run_qpdf",
    "run_recompress",
    "which",
]
