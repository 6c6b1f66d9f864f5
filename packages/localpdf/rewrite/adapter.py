"""Shared rewrite engine adapter providing decryption and recompression.

The adapter owns one lazily initialized rewrite backend and a private
working directory laid out as ``<workdir>/in`` and ``<workdir>/out``. Every
call writes its input under a fresh ``in_<n>.pdf`` name taken from a shared
counter, so overlapping jobs never touch each other's files, and removes
both working files whatever the outcome.
"""

from __future__ import annotations

import asyncio
import itertools
import re
import shutil
import tempfile
from pathlib import Path
from typing import Callable

from ..core.config import EngineSettings
from ..core.exceptions import EngineFailureError, ProtectedDocumentError
from ..core.utils import get_logger
from ..protocol.messages import CompressionTier
from .backends import Backend, RewriteEngineError, detect_backend, run_decrypt, run_recompress

LOGGER = get_logger("localpdf.rewrite")

_PASSWORD_HINT = re.compile(r"password", re.IGNORECASE)


class RewriteAdapter:
    """Narrow decrypt/recompress interface over the rewrite backend."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        detector: Callable[[EngineSettings], Backend] = detect_backend,
    ) -> None:
        self.settings = settings or EngineSettings()
        self._detector = detector
        self._backend: Backend | None = None
        self._work_dir: Path | None = None
        self._pending: asyncio.Future[Backend] | None = None
        self._counter = itertools.count(1)

    @property
    def backend(self) -> Backend | None:
        return self._backend

    @property
    def work_dir(self) -> Path | None:
        return self._work_dir

    async def ensure_ready(self) -> Backend:
        """Initialize the backend once; concurrent callers share the same attempt."""

        if self._backend is not None:
            return self._backend
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._initialize())
        pending = self._pending
        try:
            return await asyncio.shield(pending)
        except BaseException:
            if self._pending is pending and pending.done():
                self._pending = None
            raise

    async def _initialize(self) -> Backend:
        try:
            backend = await asyncio.to_thread(self._detector, self.settings)
        except RewriteEngineError as exc:
            raise EngineFailureError(f"Rewrite engine unavailable ({exc})") from exc

        parent = self.settings.work_dir
        if parent is not None:
            parent.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="localpdf-", dir=parent))
        (work_dir / "in").mkdir()
        (work_dir / "out").mkdir()

        self._work_dir = work_dir
        self._backend = backend
        LOGGER.debug("Rewrite engine ready (backend=%s, workdir=%s)", backend.type.value, work_dir)
        return backend

    def _slot(self) -> tuple[Path, Path]:
        assert self._work_dir is not None
        run_id = next(self._counter)
        return (
            self._work_dir / "in" / f"in_{run_id}.pdf",
            self._work_dir / "out" / f"out_{run_id}.pdf",
        )

    @staticmethod
    def _release(*paths: Path) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                LOGGER.warning("Failed to remove working file %s: %s", path, exc)

    async def _run(self, data: bytes, command: Callable[[Backend, Path, Path], None]) -> bytes:
        backend = await self.ensure_ready()
        source, output = self._slot()
        try:
            await asyncio.to_thread(source.write_bytes, data)
            await asyncio.to_thread(command, backend, source, output)
            if not output.exists():
                raise RewriteEngineError("Rewrite produced no output.")
            return await asyncio.to_thread(output.read_bytes)
        finally:
            self._release(source, output)

    async def decrypt(self, data: bytes, password: str | None = None, *, label: str | None = None) -> bytes:
        """Return a decrypted copy of ``data``.

        An empty or missing password still attempts to open the document.

        Raises:
            ProtectedDocumentError: The engine reported a password problem.
            EngineFailureError: Any other failure, with the engine diagnostic.
        """

        name = label or "PDF"

        def command(backend: Backend, source: Path, output: Path) -> None:
            run_decrypt(backend, source, output, password or "")

        try:
            return await self._run(data, command)
        except RewriteEngineError as exc:
            message = str(exc)
            if _PASSWORD_HINT.search(message):
                raise ProtectedDocumentError(
                    f'"{name}" is password-protected. Provide the correct password and try again.'
                ) from exc
            raise EngineFailureError(f"Failed to open {name} ({message})") from exc

    async def recompress(self, data: bytes, tier: CompressionTier) -> bytes:
        """Rewrite an already decrypted document with recompressed streams.

        Every tier currently maps to the same conservative profile.
        """

        LOGGER.debug("Recompressing with tier %s (standard profile)", CompressionTier(tier).value)
        try:
            return await self._run(data, run_recompress)
        except RewriteEngineError as exc:
            raise EngineFailureError(f"Recompression failed ({exc})") from exc

    def close(self) -> None:
        """Remove the working directory; the adapter re-initializes on next use."""

        if self._work_dir is not None:
            shutil.rmtree(self._work_dir, ignore_errors=True)
        self._work_dir = None
        self._backend = None
        self._pending = None


_shared: RewriteAdapter | None = None


def get_rewrite_adapter(settings: EngineSettings | None = None) -> RewriteAdapter:
    """Return the process-wide adapter, creating it on first use.

    ``settings`` only applies when the shared adapter does not exist yet.
    """

    global _shared
    if _shared is None:
        _shared = RewriteAdapter(settings or EngineSettings.from_env())
    return _shared


def reset_rewrite_adapter() -> None:
    """Close and discard the process-wide adapter."""

    global _shared
    if _shared is not None:
        _shared.close()
    _shared = None


__all__ = ["RewriteAdapter", "get_rewrite_adapter", "reset_rewrite_adapter"]
