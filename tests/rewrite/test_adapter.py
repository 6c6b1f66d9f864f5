from __future__ import annotations

import asyncio
import io
import shutil
from pathlib import Path

import pytest
from pypdf import PdfReader

from conftest import page_widths
from localpdf.core.config import EngineSettings
from localpdf.core.exceptions import EngineFailureError, ProtectedDocumentError
from localpdf.protocol.messages import CompressionTier
from localpdf.rewrite import adapter as adapter_module
from localpdf.rewrite.adapter import RewriteAdapter, get_rewrite_adapter, reset_rewrite_adapter
from localpdf.rewrite.backends import Backend, BackendType, RewriteEngineError


def _working_files(adapter: RewriteAdapter) -> list[Path]:
    assert adapter.work_dir is not None
    return sorted(adapter.work_dir.rglob("*.pdf"))


def test_decrypt_plain_document(rewrite_adapter: RewriteAdapter, sample_pdf: bytes) -> None:
    result = asyncio.run(rewrite_adapter.decrypt(sample_pdf))
    assert page_widths(result) == [101, 102, 103, 104, 105]
    assert rewrite_adapter.backend == Backend(BackendType.PYPDF)


def test_decrypt_with_password(rewrite_adapter: RewriteAdapter, protected_pdf: bytes) -> None:
    result = asyncio.run(rewrite_adapter.decrypt(protected_pdf, "secret", label="locked.pdf"))
    assert PdfReader(io.BytesIO(result)).is_encrypted is False
    assert page_widths(result) == [101, 102]


def test_decrypt_aes_256_with_password(rewrite_adapter: RewriteAdapter, aes_protected_pdf: bytes) -> None:
    result = asyncio.run(rewrite_adapter.decrypt(aes_protected_pdf, "secret", label="aes.pdf"))
    assert PdfReader(io.BytesIO(result)).is_encrypted is False
    assert page_widths(result) == [101, 102]


@pytest.mark.parametrize("password", ["wrong", None])
def test_decrypt_aes_256_wrong_password_is_protected_error(
    rewrite_adapter: RewriteAdapter, aes_protected_pdf: bytes, password: str | None
) -> None:
    with pytest.raises(ProtectedDocumentError, match="aes.pdf"):
        asyncio.run(rewrite_adapter.decrypt(aes_protected_pdf, password, label="aes.pdf"))


@pytest.mark.parametrize("password", ["wrong", None, ""])
def test_decrypt_wrong_password_is_protected_error(
    rewrite_adapter: RewriteAdapter, protected_pdf: bytes, password: str | None
) -> None:
    with pytest.raises(ProtectedDocumentError, match="locked.pdf"):
        asyncio.run(rewrite_adapter.decrypt(protected_pdf, password, label="locked.pdf"))


def test_decrypt_garbage_is_engine_failure(rewrite_adapter: RewriteAdapter) -> None:
    with pytest.raises(EngineFailureError, match="Failed to open broken.pdf"):
        asyncio.run(rewrite_adapter.decrypt(b"not a pdf at all", label="broken.pdf"))


def test_working_files_removed_on_success_and_failure(
    rewrite_adapter: RewriteAdapter, sample_pdf: bytes, protected_pdf: bytes
) -> None:
    asyncio.run(rewrite_adapter.decrypt(sample_pdf))
    assert _working_files(rewrite_adapter) == []

    with pytest.raises(ProtectedDocumentError):
        asyncio.run(rewrite_adapter.decrypt(protected_pdf, "wrong"))
    assert _working_files(rewrite_adapter) == []


def test_each_call_uses_a_fresh_slot(
    monkeypatch: pytest.MonkeyPatch, rewrite_adapter: RewriteAdapter, sample_pdf: bytes
) -> None:
    seen: list[tuple[str, str]] = []

    def fake_decrypt(backend: Backend, source: Path, output: Path, password: str) -> None:
        seen.append((source.name, output.name))
        shutil.copyfile(source, output)

    monkeypatch.setattr(adapter_module, "run_decrypt", fake_decrypt)

    async def scenario() -> None:
        await asyncio.gather(rewrite_adapter.decrypt(sample_pdf), rewrite_adapter.decrypt(sample_pdf))

    asyncio.run(scenario())
    assert sorted(seen) == [("in_1.pdf", "out_1.pdf"), ("in_2.pdf", "out_2.pdf")]


def test_missing_output_is_engine_failure(
    monkeypatch: pytest.MonkeyPatch, rewrite_adapter: RewriteAdapter, sample_pdf: bytes
) -> None:
    monkeypatch.setattr(adapter_module, "run_decrypt", lambda *args: None)
    with pytest.raises(EngineFailureError, match="no output"):
        asyncio.run(rewrite_adapter.decrypt(sample_pdf))
    assert _working_files(rewrite_adapter) == []


def test_initialization_runs_once_for_concurrent_callers(settings: EngineSettings) -> None:
    calls: list[EngineSettings] = []

    def detector(value: EngineSettings) -> Backend:
        calls.append(value)
        return Backend(BackendType.PYPDF)

    adapter = RewriteAdapter(settings, detector=detector)

    async def scenario() -> list[Backend]:
        return await asyncio.gather(*(adapter.ensure_ready() for _ in range(5)))

    try:
        backends = asyncio.run(scenario())
        asyncio.run(adapter.ensure_ready())
    finally:
        adapter.close()

    assert len(calls) == 1
    assert set(backends) == {Backend(BackendType.PYPDF)}


def test_failed_initialization_is_retried(settings: EngineSettings) -> None:
    attempts: list[int] = []

    def detector(value: EngineSettings) -> Backend:
        attempts.append(1)
        if len(attempts) == 1:
            raise RewriteEngineError("qpdf executable not found: qpdf")
        return Backend(BackendType.PYPDF)

    adapter = RewriteAdapter(settings, detector=detector)
    try:
        with pytest.raises(EngineFailureError, match="unavailable"):
            asyncio.run(adapter.ensure_ready())
        assert asyncio.run(adapter.ensure_ready()) == Backend(BackendType.PYPDF)
    finally:
        adapter.close()
    assert len(attempts) == 2


def test_work_dir_created_under_configured_parent(rewrite_adapter: RewriteAdapter, settings: EngineSettings) -> None:
    asyncio.run(rewrite_adapter.ensure_ready())
    work_dir = rewrite_adapter.work_dir
    assert work_dir is not None
    assert work_dir.parent == settings.work_dir
    assert (work_dir / "in").is_dir() and (work_dir / "out").is_dir()

    rewrite_adapter.close()
    assert not work_dir.exists()
    assert rewrite_adapter.backend is None


@pytest.mark.parametrize("tier", list(CompressionTier))
def test_recompress_keeps_pages(rewrite_adapter: RewriteAdapter, sample_pdf: bytes, tier: CompressionTier) -> None:
    result = asyncio.run(rewrite_adapter.recompress(sample_pdf, tier))
    assert page_widths(result) == [101, 102, 103, 104, 105]
    assert _working_files(rewrite_adapter) == []


def test_recompress_ignores_tier(
    monkeypatch: pytest.MonkeyPatch, rewrite_adapter: RewriteAdapter, sample_pdf: bytes
) -> None:
    calls: list[tuple] = []

    def fake_recompress(backend: Backend, source: Path, output: Path) -> None:
        calls.append((backend,))
        shutil.copyfile(source, output)

    monkeypatch.setattr(adapter_module, "run_recompress", fake_recompress)
    outputs = {asyncio.run(rewrite_adapter.recompress(sample_pdf, tier)) for tier in CompressionTier}

    assert outputs == {sample_pdf}
    assert len(set(calls)) == 1


def test_recompress_failure_is_engine_failure(rewrite_adapter: RewriteAdapter) -> None:
    with pytest.raises(EngineFailureError, match="Recompression failed"):
        asyncio.run(rewrite_adapter.recompress(b"garbage", CompressionTier.SMALL))


def test_shared_adapter_is_memoized(settings: EngineSettings) -> None:
    reset_rewrite_adapter()
    try:
        first = get_rewrite_adapter(settings)
        assert get_rewrite_adapter() is first
        assert first.settings is settings
        reset_rewrite_adapter()
        assert get_rewrite_adapter(settings) is not first
    finally:
        reset_rewrite_adapter()
