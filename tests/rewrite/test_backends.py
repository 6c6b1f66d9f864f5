from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from types import SimpleNamespace

import pytest

from conftest import page_widths
from localpdf.core.config import EngineSettings
from localpdf.core.exceptions import ProtectedDocumentError
from localpdf.rewrite import backends
from localpdf.rewrite.adapter import RewriteAdapter
from localpdf.rewrite.backends import (
    Backend,
    BackendType,
    RewriteEngineError,
    build_decrypt_command,
    build_recompress_command,
    detect_backend,
    run_qpdf,
)


def test_detect_backend_explicit_pypdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: "/usr/bin/qpdf")
    assert detect_backend(EngineSettings(backend="pypdf")) == Backend(BackendType.PYPDF)


def test_detect_backend_auto_prefers_qpdf(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: f"/opt/bin/{name}")
    assert detect_backend(EngineSettings()) == Backend(BackendType.QPDF, "/opt/bin/qpdf")


def test_detect_backend_auto_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: None)
    assert detect_backend(EngineSettings()) == Backend(BackendType.PYPDF)


def test_detect_backend_configured_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    looked_up: list[str] = []

    def fake_which(name: str) -> str | None:
        looked_up.append(name)
        return name

    monkeypatch.setattr(backends.shutil, "which", fake_which)
    backend = detect_backend(EngineSettings(backend="qpdf", qpdf_executable="/tools/qpdf"))
    assert backend == Backend(BackendType.QPDF, "/tools/qpdf")
    assert looked_up == ["/tools/qpdf"]


def test_detect_backend_required_qpdf_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: None)
    with pytest.raises(RewriteEngineError, match="not found"):
        detect_backend(EngineSettings(backend="qpdf"))


def test_build_commands() -> None:
    source, output = Path("/w/in/in_1.pdf"), Path("/w/out/out_1.pdf")
    assert build_decrypt_command("qpdf", source, output, "pw") == [
        "qpdf",
        "--decrypt",
        "--password=pw",
        str(source),
        str(output),
    ]
    assert build_recompress_command("qpdf", source, output) == [
        "qpdf",
        "--object-streams=generate",
        "--stream-data=compress",
        "--recompress-flate",
        str(source),
        str(output),
    ]


@pytest.mark.parametrize("returncode", [0, 3])
def test_run_qpdf_accepts_success_codes(monkeypatch: pytest.MonkeyPatch, returncode: int) -> None:
    monkeypatch.setattr(
        backends.subprocess,
        "run",
        lambda command, **kwargs: SimpleNamespace(returncode=returncode, stdout="", stderr="warning"),
    )
    run_qpdf(["qpdf", "--check", "x.pdf"])


def test_run_qpdf_reports_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        backends.subprocess,
        "run",
        lambda command, **kwargs: SimpleNamespace(returncode=2, stdout="", stderr="qpdf: x.pdf: invalid password\n"),
    )
    with pytest.raises(RewriteEngineError, match="invalid password"):
        run_qpdf(["qpdf", "--decrypt", "--password=", "x.pdf", "y.pdf"])


def test_run_qpdf_wraps_os_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(command, **kwargs):
        raise FileNotFoundError("qpdf")

    monkeypatch.setattr(backends.subprocess, "run", broken)
    with pytest.raises(RewriteEngineError, match="Failed to execute qpdf"):
        run_qpdf(["qpdf"])


def _qpdf_adapter(settings: EngineSettings) -> RewriteAdapter:
    return RewriteAdapter(settings, detector=lambda value: Backend(BackendType.QPDF, "qpdf"))


def test_adapter_runs_qpdf_decrypt(
    monkeypatch: pytest.MonkeyPatch, settings: EngineSettings, sample_pdf: bytes
) -> None:
    commands: list[list[str]] = []

    def fake_run(command, **kwargs):
        commands.append(command)
        shutil.copyfile(command[-2], command[-1])
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr(backends.subprocess, "run", fake_run)
    adapter = _qpdf_adapter(settings)
    try:
        result = asyncio.run(adapter.decrypt(sample_pdf, "pw"))
    finally:
        adapter.close()

    assert page_widths(result) == [101, 102, 103, 104, 105]
    assert commands[0][:3] == ["qpdf", "--decrypt", "--password=pw"]
    assert commands[0][-2].endswith("in_1.pdf")
    assert commands[0][-1].endswith("out_1.pdf")


def test_adapter_maps_qpdf_password_failure(
    monkeypatch: pytest.MonkeyPatch, settings: EngineSettings, sample_pdf: bytes
) -> None:
    monkeypatch.setattr(
        backends.subprocess,
        "run",
        lambda command, **kwargs: SimpleNamespace(returncode=2, stdout="", stderr="qpdf: in_1.pdf: invalid password"),
    )
    adapter = _qpdf_adapter(settings)
    try:
        with pytest.raises(ProtectedDocumentError, match="password-protected"):
            asyncio.run(adapter.decrypt(sample_pdf, "nope", label="doc.pdf"))
        assert list(adapter.work_dir.rglob("*.pdf")) == []
    finally:
        adapter.close()
