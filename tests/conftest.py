from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable, Iterator, Sequence

import pytest
from pypdf import PdfReader, PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGES_DIR = PROJECT_ROOT / "packages"
if str(PACKAGES_DIR) not in sys.path:
    sys.path.insert(0, str(PACKAGES_DIR))

from localpdf.core.config import EngineSettings  # noqa: E402
from localpdf.engine import JobEngine  # noqa: E402
from localpdf.rewrite.adapter import RewriteAdapter  # noqa: E402

PdfFactory = Callable[..., bytes]


def build_pdf(
    widths: Sequence[int] = (101, 102, 103, 104, 105),
    *,
    title: str | None = None,
    password: str | None = None,
    algorithm: str | None = None,
) -> bytes:
    """Return a PDF whose pages can be told apart by their width."""

    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=200)
    if title is not None:
        writer.add_metadata({"/Title": title})
    if password is not None:
        writer.encrypt(user_password=password, owner_password=password, algorithm=algorithm)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list[int]:
    reader = PdfReader(io.BytesIO(data))
    return [int(round(float(page.mediabox.width))) for page in reader.pages]


@pytest.fixture()
def pdf_factory() -> PdfFactory:
    return build_pdf


@pytest.fixture()
def sample_pdf() -> bytes:
    return build_pdf(title="Sample")


@pytest.fixture()
def protected_pdf() -> bytes:
    return build_pdf((101, 102), password="secret")


@pytest.fixture()
def aes_protected_pdf() -> bytes:
    return build_pdf((101, 102), password="secret", algorithm="AES-256")


@pytest.fixture()
def settings(tmp_path: Path) -> EngineSettings:
    return EngineSettings(backend="pypdf", work_dir=tmp_path / "work")


@pytest.fixture()
def rewrite_adapter(settings: EngineSettings) -> Iterator[RewriteAdapter]:
    adapter = RewriteAdapter(settings)
    yield adapter
    adapter.close()


@pytest.fixture()
def engine(rewrite_adapter: RewriteAdapter, settings: EngineSettings) -> JobEngine:
    return JobEngine(rewrite=rewrite_adapter, settings=settings)
