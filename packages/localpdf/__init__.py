"""Local PDF job engine: combine, extract, shrink and rasterize documents."""

from __future__ import annotations

__version__ = "0.3.0"

from .archive import ArchiveEntry, build_archive, crc32
from .core.config import EngineSettings
from .core.exceptions import (
    ArchiveError,
    EngineFailureError,
    LocalPdfError,
    ProtectedDocumentError,
    ProtocolError,
    ValidationError,
)
from .engine import JobEngine, run_job
from .pages import PageSelection, clamp_pages, format_range_label, parse_page_groups, parse_page_list
from .protocol import (
    UNKNOWN_JOB_ID,
    CombineRequest,
    CompressionTier,
    EngineEvent,
    ErrorEvent,
    ExtractRequest,
    ImageFormat,
    InputDocument,
    Job,
    JobRegistry,
    JobRequest,
    JobStatus,
    OperationKind,
    OutputMode,
    ProgressEvent,
    RasterizeRequest,
    ResultEvent,
    ShrinkRequest,
    decode_request,
)
from .rewrite import RewriteAdapter, get_rewrite_adapter, reset_rewrite_adapter

__all__ = [
    "__version__",
    "ArchiveEntry",
    "ArchiveError",
    "CombineRequest",
    "CompressionTier",
    "EngineEvent",
    "EngineFailureError",
    "EngineSettings",
    "ErrorEvent",
    "ExtractRequest",
    "ImageFormat",
    "InputDocument",
    "Job",
    "JobEngine",
    "JobRegistry",
    "JobRequest",
    "JobStatus",
    "LocalPdfError",
    "OperationKind",
    "OutputMode",
    "PageSelection",
    "ProgressEvent",
    "ProtectedDocumentError",
    "ProtocolError",
    "RasterizeRequest",
    "ResultEvent",
    "RewriteAdapter",
    "ShrinkRequest",
    "UNKNOWN_JOB_ID",
    "ValidationError",
    "build_archive",
    "clamp_pages",
    "crc32",
    "decode_request",
    "format_range_label",
    "get_rewrite_adapter",
    "parse_page_groups",
    "parse_page_list",
    "reset_rewrite_adapter",
    "run_job",
]
