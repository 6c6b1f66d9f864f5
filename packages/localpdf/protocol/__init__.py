"""Job protocol: requests, events and the requester-side job registry."""

from __future__ import annotations

from .jobs import Job, JobRegistry, JobStatus
from .messages import (
    UNKNOWN_JOB_ID,
    CombineRequest,
    CompressionTier,
    EngineEvent,
    ErrorEvent,
    ExtractRequest,
    ImageFormat,
    InputDocument,
    JobRequest,
    OperationKind,
    OutputMode,
    ProgressEvent,
    RasterizeRequest,
    ResultEvent,
    ShrinkRequest,
    decode_request,
)

__all__ = [
    "UNKNOWN_JOB_ID",
    "CombineRequest",
    "CompressionTier",
    "EngineEvent",
    "ErrorEvent",
    "ExtractRequest",
    "ImageFormat",
    "InputDocument",
    "Job",
    "JobRegistry",
    "JobRequest",
    "JobStatus",
    "OperationKind",
    "OutputMode",
    "ProgressEvent",
    "RasterizeRequest",
    "ResultEvent",
    "ShrinkRequest",
    "decode_request",
]
