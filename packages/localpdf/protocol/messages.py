"""Request and event types exchanged between a requester and the job engine.

Requests and events are closed sets of frozen dataclasses. Plain mappings
(for example decoded JSON) are turned into typed requests with
:func:`decode_request`, which raises :class:`ProtocolError` for anything it
does not recognize.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from ..core.exceptions import ProtocolError

UNKNOWN_JOB_ID = "unknown"
PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPE = "application/zip"


class OperationKind(str, Enum):
    COMBINE = "combine"
    EXTRACT = "extract"
    SHRINK = "shrink"
    RASTERIZE = "rasterize"


class OutputMode(str, Enum):
    SINGLE = "single"
    ARCHIVE = "archive"


class CompressionTier(str, Enum):
    SMALL = "small"
    BALANCED = "balanced"
    BEST = "best"


class ImageFormat(str, Enum):
    PNG = "png"
    JPG = "jpg"

    @property
    def media_type(self) -> str:
        return "image/png" if self is ImageFormat.PNG else "image/jpeg"


@dataclass(frozen=True)
class InputDocument:
    """Raw document bytes with the name shown to the user."""

    name: str
    data: bytes = field(repr=False)
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class CombineRequest:
    job_id: str
    documents: tuple[InputDocument, ...]
    kind = OperationKind.COMBINE


@dataclass(frozen=True)
class ExtractRequest:
    job_id: str
    document: InputDocument
    pages: tuple[int, ...]
    groups: tuple[tuple[int, ...], ...] = ()
    mode: OutputMode = OutputMode.SINGLE
    kind = OperationKind.EXTRACT


@dataclass(frozen=True)
class ShrinkRequest:
    job_id: str
    document: InputDocument
    tier: CompressionTier = CompressionTier.BALANCED
    kind = OperationKind.SHRINK


@dataclass(frozen=True)
class RasterizeRequest:
    job_id: str
    document: InputDocument
    format: ImageFormat = ImageFormat.PNG
    dpi: int = 150
    kind = OperationKind.RASTERIZE


JobRequest = Union[CombineRequest, ExtractRequest, ShrinkRequest, RasterizeRequest]


@dataclass(frozen=True)
class ProgressEvent:
    job_id: str
    percent: int
    note: str | None = None

    def as_message(self) -> dict[str, Any]:
        return {"type": "progress", "job_id": self.job_id, "percent": self.percent, "note": self.note}


@dataclass(frozen=True)
class ResultEvent:
    job_id: str
    output_name: str
    payload: bytes = field(repr=False)
    media_type: str

    def as_message(self) -> dict[str, Any]:
        return {
            "type": "result",
            "job_id": self.job_id,
            "output_name": self.output_name,
            "payload": self.payload,
            "media_type": self.media_type,
        }


@dataclass(frozen=True)
class ErrorEvent:
    job_id: str
    message: str

    def as_message(self) -> dict[str, Any]:
        return {"type": "error", "job_id": self.job_id, "message": self.message}


EngineEvent = Union[ProgressEvent, ResultEvent, ErrorEvent]


def _recover_job_id(payload: object) -> str:
    if isinstance(payload, Mapping):
        job_id = payload.get("job_id")
        if isinstance(job_id, str) and job_id:
            return job_id
    return UNKNOWN_JOB_ID


def _document(raw: object, job_id: str) -> InputDocument:
    if isinstance(raw, InputDocument):
        return raw
    if not isinstance(raw, Mapping):
        raise ProtocolError("Document entries must be mappings", job_id=job_id)
    name = raw.get("name")
    data = raw.get("data")
    password = raw.get("password")
    if not isinstance(name, str) or not isinstance(data, (bytes, bytearray, memoryview)):
        raise ProtocolError("Document entries need a 'name' and byte 'data'", job_id=job_id)
    if password is not None and not isinstance(password, str):
        raise ProtocolError("Document 'password' must be a string", job_id=job_id)
    return InputDocument(name=name, data=bytes(data), password=password or None)


def _int_list(raw: object, job_id: str, field_name: str) -> tuple[int, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        raise ProtocolError(f"'{field_name}' must be a list of integers", job_id=job_id)
    values = []
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, int):
            raise ProtocolError(f"'{field_name}' must be a list of integers", job_id=job_id)
        values.append(item)
    return tuple(values)


def _enum(enum_type, raw: object, job_id: str, field_name: str, default=None):
    if raw is None and default is not None:
        return default
    try:
        return enum_type(raw)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise ProtocolError(f"'{field_name}' must be one of {choices}, got {raw!r}", job_id=job_id) from exc


def decode_request(payload: Mapping[str, Any]) -> JobRequest:
    """Build a typed request from a plain ``payload`` mapping.

    Raises:
        ProtocolError: For unknown request types or malformed fields. The
            error carries the job id when one could be recovered.
    """

    job_id = _recover_job_id(payload)
    if not isinstance(payload, Mapping):
        raise ProtocolError("Unknown request: payload is not a mapping", job_id=job_id)
    if job_id == UNKNOWN_JOB_ID:
        raise ProtocolError("Unknown request: missing 'job_id'", job_id=job_id)

    kind = payload.get("type")
    try:
        operation = OperationKind(kind)
    except ValueError as exc:
        raise ProtocolError(f"Unknown request type: {kind!r}", job_id=job_id) from exc

    if operation is OperationKind.COMBINE:
        documents = payload.get("documents")
        if not isinstance(documents, (list, tuple)):
            raise ProtocolError("'documents' must be a list", job_id=job_id)
        return CombineRequest(job_id=job_id, documents=tuple(_document(d, job_id) for d in documents))

    if "document" not in payload:
        raise ProtocolError(f"'{operation.value}' requests need a 'document'", job_id=job_id)
    document = _document(payload["document"], job_id)

    if operation is OperationKind.EXTRACT:
        raw_groups = payload.get("groups") or ()
        if not isinstance(raw_groups, (list, tuple)):
            raise ProtocolError("'groups' must be a list of page lists", job_id=job_id)
        return ExtractRequest(
            job_id=job_id,
            document=document,
            pages=_int_list(payload.get("pages"), job_id, "pages"),
            groups=tuple(_int_list(group, job_id, "groups") for group in raw_groups),
            mode=_enum(OutputMode, payload.get("mode"), job_id, "mode", OutputMode.SINGLE),
        )
    if operation is OperationKind.SHRINK:
        return ShrinkRequest(
            job_id=job_id,
            document=document,
            tier=_enum(CompressionTier, payload.get("tier"), job_id, "tier", CompressionTier.BALANCED),
        )
    if operation is OperationKind.RASTERIZE:
        dpi = payload.get("dpi", 150)
        if isinstance(dpi, bool) or not isinstance(dpi, int):
            raise ProtocolError("'dpi' must be an integer", job_id=job_id)
        return RasterizeRequest(
            job_id=job_id,
            document=document,
            format=_enum(ImageFormat, payload.get("format"), job_id, "format", ImageFormat.PNG),
            dpi=dpi,
        )
    raise ProtocolError(f"Unknown request type: {kind!r}", job_id=job_id)  # pragma: no cover


__all__ = [
    "UNKNOWN_JOB_ID",
    "PDF_MEDIA_TYPE",
    "ZIP_MEDIA_TYPE",
    "OperationKind",
    "OutputMode",
    "CompressionTier",
    "ImageFormat",
    "InputDocument",
    "CombineRequest",
    "ExtractRequest",
    "ShrinkRequest",
    "RasterizeRequest",
    "JobRequest",
    "ProgressEvent",
    "ResultEvent",
    "ErrorEvent",
    "EngineEvent",
    "decode_request",
]
