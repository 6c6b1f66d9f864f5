"""Exception hierarchy for the :mod:`localpdf` job engine."""

from __future__ import annotations


class LocalPdfError(Exception):
    """Base exception for all localpdf errors."""


class ValidationError(LocalPdfError):
    """Raised when a request fails validation (page selection, input count, ...)."""


class ProtectedDocumentError(LocalPdfError):
    """Raised when a document needs a password that was missing or wrong."""


class EngineFailureError(LocalPdfError):
    """Raised when a rewrite, document or render collaborator fails."""


class ArchiveError(LocalPdfError):
    """Raised when entries cannot be packaged into an archive."""


class ProtocolError(LocalPdfError):
    """Raised when a request payload has an unrecognized shape."""

    def __init__(self, message: str, *, job_id: str) -> None:
        super().__init__(message)
        self.job_id = job_id


__all__ = [
    "LocalPdfError",
    "ValidationError",
    "ProtectedDocumentError",
    "EngineFailureError",
    "ArchiveError",
    "ProtocolError",
]
