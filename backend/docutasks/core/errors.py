"""Exception hierarchy for DocuTasks.

Only extraction and inference failures end a run. Response-shape problems are
raised and recovered inside the normalizer and never reach callers.
"""

from __future__ import annotations


class DocuTasksError(Exception):
    """Base exception for all DocuTasks errors."""

    category = "generic"
    summary = "Failed to analyze document"

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidInput(DocuTasksError):
    """Neither a document nor text was supplied."""

    category = "input"


class ExtractionError(DocuTasksError):
    """The source document could not be read."""

    category = "extraction"


class UnsupportedFormat(ExtractionError):
    """The source document has a mime type we cannot extract."""

    category = "unsupported_format"

    def __init__(self, mime_type: str) -> None:
        super().__init__(
            f"Unsupported file type: {mime_type}",
            hint="Only PDF, DOCX, and TXT files are allowed.",
        )
        self.mime_type = mime_type


class InferenceError(DocuTasksError):
    """The model call failed.

    ``category`` separates quota/rate-limit failures from auth, model and
    generic failures so the transport can pick a status code and message.
    """

    def __init__(
        self,
        message: str,
        *,
        category: str = "generic",
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.category = category
        self.status_code = status_code


class ExportError(DocuTasksError):
    """Spreadsheet serialization failed."""

    category = "export"
    summary = "Failed to export tasks to Excel"


class MalformedResponse(DocuTasksError):
    """Model output is not parseable JSON."""

    category = "malformed_response"


class UnrecognizedShape(DocuTasksError):
    """Model output parsed but holds no usable task array."""

    category = "unrecognized_shape"
