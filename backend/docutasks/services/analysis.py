"""Document analysis: extraction, inference and normalization as one run.

``analyze`` yields progress events as the run advances and always finishes
with exactly one ``complete`` or ``error`` event::

    START(0) -> EXTRACTING(10, documents only) -> PROCESSING(20) -> COMPLETE(100)

Only extraction and inference failures end a run early; whatever the model
returns is normalized into at least one task.
"""

from __future__ import annotations

from typing import Generator, Iterator, Optional

from ..core.errors import DocuTasksError, InvalidInput
from ..core.logging import get_logger
from ..schemas.events import AnalysisEvent, CompleteEvent, ErrorEvent, ProgressEvent
from ..schemas.tasks import AnalysisResult
from . import provider
from .extraction import extract_text
from .normalize import Diagnostics, normalize_response

logger = get_logger(__name__)

SYSTEM_PROMPT = """You extract software feature requirements from system descriptions.
Task: list every distinct, user-facing functional feature that any role (end user,
admin, moderator, content creator, ...) can interact with.
Rules:
- Be exhaustive. Never skip or summarize features; aim for at least 50 for any document.
- Break high-level areas into actionable tasks. Do not list "Admin Panel" or
  "Dashboard"; list "Manage users", "Review reports", "Edit site settings" instead.
- Order independent modules before the features that depend on them
  (e.g. "User registration" before "Create post").
- Fill in features users of such a system would commonly expect even if the
  document does not mention them, including settings, notifications, data export,
  security (2FA, role-based access) and auditing.
- Reflect the key features of the two or three leading competitors in the same domain.
- Each entry has "task" (a short name) and "description" (1-2 sentences on what the
  role can do).
Output ONLY JSON, no preface, no markdown, in this shape:
[
  {"task": "user registration", "description": "Register a new account using email, phone number, or a third-party identity provider."},
  {"task": "manage user roles", "description": "Admins can assign and change roles such as user, moderator, or super admin."},
  {"task": "audit logs", "description": "Admins can review a log of system and user activity for security and compliance."}
]"""

def build_user_prompt(text: str) -> str:
    return f"\n\n{text}"

def _run(
    *,
    text: Optional[str],
    document: Optional[bytes],
    mime_type: Optional[str],
    model_id: str,
    complete: provider.Completion,
    extract,
    diagnostics: Optional[Diagnostics],
) -> Generator[ProgressEvent, None, AnalysisResult]:
    if document is None and (not text or not text.strip()):
        raise InvalidInput("No document or text provided")

    yield ProgressEvent(progress=0, message="Starting analysis...")

    if document is not None:
        yield ProgressEvent(progress=10, message="Extracting text from document...")
        text = extract(document, mime_type or "")

    yield ProgressEvent(progress=20, message="Processing document...")
    logger.info("Analyzing %d characters with model %s", len(text), model_id)
    logger.debug("Extracted text:\n%s", text)
    raw = complete(SYSTEM_PROMPT, build_user_prompt(text), model_id)
    logger.debug("Model response:\n%s", raw)

    tasks = normalize_response(raw, diagnostics)
    logger.info("Normalized response into %d tasks", len(tasks))
    yield ProgressEvent(progress=100, message="Analysis complete!")
    return AnalysisResult.from_tasks(tasks)

def analyze(
    *,
    text: Optional[str] = None,
    document: Optional[bytes] = None,
    mime_type: Optional[str] = None,
    model_id: str,
    complete: provider.Completion = provider.complete,
    extract=extract_text,
    diagnostics: Optional[Diagnostics] = None,
) -> Iterator[AnalysisEvent]:
    """Run one analysis and yield its event stream."""
    stages = _run(
        text=text, document=document, mime_type=mime_type, model_id=model_id,
        complete=complete, extract=extract, diagnostics=diagnostics,
    )
    try:
        result = yield from stages
    except DocuTasksError as e:
        logger.error("Document analysis failed (%s): %s", e.category, e)
        yield ErrorEvent(error=str(e), category=e.category, hint=e.hint)
        return
    except Exception as e:
        logger.exception("Unexpected error in document analysis")
        yield ErrorEvent(error=f"Failed to analyze document: {e}", category="generic")
        return
    yield CompleteEvent(result=result)

def analyze_document(
    *,
    text: Optional[str] = None,
    document: Optional[bytes] = None,
    mime_type: Optional[str] = None,
    model_id: str,
    complete: provider.Completion = provider.complete,
    extract=extract_text,
    diagnostics: Optional[Diagnostics] = None,
) -> AnalysisResult:
    """Run one analysis without streaming; errors are raised, not reported."""
    stages = _run(
        text=text, document=document, mime_type=mime_type, model_id=model_id,
        complete=complete, extract=extract, diagnostics=diagnostics,
    )
    while True:
        try:
            next(stages)
        except StopIteration as stop:
            return stop.value
