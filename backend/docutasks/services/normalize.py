"""Turn a raw model reply into a non-empty list of canonical tasks.

The reply is untrusted: it may be wrapped in a code fence, may not be JSON at
all, and its layout drifts between prompts and providers. Decoding goes

    decode -> classify -> map_items          (a usable array was found)
                       -> synthesize_fallback (anything else)

and never raises. Per-item problems are reported as ``Anomaly`` records to a
diagnostics sink instead of being logged inline, so the decoder itself stays
pure.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional, Sequence

from ..core.errors import MalformedResponse, UnrecognizedShape
from ..core.logging import get_logger
from ..schemas.tasks import DEFAULT_PRIORITY, Task
from .titles import normalize_title

logger = get_logger(__name__)

DEFAULT_TITLE = "Untitled Task"
DEFAULT_DESCRIPTION = "No description provided"
FALLBACK_TITLE = "Document Analysis"
FALLBACK_DESCRIPTION = "Analyze the provided document for tasks and requirements"
MALFORMED_DESCRIPTION = (
    "There was an error parsing the AI response. "
    "Please try again or contact support."
)

TITLE_KEYS = ("task", "title", "name", "id")
DESCRIPTION_KEYS = ("description", "desc", "details")

_FENCE = re.compile(r"^```(?:json)?\s*\n?|\n?```$", re.IGNORECASE)


@dataclass(frozen=True)
class Anomaly:
    kind: str
    index: Optional[int]
    detail: str


Diagnostics = Callable[[Anomaly], None]


def log_anomaly(anomaly: Anomaly) -> None:
    where = "" if anomaly.index is None else f" (item {anomaly.index})"
    logger.warning("%s%s: %s", anomaly.kind, where, anomaly.detail)


# --- decoding ---------------------------------------------------------------

def decode(raw: str) -> Any:
    """Parse ``raw`` as JSON, tolerating a surrounding Markdown code fence."""
    text = _FENCE.sub("", raw.strip()).strip()
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e


# --- shape classification -----------------------------------------------------

class ShapeMatch(NamedTuple):
    shape: str
    items: list


def match_tasks_wrapper(value: Any) -> Optional[ShapeMatch]:
    if isinstance(value, dict) and isinstance(value.get("tasks"), list):
        return ShapeMatch("tasks_wrapper", value["tasks"])
    return None


def match_bare_array(value: Any) -> Optional[ShapeMatch]:
    if isinstance(value, list):
        return ShapeMatch("bare_array", value)
    return None


def match_first_array_property(value: Any) -> Optional[ShapeMatch]:
    if not isinstance(value, dict):
        return None
    for key, candidate in value.items():
        if isinstance(candidate, list) and candidate:
            return ShapeMatch(f"property:{key}", candidate)
    return None


# tried in order; the first match wins
SHAPE_MATCHERS: Sequence[Callable[[Any], Optional[ShapeMatch]]] = (
    match_tasks_wrapper,
    match_bare_array,
    match_first_array_property,
)


def classify(value: Any) -> ShapeMatch:
    for matcher in SHAPE_MATCHERS:
        match = matcher(value)
        if match is not None:
            return match
    raise UnrecognizedShape(f"No task array found in {type(value).__name__} response")


# --- mapping ----------------------------------------------------------------

def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_present(item: dict, keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        text = _as_text(item.get(key))
        if text is not None:
            return text
    return None


def map_item(item: Any, position: int, diagnostics: Diagnostics) -> Task:
    """Map one array element at 1-based ``position`` to a task."""
    title = None
    description = None

    if isinstance(item, str):
        title = normalize_title(item) or DEFAULT_TITLE
    elif isinstance(item, dict):
        raw_title = _first_present(item, TITLE_KEYS)
        if raw_title is None:
            diagnostics(Anomaly("missing_title", position, f"none of {TITLE_KEYS} present"))
        title = normalize_title(raw_title or "") or f"Task {position}"
        description = _first_present(item, DESCRIPTION_KEYS)
        if description is None:
            diagnostics(Anomaly("missing_description", position, f"none of {DESCRIPTION_KEYS} present"))
    else:
        diagnostics(Anomaly("unusable_item", position, f"{type(item).__name__} item"))
        title = f"Task {position}"

    return Task(
        id=f"task-{position}",
        title=title,
        description=description or DEFAULT_DESCRIPTION,
        priority=DEFAULT_PRIORITY,
    )


def map_items(items: Sequence[Any], diagnostics: Diagnostics = log_anomaly) -> list[Task]:
    return [map_item(item, i, diagnostics) for i, item in enumerate(items, start=1)]


# --- fallback -----------------------------------------------------------------

def synthesize_fallback(source: Any) -> list[Task]:
    """Build the single best-effort task used when no task array is usable.

    ``source`` is either the ``MalformedResponse`` raised by ``decode`` or the
    parsed value that failed classification.
    """
    description = FALLBACK_DESCRIPTION
    if isinstance(source, MalformedResponse):
        description = MALFORMED_DESCRIPTION
    elif isinstance(source, str):
        if source.strip():
            description = source
    elif isinstance(source, dict):
        pairs = [
            f"{normalize_title(key)}: {value}"
            for key, value in source.items()
            if isinstance(value, str)
        ]
        if pairs:
            description = ", ".join(pairs)

    return [
        Task(
            id="task-1",
            title=FALLBACK_TITLE,
            description=description,
            priority=DEFAULT_PRIORITY,
        )
    ]


# --- entry point --------------------------------------------------------------

def normalize_response(raw: str, diagnostics: Optional[Diagnostics] = None) -> list[Task]:
    """Decode a model reply into tasks. Always returns at least one task."""
    sink = diagnostics or log_anomaly

    try:
        value = decode(raw)
    except MalformedResponse as e:
        sink(Anomaly("malformed_response", None, str(e)))
        return synthesize_fallback(e)

    try:
        match = classify(value)
    except UnrecognizedShape as e:
        sink(Anomaly("unrecognized_shape", None, str(e)))
        return synthesize_fallback(value)

    logger.info("Response shape %s with %d items", match.shape, len(match.items))
    tasks = map_items(match.items, sink)
    if not tasks:
        sink(Anomaly("empty_array", None, f"{match.shape} held no items"))
        return synthesize_fallback(value)
    return tasks
