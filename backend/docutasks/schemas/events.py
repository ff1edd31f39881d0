"""Events written to the analysis progress stream.

A stream is any number of ``progress`` events followed by exactly one
``complete`` or ``error`` event.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel

from .tasks import AnalysisResult

class ProgressEvent(BaseModel):
    type: Literal["progress"] = "progress"
    progress: int
    message: str

class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    result: AnalysisResult

class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str
    category: str = "generic"
    hint: Optional[str] = None

AnalysisEvent = Union[ProgressEvent, CompleteEvent, ErrorEvent]

def to_sse(event: AnalysisEvent) -> str:
    return f"data: {event.model_dump_json(exclude_none=True)}\n\n"
