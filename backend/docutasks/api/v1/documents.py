from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response, StreamingResponse

from ...core.config import settings
from ...schemas.events import to_sse
from ...schemas.tasks import AnalyzeText, ExportRequest
from ...services.analysis import analyze, analyze_document
from ...services.export import serialize_to_spreadsheet
from ...services.extraction import SUPPORTED_MIME_TYPES
from ...services.provider import Completion
from ..deps import get_completion, get_model_id

router = APIRouter(prefix="/documents")

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def _event_stream(events) -> StreamingResponse:
    return StreamingResponse(
        (to_sse(e) for e in events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

@router.post("/analyze")
def analyze_upload(
    document: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    complete: Completion = Depends(get_completion),
    model_id: str = Depends(get_model_id),
):
    if document is None:
        if not text or not text.strip():
            raise HTTPException(status_code=400, detail="No document or text provided")
        return _event_stream(analyze(text=text, model_id=model_id, complete=complete))

    if document.content_type not in SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail="Invalid file type. Only PDF, DOCX, and TXT files are allowed.",
        )
    data = document.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File exceeds the upload size limit")

    return _event_stream(
        analyze(document=data, mime_type=document.content_type, model_id=model_id, complete=complete)
    )

@router.post("/analyze/text", response_model=None)
def analyze_text(
    body: AnalyzeText,
    stream: bool = True,
    complete: Completion = Depends(get_completion),
    model_id: str = Depends(get_model_id),
):
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="No document or text provided")
    if not stream:
        # errors go through the app-level DocuTasksError handler
        return analyze_document(text=body.text, model_id=model_id, complete=complete)
    return _event_stream(analyze(text=body.text, model_id=model_id, complete=complete))

@router.post("/export")
def export(body: ExportRequest):
    # ExportError is rendered by the app-level DocuTasksError handler
    data = serialize_to_spreadsheet(body.tasks, body.sheet_name)
    return Response(
        content=data,
        media_type=XLSX,
        headers={"Content-Disposition": "attachment; filename=tasks.xlsx"},
    )
