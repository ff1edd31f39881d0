import io
import re
from typing import List, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font

from ..core.errors import ExportError
from ..core.logging import get_logger
from ..schemas.tasks import Task
from .titles import normalize_title

logger = get_logger(__name__)

DEFAULT_SHEET_NAME = "Tasks"
MAX_SHEET_NAME = 31  # Excel limit
MAX_COLUMN_WIDTH = 80
HEADERS = ["Task ID", "Title", "Description", "Estimated Time"]

def sheet_title(hint: Optional[str]) -> str:
    name = re.sub(r"[^A-Za-z0-9]", "", hint or "")[:MAX_SHEET_NAME]
    return name or DEFAULT_SHEET_NAME

def _cell_text(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)

def serialize_to_spreadsheet(tasks: List[Task], sheet_name_hint: Optional[str] = None) -> bytes:
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_title(sheet_name_hint)

        ws.append(HEADERS)
        for t in tasks:
            ws.append([
                _cell_text(v)
                for v in (t.id, normalize_title(t.title), t.description, t.estimatedTime or "")
            ])
            # model text is data, never a formula
            for cell in ws[ws.max_row]:
                if cell.data_type == "f":
                    cell.data_type = "s"

        for cell in ws[1]:
            cell.font = Font(bold=True)
        ws.freeze_panes = "A2"
        for column in ws.columns:
            width = max(len(str(c.value or "")) for c in column)
            ws.column_dimensions[column[0].column_letter].width = min(width + 2, MAX_COLUMN_WIDTH)
            for c in column[1:]:
                c.alignment = Alignment(wrap_text=True, vertical="top")

        buf = io.BytesIO()
        wb.save(buf)
    except Exception as e:
        logger.exception("Error exporting %d tasks to Excel", len(tasks))
        raise ExportError(f"Failed to export tasks to Excel: {e}") from e

    data = buf.getvalue()
    logger.info("Exported %d tasks to sheet %r (%d bytes)", len(tasks), ws.title, len(data))
    return data

def read_spreadsheet(data: bytes) -> List[dict]:
    """Read rows back from a workbook written by ``serialize_to_spreadsheet``."""
    ws = load_workbook(io.BytesIO(data)).active
    rows = ws.iter_rows(values_only=True)
    header = next(rows, None) or ()
    return [
        {k: ("" if v is None else v) for k, v in zip(header, row)}
        for row in rows
    ]
