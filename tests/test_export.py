import io

import pytest
from openpyxl import load_workbook

from docutasks.schemas.tasks import Task
from docutasks.services.normalize import normalize_response
from docutasks.services.export import (
    DEFAULT_SHEET_NAME,
    HEADERS,
    read_spreadsheet,
    serialize_to_spreadsheet,
    sheet_title,
)


@pytest.fixture
def tasks():
    return [
        Task(id="task-1", title="User Registration", description="Sign up with email."),
        Task(id="task-2", title="Audit Logs", description="Review activity.", estimatedTime="2h"),
    ]


def test_export_round_trip(tasks):
    rows = read_spreadsheet(serialize_to_spreadsheet(tasks))

    assert rows == [
        {"Task ID": "task-1", "Title": "User Registration", "Description": "Sign up with email.", "Estimated Time": ""},
        {"Task ID": "task-2", "Title": "Audit Logs", "Description": "Review activity.", "Estimated Time": "2h"},
    ]


def test_export_normalizes_titles():
    data = serialize_to_spreadsheet([Task(id="task-1", title="user_login", description="d")])

    assert read_spreadsheet(data)[0]["Title"] == "User Login"


def test_export_header_and_sheet_name(tasks):
    wb = load_workbook(io.BytesIO(serialize_to_spreadsheet(tasks, "Q3 Roadmap!")))
    ws = wb.active

    assert ws.title == "Q3Roadmap"
    assert [c.value for c in ws[1]] == HEADERS
    assert ws["A1"].font.bold
    assert ws.freeze_panes == "A2"


def test_export_of_no_tasks_has_only_header():
    assert read_spreadsheet(serialize_to_spreadsheet([])) == []


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        (None, DEFAULT_SHEET_NAME),
        ("", DEFAULT_SHEET_NAME),
        ("!!! ???", DEFAULT_SHEET_NAME),
        ("My Project: v2", "MyProjectv2"),
        ("x" * 40, "x" * 31),
    ],
)
def test_sheet_title(hint, expected):
    assert sheet_title(hint) == expected


def test_formula_like_text_is_stored_as_plain_string():
    task = Task(id="task-1", title="Links", description='=HYPERLINK("http://x","click")', estimatedTime="+1d")
    ws = load_workbook(io.BytesIO(serialize_to_spreadsheet([task]))).active

    assert ws["C2"].data_type == "s"
    assert ws["C2"].value == '=HYPERLINK("http://x","click")'
    assert ws["D2"].data_type == "s"


def test_control_characters_are_dropped_from_cells():
    tasks = normalize_response('[{"task": "a", "description": "bad\\u0001char"}]')

    rows = read_spreadsheet(serialize_to_spreadsheet(tasks))

    assert rows[0]["Description"] == "badchar"
    assert rows[0]["Title"] == "A"
