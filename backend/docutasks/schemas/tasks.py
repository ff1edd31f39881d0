from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

class TaskCategory(str, Enum):
    UI_DESIGN = "UI Design"
    UI_DEVELOPMENT = "UI Development"
    FRONTEND_LOGIC = "Frontend Logic"
    BACKEND_DEVELOPMENT = "Backend Development"

DEFAULT_PRIORITY = 3

class Task(BaseModel):
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: int = DEFAULT_PRIORITY
    # reserved for other producers; the analysis pipeline leaves these unset
    category: Optional[TaskCategory] = None
    dependencies: Optional[List[str]] = None
    estimatedTime: Optional[str] = None

class AnalysisResult(BaseModel):
    tasks: List[Task]
    summary: str

    @classmethod
    def from_tasks(cls, tasks: List[Task]) -> "AnalysisResult":
        return cls(tasks=tasks, summary=f"Found {len(tasks)} tasks.")

class AnalyzeText(BaseModel):
    text: str

class ExportRequest(BaseModel):
    tasks: List[Task]
    sheet_name: Optional[str] = None
