from datetime import datetime
from typing import Optional

from grading_desk.schemas.base import CamelModel


class HomeworkRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    due_at: Optional[datetime] = None
    status: str  # "draft" | "published"
    core_competencies: list[str] = []

    rubric_emerging: str = ""
    rubric_developing: str = ""
    rubric_proficient: str = ""
    rubric_extending: str = ""
