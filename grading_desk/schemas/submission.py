from datetime import datetime
from typing import Literal, Optional

from grading_desk.schemas.base import CamelModel
from grading_desk.schemas.homework import HomeworkRead

Score = Optional[int]

SubmissionStatus = Literal["assigned", "submitted", "graded"]


class SubmittedFile(CamelModel):
    s3_key: str
    file_name: str
    file_type: Optional[str] = None
    size: Optional[int] = None


class StudentRead(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class GradeRead(CamelModel):
    score: Score = None
    letter_grade: Optional[str] = None
    rubric_scores: dict[str, Score] = {}
    feedback: Optional[str] = None
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None


class SubmissionRead(CamelModel):
    id: int
    homework_id: int
    student: StudentRead
    submitted_files: list[SubmittedFile] = []
    submitted_at: Optional[datetime] = None
    submission_status: SubmissionStatus
    is_locked: bool = False
    grade: Optional[GradeRead] = None
    homework: Optional[HomeworkRead] = None
    created_at: datetime
    updated_at: datetime


class SubmissionSummary(CamelModel):
    id: int
    student: StudentRead
    submission_status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    updated_at: datetime
    score: Score = None
    letter_grade: Optional[str] = None


class GradeUpdate(CamelModel):
    # only fields present in the request body replace the stored grade
    score: Optional[int] = None
    rubric_scores: Optional[dict[str, Optional[int]]] = None
    letter_grade: Optional[str] = None
    feedback: Optional[str] = None

    # accepted for compatibility, the server records the caller and its own clock
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None

    submission_status: Optional[SubmissionStatus] = None


class SignedUrlRead(CamelModel):
    signed_url: str
    file_name: str
    file_type: Optional[str] = None
