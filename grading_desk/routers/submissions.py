import logging
import mimetypes
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from grading_desk.core import storage
from grading_desk.core.config import SCORE_MAX, SCORE_MIN
from grading_desk.core.deps import get_current_user, get_db
from grading_desk.core.permissions import GRADER_ROLES, require_grader
from grading_desk.grading.letter_grade import letter_grade_for
from grading_desk.models.homework import Homework
from grading_desk.models.submission import Submission
from grading_desk.models.user import User
from grading_desk.schemas.homework import HomeworkRead
from grading_desk.schemas.submission import (
    GradeRead,
    GradeUpdate,
    SignedUrlRead,
    StudentRead,
    SubmissionRead,
    SubmissionSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_submission_exists(db: Session, submission_id: int) -> Submission:
    sub = db.query(Submission).filter(Submission.id == submission_id).first()
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub


def _ensure_can_view_submission(sub: Submission, user: User) -> None:
    # Teachers and admins can view any submission
    if user.role in GRADER_ROLES:
        return

    # Students can view their own
    if user.role == "student" and sub.student_id == user.id:
        return

    raise HTTPException(status_code=403, detail="Not allowed to view this submission")


def _find_file(sub: Submission, s3_key: str) -> dict:
    for f in sub.submitted_files or []:
        if f.get("s3_key") == s3_key:
            return f
    raise HTTPException(
        status_code=404,
        detail=f'File with key "{s3_key}" not found within this submission',
    )


def _file_type(f: dict) -> str | None:
    return f.get("file_type") or mimetypes.guess_type(f.get("file_name", ""))[0]


def _check_score(value, field: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or not (SCORE_MIN <= value <= SCORE_MAX):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be an integer between {SCORE_MIN} and {SCORE_MAX}",
        )


def _grade_of(sub: Submission) -> GradeRead | None:
    never_graded = (
        sub.graded_at is None
        and sub.score is None
        and sub.letter_grade is None
        and not sub.rubric_scores
        and not sub.feedback
    )
    if never_graded:
        return None

    return GradeRead(
        score=sub.score,
        letter_grade=sub.letter_grade,
        rubric_scores=sub.rubric_scores or {},
        feedback=sub.feedback,
        graded_by=sub.graded_by,
        graded_at=sub.graded_at,
    )


def _to_read(sub: Submission) -> SubmissionRead:
    return SubmissionRead(
        id=sub.id,
        homework_id=sub.homework_id,
        student=StudentRead.model_validate(sub.student),
        submitted_files=sub.submitted_files or [],
        submitted_at=sub.submitted_at,
        submission_status=sub.submission_status,
        is_locked=sub.is_locked,
        grade=_grade_of(sub),
        homework=HomeworkRead.model_validate(sub.homework),
        created_at=sub.created_at,
        updated_at=sub.updated_at,
    )


@router.get("/homework/{homework_id}", response_model=list[SubmissionSummary])
def list_submissions_for_homework(
    homework_id: int,
    db: Session = Depends(get_db),
    grader: User = Depends(require_grader),
):
    homework = db.query(Homework).filter(Homework.id == homework_id).first()
    if not homework:
        raise HTTPException(status_code=404, detail="Homework not found")

    return (
        db.query(Submission)
        .filter(Submission.homework_id == homework_id)
        .order_by(
            Submission.submitted_at.is_(None),  # NULLs last (SQLite-safe)
            Submission.submitted_at.desc(),
            Submission.id.asc(),
        )
        .all()
    )


@router.get("/{submission_id}", response_model=SubmissionRead)
def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = _ensure_submission_exists(db, submission_id)
    _ensure_can_view_submission(sub, current_user)
    return _to_read(sub)


@router.put("/{submission_id}/grade", response_model=SubmissionRead)
def update_submission_grade(
    submission_id: int,
    payload: GradeUpdate,
    db: Session = Depends(get_db),
    grader: User = Depends(require_grader),
):
    sub = _ensure_submission_exists(db, submission_id)

    provided = payload.model_fields_set

    _check_score(payload.score, "score")
    for key, value in (payload.rubric_scores or {}).items():
        _check_score(value, f"rubric score '{key}'")

    if "score" in provided:
        sub.score = payload.score
    if "feedback" in provided:
        sub.feedback = payload.feedback
    if "letter_grade" in provided:
        sub.letter_grade = payload.letter_grade
    if "rubric_scores" in provided:
        sub.rubric_scores = payload.rubric_scores or {}
    # a stored score always determines the letter
    if sub.score is not None:
        sub.letter_grade = letter_grade_for(sub.score)

    sub.graded_by = grader.id
    sub.graded_at = datetime.now(timezone.utc)
    sub.submission_status = payload.submission_status or "graded"
    sub.is_locked = True

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("failed to save grade for submission %s", submission_id)
        raise

    db.refresh(sub)
    logger.info(
        "submission %s graded by %s: score=%s letter=%s",
        sub.id,
        grader.id,
        sub.score,
        sub.letter_grade,
    )
    return _to_read(sub)


@router.get("/{submission_id}/display-url/{s3_key:path}", response_model=SignedUrlRead)
def get_signed_display_url(
    submission_id: int,
    s3_key: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = _ensure_submission_exists(db, submission_id)
    _ensure_can_view_submission(sub, current_user)
    f = _find_file(sub, s3_key)

    file_type = _file_type(f)
    return SignedUrlRead(
        signed_url=storage.generate_display_url(s3_key, file_type),
        file_name=f["file_name"],
        file_type=file_type,
    )


@router.get("/{submission_id}/download-url/{s3_key:path}", response_model=SignedUrlRead)
def get_signed_download_url(
    submission_id: int,
    s3_key: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = _ensure_submission_exists(db, submission_id)
    _ensure_can_view_submission(sub, current_user)
    f = _find_file(sub, s3_key)

    return SignedUrlRead(
        signed_url=storage.generate_download_url(s3_key, f["file_name"]),
        file_name=f["file_name"],
        file_type=_file_type(f),
    )
