"""Grading session: review and score one homework submission at a time.

The session owns all grading state for the teacher's screen: the submission
being shown, the grade draft, the file preview and the save-in-progress
set. Every network call is tagged with the submission it targets; answers
that arrive after the teacher moved to another submission are dropped.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from grading_desk.grading.client import GradingServiceClient
from grading_desk.grading.draft import GradeDraft, RawScore
from grading_desk.grading.errors import (
    GradeSaveError,
    PreviewError,
    SaveInProgressError,
    ServiceError,
    SubmissionLoadError,
)
from grading_desk.grading.letter_grade import competency_key
from grading_desk.grading.preview import FilePreview, initial_preview_file
from grading_desk.schemas.homework import HomeworkRead
from grading_desk.schemas.submission import SignedUrlRead, SubmissionRead, SubmissionSummary, SubmittedFile

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load submission details. Please try again."
SAVE_FAILED = "Failed to save evaluation. Please try again."
SAVED = "Evaluation saved successfully!"
CORRECT_ERRORS = "Please correct the input errors before saving."


class Direction(str, Enum):
    PREVIOUS = "previous"
    NEXT = "next"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def order_for_navigation(submissions: list[SubmissionSummary]) -> list[int]:
    """Submission ids, most recently updated first."""
    ordered = sorted(submissions, key=lambda s: _as_utc(s.updated_at), reverse=True)
    return [s.id for s in ordered]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class GradingSession:
    def __init__(
        self,
        client: GradingServiceClient,
        homework: HomeworkRead,
        grader_id: int,
        submissions: Optional[list[SubmissionSummary]] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self.homework = homework
        self.grader_id = grader_id
        self.clock = clock
        self.order = order_for_navigation(submissions or [])

        self.submission_id: Optional[int] = None
        self.submission: Optional[SubmissionRead] = None
        self.draft = GradeDraft.from_grade(None, self.competency_keys)
        self.preview = FilePreview()

        # page-level error (failed load or save) and the transient status line
        self.error: Optional[str] = None
        self.message: str = ""

        self._saving: set[int] = set()

    @classmethod
    async def open(cls, client: GradingServiceClient, homework_id: int, grader_id: int, **kwargs) -> "GradingSession":
        """Load the homework and its submission list, ready for select_submission."""
        try:
            homework = await client.get_homework(homework_id)
            submissions = await client.list_homework_submissions(homework_id)
        except ServiceError as e:
            logger.error("could not open grading for homework %s: %s", homework_id, e)
            raise SubmissionLoadError(LOAD_FAILED) from e
        return cls(client, homework, grader_id, submissions=submissions, **kwargs)

    @property
    def competency_keys(self) -> list[str]:
        return [competency_key(name) for name in self.homework.core_competencies]

    @property
    def letter_grade(self) -> str:
        return self.draft.letter_grade

    @property
    def is_saving(self) -> bool:
        return self.submission_id in self._saving

    @property
    def previous_id(self) -> Optional[int]:
        return self._neighbour(-1)

    @property
    def next_id(self) -> Optional[int]:
        return self._neighbour(1)

    def _neighbour(self, step: int) -> Optional[int]:
        if self.submission_id not in self.order:
            return None
        index = self.order.index(self.submission_id) + step
        if 0 <= index < len(self.order):
            return self.order[index]
        return None

    def _is_current(self, submission_id: int) -> bool:
        return self.submission_id == submission_id

    # -- loading ---------------------------------------------------------

    async def select_submission(self, submission_id: int) -> SubmissionRead:
        self.submission_id = submission_id
        self.submission = None
        self.draft = GradeDraft.from_grade(None, self.competency_keys)
        self.preview = FilePreview()
        self.error = None
        self.message = ""

        try:
            submission = await self.client.get_submission(submission_id)
        except ServiceError as e:
            logger.error("failed to fetch submission %s: %s", submission_id, e)
            if self._is_current(submission_id):
                self.error = LOAD_FAILED
            raise SubmissionLoadError(LOAD_FAILED) from e

        if not self._is_current(submission_id):
            logger.debug("dropping stale load of submission %s", submission_id)
            return submission

        self.submission = submission
        self.draft = GradeDraft.from_grade(submission.grade, self.competency_keys)

        first = initial_preview_file(submission.submitted_files)
        if first is not None:
            await self.show_file(first)
        return submission

    async def navigate(self, direction: Direction) -> bool:
        """Move to the adjacent submission. Returns False at either end."""
        target = self.previous_id if Direction(direction) is Direction.PREVIOUS else self.next_id
        if target is None:
            return False
        await self.select_submission(target)
        return True

    # -- editing ---------------------------------------------------------

    def update_score(self, value: RawScore) -> bool:
        return self.draft.set_score(value)

    def update_rubric_score(self, key: str, value: RawScore) -> bool:
        return self.draft.set_rubric_score(key, value)

    def update_feedback(self, html: str) -> None:
        self.draft.feedback = html

    async def save(self) -> bool:
        """
        Persist the draft as the submission's grade.

        Returns False without contacting the service while any input has a
        validation error. Raises GradeSaveError when the service rejects the
        grade; the draft is left as it was so the grader can retry.
        """
        if self.submission_id is None or self.submission is None:
            raise GradeSaveError("No submission selected")

        if self.draft.has_errors:
            self.message = CORRECT_ERRORS
            logger.info(
                "save blocked for submission %s: %s",
                self.submission_id,
                ", ".join(str(f) for f in self.draft.errors),
            )
            return False

        if self.is_saving:
            raise SaveInProgressError(f"Submission {self.submission_id} is already being saved")

        target = self.submission_id
        payload = self.draft.to_payload(self.grader_id, self.clock())

        self._saving.add(target)
        self.message = ""
        self.error = None
        try:
            updated = await self.client.update_submission_grade(target, payload)
        except ServiceError as e:
            logger.error("failed to save grade for submission %s: %s", target, e)
            if self._is_current(target):
                self.error = SAVE_FAILED
            raise GradeSaveError(SAVE_FAILED) from e
        finally:
            self._saving.discard(target)

        if not self._is_current(target):
            logger.info("grade for submission %s saved after navigating away", target)
            return True

        self.submission = updated
        self.draft = GradeDraft.from_grade(updated.grade, self.competency_keys)
        self.message = SAVED
        return True

    # -- file preview ----------------------------------------------------

    async def show_file(self, file: SubmittedFile) -> FilePreview:
        target = self.submission_id
        preview = FilePreview(file=file, loading=True)
        self.preview = preview

        try:
            url = await self.client.get_signed_display_url(target, file.s3_key)
        except ServiceError as e:
            logger.warning("cannot preview %s of submission %s: %s", file.file_name, target, e)
            preview.failed = True
            url = None
        finally:
            preview.loading = False

        if not self._is_current(target) or self.preview is not preview:
            logger.debug("dropping stale preview url for %s", file.file_name)
            return preview

        preview.url = url
        return preview

    async def download_url(self, file: Optional[SubmittedFile] = None) -> SignedUrlRead:
        file = file or self.preview.file
        if file is None or self.submission_id is None:
            raise PreviewError("No file selected")
        try:
            return await self.client.get_signed_download_url(self.submission_id, file.s3_key)
        except ServiceError as e:
            logger.error("failed to get download url for %s: %s", file.file_name, e)
            raise PreviewError(f"Failed to download {file.file_name}") from e
