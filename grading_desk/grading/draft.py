"""In-progress grade edits for one submission.

A GradeDraft is created from the grade the service returned, edited field
by field, and turned into the update payload on save. The letter grade is
never edited directly: it is derived from the score.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from grading_desk.core.config import SCORE_MAX, SCORE_MIN
from grading_desk.grading.letter_grade import letter_grade_for
from grading_desk.schemas.submission import GradeRead

NOT_A_NUMBER = f"Please enter an integer between {SCORE_MIN} and {SCORE_MAX}."
OUT_OF_RANGE = f"Scores must be integers between {SCORE_MIN} and {SCORE_MAX}."

RawScore = Union[None, str, int, float]


class FieldKind(str, Enum):
    SCORE = "score"
    RUBRIC = "rubric"


@dataclass(frozen=True)
class GradeField:
    """A validated input: the overall score, or one rubric competency."""

    kind: FieldKind
    key: Optional[str] = None

    @classmethod
    def rubric(cls, key: str) -> "GradeField":
        return cls(FieldKind.RUBRIC, key)

    def __str__(self) -> str:
        return self.key if self.kind is FieldKind.RUBRIC else self.kind.value


SCORE = GradeField(FieldKind.SCORE)


def parse_score(value: RawScore) -> tuple[Optional[int], Optional[str]]:
    """
    Parse a score typed by the grader.

    Returns (score, error). Empty input is a valid "unset" score.
    """
    if value is None:
        return None, None

    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return None, None
        try:
            number = float(text)
        except ValueError:
            return None, NOT_A_NUMBER
    elif isinstance(value, bool):
        return None, NOT_A_NUMBER
    elif isinstance(value, int):
        # big ints overflow float(); range check them directly
        if SCORE_MIN <= value <= SCORE_MAX:
            return value, None
        return None, OUT_OF_RANGE
    else:
        number = float(value)

    if math.isnan(number):
        return None, NOT_A_NUMBER
    if not number.is_integer() or not (SCORE_MIN <= number <= SCORE_MAX):
        return None, OUT_OF_RANGE
    return int(number), None


@dataclass
class GradeDraft:
    score: Optional[int] = None
    rubric_scores: dict[str, Optional[int]] = field(default_factory=dict)
    feedback: str = ""
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None

    # letter grade saved without a score, shown until a score is entered
    stored_letter_grade: str = ""

    errors: dict[GradeField, str] = field(default_factory=dict)
    # what the grader typed for fields that currently have an error
    raw_inputs: dict[GradeField, Any] = field(default_factory=dict)

    @classmethod
    def from_grade(cls, grade: Optional[GradeRead], competency_keys: list[str]) -> "GradeDraft":
        if grade is None:
            return cls(rubric_scores={key: None for key in competency_keys})

        stored_rubric = grade.rubric_scores or {}
        draft = cls(
            score=grade.score,
            rubric_scores={key: stored_rubric.get(key) for key in competency_keys},
            feedback=grade.feedback or "",
            graded_by=grade.graded_by,
            graded_at=grade.graded_at,
            stored_letter_grade=(grade.letter_grade or "") if grade.score is None else "",
        )

        # grades written by older clients may hold values we would reject now
        if grade.score is not None and parse_score(grade.score)[1]:
            draft.errors[SCORE] = OUT_OF_RANGE
        for key, value in draft.rubric_scores.items():
            if value is not None and parse_score(value)[1]:
                draft.errors[GradeField.rubric(key)] = OUT_OF_RANGE
        return draft

    @property
    def letter_grade(self) -> str:
        if self.score is None:
            return self.stored_letter_grade
        return letter_grade_for(self.score)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_for(self, grade_field: GradeField) -> Optional[str]:
        return self.errors.get(grade_field)

    def display_value(self, grade_field: GradeField) -> Any:
        """Value to show in the input box: the raw text while it is invalid."""
        if grade_field in self.raw_inputs:
            return self.raw_inputs[grade_field]
        if grade_field.kind is FieldKind.SCORE:
            return self.score
        return self.rubric_scores.get(grade_field.key)

    def set_score(self, value: RawScore) -> bool:
        ok, score = self._accept(SCORE, value)
        if not ok:
            return False
        self.score = score
        self.stored_letter_grade = ""
        return True

    def set_rubric_score(self, key: str, value: RawScore) -> bool:
        if key not in self.rubric_scores:
            raise KeyError(f"Unknown competency: {key}")
        grade_field = GradeField.rubric(key)
        ok, score = self._accept(grade_field, value)
        if not ok:
            return False
        self.rubric_scores[key] = score
        return True

    def _accept(self, grade_field: GradeField, value: RawScore) -> tuple[bool, Optional[int]]:
        score, error = parse_score(value)
        if error:
            self.errors[grade_field] = error
            self.raw_inputs[grade_field] = value
            return False, None
        self.errors.pop(grade_field, None)
        self.raw_inputs.pop(grade_field, None)
        return True, score

    def to_payload(self, graded_by: int, graded_at: datetime) -> dict:
        return {
            "score": self.score,
            "rubricScores": dict(self.rubric_scores),
            "letterGrade": self.letter_grade or None,
            "feedback": self.feedback,
            "gradedBy": graded_by,
            "gradedAt": graded_at.isoformat(),
            "submissionStatus": "graded",
        }
