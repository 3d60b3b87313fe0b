from datetime import datetime, timezone

import pytest

from grading_desk.grading.draft import (
    NOT_A_NUMBER,
    OUT_OF_RANGE,
    SCORE,
    GradeDraft,
    GradeField,
    parse_score,
)
from grading_desk.schemas.submission import GradeRead

KEYS = ["communication", "criticalThinking"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, (None, None)),
        ("", (None, None)),
        ("  ", (None, None)),
        ("85", (85, None)),
        (" 7 ", (7, None)),
        (0, (0, None)),
        (100, (100, None)),
        (90.0, (90, None)),
        ("abc", (None, NOT_A_NUMBER)),
        (True, (None, NOT_A_NUMBER)),
        (float("nan"), (None, NOT_A_NUMBER)),
        ("150", (None, OUT_OF_RANGE)),
        (-1, (None, OUT_OF_RANGE)),
        ("85.5", (None, OUT_OF_RANGE)),
        (10**400, (None, OUT_OF_RANGE)),
        ("1e400", (None, OUT_OF_RANGE)),
    ],
)
def test_parse_score(raw, expected):
    assert parse_score(raw) == expected


def test_empty_draft_has_no_letter_grade():
    draft = GradeDraft.from_grade(None, KEYS)
    assert draft.score is None
    assert draft.letter_grade == ""
    assert draft.rubric_scores == {"communication": None, "criticalThinking": None}
    assert not draft.has_errors


def test_valid_score_derives_letter_grade():
    draft = GradeDraft.from_grade(None, KEYS)
    assert draft.set_score("85") is True
    assert draft.score == 85
    assert draft.letter_grade == "Proficient"

    assert draft.set_score("") is True
    assert draft.score is None
    assert draft.letter_grade == ""


def test_invalid_score_keeps_last_valid_value_and_shows_raw_text():
    draft = GradeDraft.from_grade(None, KEYS)
    draft.set_score(70)

    assert draft.set_score("150") is False
    assert draft.score == 70
    assert draft.letter_grade == "Developing"
    assert draft.error_for(SCORE) == OUT_OF_RANGE
    assert draft.display_value(SCORE) == "150"

    # correcting the input clears the error
    assert draft.set_score("91") is True
    assert draft.error_for(SCORE) is None
    assert draft.display_value(SCORE) == 91
    assert draft.letter_grade == "Extending"


def test_rubric_errors_are_per_key():
    draft = GradeDraft.from_grade(None, KEYS)
    comm = GradeField.rubric("communication")
    crit = GradeField.rubric("criticalThinking")

    assert draft.set_rubric_score("communication", "150") is False
    assert draft.set_rubric_score("criticalThinking", "60") is True

    assert draft.error_for(comm) == OUT_OF_RANGE
    assert draft.error_for(crit) is None
    assert draft.rubric_scores == {"communication": None, "criticalThinking": 60}
    assert draft.display_value(comm) == "150"
    assert draft.has_errors


def test_unknown_competency_is_rejected():
    draft = GradeDraft.from_grade(None, KEYS)
    with pytest.raises(KeyError):
        draft.set_rubric_score("identity", 50)


def test_from_grade_keeps_only_homework_competencies():
    grade = GradeRead(
        score=72,
        letter_grade="Developing",
        rubric_scores={"communication": 70, "identity": 10},
        feedback="<p>ok</p>",
        graded_by=3,
    )
    draft = GradeDraft.from_grade(grade, KEYS)
    assert draft.rubric_scores == {"communication": 70, "criticalThinking": None}
    assert draft.letter_grade == "Developing"
    assert draft.feedback == "<p>ok</p>"


def test_letter_only_grade_is_shown_until_score_entered():
    grade = GradeRead(score=None, letter_grade="Proficient")
    draft = GradeDraft.from_grade(grade, KEYS)
    assert draft.letter_grade == "Proficient"

    draft.set_score(50)
    assert draft.letter_grade == "Emerging"
    draft.set_score("")
    assert draft.letter_grade == ""


def test_stored_out_of_range_values_are_flagged_on_load():
    grade = GradeRead(score=120, rubric_scores={"communication": -5})
    draft = GradeDraft.from_grade(grade, KEYS)
    assert draft.error_for(SCORE) == OUT_OF_RANGE
    assert draft.error_for(GradeField.rubric("communication")) == OUT_OF_RANGE


def test_payload_nulls_absent_fields():
    draft = GradeDraft.from_grade(None, KEYS)
    draft.set_rubric_score("communication", 88)
    draft.feedback = "<p>See comments</p>"
    at = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)

    assert draft.to_payload(graded_by=7, graded_at=at) == {
        "score": None,
        "rubricScores": {"communication": 88, "criticalThinking": None},
        "letterGrade": None,
        "feedback": "<p>See comments</p>",
        "gradedBy": 7,
        "gradedAt": "2026-03-02T12:00:00+00:00",
        "submissionStatus": "graded",
    }


def test_grade_field_names():
    assert str(SCORE) == "score"
    assert str(GradeField.rubric("communication")) == "communication"
