import pytest

from grading_desk.grading.letter_grade import LetterGrade, competency_key, letter_grade_for


@pytest.mark.parametrize(
    "score, expected",
    [
        (0, "Emerging"),
        (64, "Emerging"),
        (65, "Developing"),
        (79, "Developing"),
        (80, "Proficient"),
        (89, "Proficient"),
        (90, "Extending"),
        (100, "Extending"),
    ],
)
def test_letter_grade_boundaries(score, expected):
    assert letter_grade_for(score) == expected


def test_every_score_has_exactly_one_band():
    for score in range(0, 101):
        grade = letter_grade_for(score)
        if score >= 90:
            assert grade == LetterGrade.EXTENDING
        elif score >= 80:
            assert grade == LetterGrade.PROFICIENT
        elif score >= 65:
            assert grade == LetterGrade.DEVELOPING
        else:
            assert grade == LetterGrade.EMERGING


def test_no_score_has_no_letter_grade():
    assert letter_grade_for(None) == ""


@pytest.mark.parametrize(
    "name, key",
    [
        ("Communication", "communication"),
        ("Identity", "identity"),
        ("Critical Thinking", "criticalThinking"),
        ("Creative Thinking", "creativeThinking"),
        ("Personal Responsibility", "responsibility"),
        ("Social Responsibility", "socialResponsibility"),
        ("Positive Personal and Cultural Identity", "positivePersonalAndCulturalIdentity"),
    ],
)
def test_competency_key(name, key):
    assert competency_key(name) == key
