import re
from enum import Enum
from typing import Optional

from grading_desk.core.config import DEVELOPING_MIN, EXTENDING_MIN, PROFICIENT_MIN


class LetterGrade(str, Enum):
    EMERGING = "Emerging"
    DEVELOPING = "Developing"
    PROFICIENT = "Proficient"
    EXTENDING = "Extending"


# Rubric level descriptions on Homework, with the score band each covers
RUBRIC_LEVELS = (
    (LetterGrade.EMERGING, "rubric_emerging", "<65%"),
    (LetterGrade.DEVELOPING, "rubric_developing", "65% - 79%"),
    (LetterGrade.PROFICIENT, "rubric_proficient", "80% - 89%"),
    (LetterGrade.EXTENDING, "rubric_extending", ">= 90%"),
)

# Normalized competency names that do not map onto their own camelCase form
_COMPETENCY_ALIASES = {
    "personalresponsibility": "responsibility",
    "criticalthinking": "criticalThinking",
    "creativethinking": "creativeThinking",
    "socialresponsibility": "socialResponsibility",
}


def letter_grade_for(score: Optional[int]) -> str:
    """Letter grade for a 0-100 score, or "" when no score is set."""
    if score is None:
        return ""
    if score >= EXTENDING_MIN:
        return LetterGrade.EXTENDING.value
    if score >= PROFICIENT_MIN:
        return LetterGrade.PROFICIENT.value
    if score >= DEVELOPING_MIN:
        return LetterGrade.DEVELOPING.value
    return LetterGrade.EMERGING.value


def competency_key(name: str) -> str:
    """
    Key under which a competency's score is stored in rubric_scores.

    "Communication" -> "communication", "Critical Thinking" -> "criticalThinking",
    "Personal Responsibility" -> "responsibility".
    """
    key = re.sub(r"\s(.)", lambda m: m.group(1).upper(), name.lower())
    key = re.sub(r"[^a-zA-Z0-9]", "", key)
    return _COMPETENCY_ALIASES.get(key.lower(), key)
