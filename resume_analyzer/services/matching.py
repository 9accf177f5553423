import math
import re
from typing import Iterable, List, Sequence

from resume_analyzer.models.models import FitAssessment, SkillMatch

SKILL_LEXICON = (
    "java",
    "python",
    "flutter",
    "react",
    "node",
    "javascript",
    "sql",
    "aws",
    "docker",
    "mongodb",
    "kubernetes",
    "azure",
)


def _word_pattern(token: str) -> "re.Pattern":
    # token must not touch a word character on either side
    return re.compile(rf"(?<!\w){re.escape(token.lower())}(?!\w)")


def count_occurrences(token: str, text: str) -> int:
    return len(_word_pattern(token).findall(text))


def match_skills(text: str, lexicon: Sequence[str] = SKILL_LEXICON) -> SkillMatch:
    """Count whole-word lexicon hits in the lower-cased transcript."""
    lowered = (text or "").lower()
    skill_strength = {}
    found_skills = []
    for skill in lexicon:
        count = count_occurrences(skill, lowered)
        skill_strength[skill] = count
        if count > 0:
            found_skills.append(skill)
    return SkillMatch(skill_strength=skill_strength, found_skills=found_skills)


def jd_skills(job_description: str, lexicon: Sequence[str] = SKILL_LEXICON, whole_word: bool = False) -> List[str]:
    jd_text = (job_description or "").lower()
    if whole_word:
        return [s for s in lexicon if count_occurrences(s, jd_text) > 0]
    return [s for s in lexicon if s.lower() in jd_text]


def percentage(part: int, total: int) -> int:
    if total == 0:
        return 0
    # rounds .5 up
    return int(math.floor(100 * part / total + 0.5))


def score_fit(
    found_skills: Iterable[str],
    job_description: str,
    lexicon: Sequence[str] = SKILL_LEXICON,
    whole_word: bool = False,
) -> FitAssessment:
    found = set(found_skills)
    wanted = jd_skills(job_description, lexicon, whole_word=whole_word)
    matching = [s for s in wanted if s in found]
    missing = [s for s in wanted if s not in found]
    return FitAssessment(
        fit_score=percentage(len(matching), len(wanted)),
        jd_skills=wanted,
        matching_skills=matching,
        missing_skills=missing,
    )
