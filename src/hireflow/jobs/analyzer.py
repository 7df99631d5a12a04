"""Resume analyzer for scoring resume text against job requirements."""

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from hireflow.jobs.experience import MONTHS_PER_YEAR, extract_experience_years
from hireflow.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResumeEvaluation:
    """Outcome of evaluating one resume against one job."""
    skill_match_percent: int
    experience_match: bool
    priority: int
    extracted_experience_years: int
    matched_skills: Tuple[str, ...] = field(default_factory=tuple)


def skill_match_percent(matched: int, total: int) -> int:
    """Percentage of required skills matched, rounded half up.

    Returns 0 when there are no required skills.
    """
    if total <= 0 or matched <= 0:
        return 0
    return (200 * matched + total) // (2 * total)


class ResumeAnalyzer:
    """Scores resume text against a job's skills and experience requirement.

    Matching is case-insensitive plain substring search: no tokenization,
    stemming or synonyms.
    """

    PRIORITY_BASE = 1
    PRIORITY_CAP = 5
    HIGH_SKILL_MATCH = 75
    CERTIFICATION_MARKERS = ("certification", "certified")
    HONORS_MARKERS = ("honors", "distinction")

    def __init__(self):
        self.logger = logger.bind(component="resume_analyzer")

    def evaluate(
        self,
        resume_text: str,
        required_skills: Iterable[str],
        required_experience_months: int
    ) -> ResumeEvaluation:
        """
        Evaluate resume text against job requirements.

        Args:
            resume_text: Plain text extracted from the resume
            required_skills: Skills the job asks for, in order
            required_experience_months: Experience the job asks for, in months

        Returns:
            Skill match, experience check, priority and extracted years
        """
        text = (resume_text or "").lower()
        skills = list(required_skills)

        matched = self.match_skills(text, skills)
        percent = skill_match_percent(len(matched), len(skills))
        years = extract_experience_years(text)

        evaluation = ResumeEvaluation(
            skill_match_percent=percent,
            # Years compared against months, as stored on the job.
            experience_match=years >= required_experience_months,
            priority=self.score_priority(text, years, required_experience_months, percent),
            extracted_experience_years=years,
            matched_skills=tuple(matched),
        )

        self.logger.debug(
            "Resume evaluated",
            required_skills=len(skills),
            matched_skills=len(matched),
            skill_match=percent,
            extracted_experience_years=years,
            priority=evaluation.priority
        )

        return evaluation

    def match_skills(self, text: str, required_skills: List[str]) -> List[str]:
        """Return the required skills that appear in the lower-cased text."""
        return [skill for skill in required_skills if skill.lower() in text]

    def score_priority(
        self,
        text: str,
        experience_years: int,
        required_experience_months: int,
        skill_match: int
    ) -> int:
        """Additive priority heuristic, clamped to PRIORITY_CAP."""
        priority = self.PRIORITY_BASE

        if any(marker in text for marker in self.CERTIFICATION_MARKERS):
            priority += 1

        # Compare in months so fractional required years stay exact.
        experience_months = experience_years * MONTHS_PER_YEAR
        if experience_months >= required_experience_months:
            priority += 2
        elif 2 * experience_months >= required_experience_months:
            priority += 1

        if skill_match > self.HIGH_SKILL_MATCH:
            priority += 1

        if any(marker in text for marker in self.HONORS_MARKERS):
            priority += 1

        return min(priority, self.PRIORITY_CAP)
