"""
Multi-factor ATS scoring of a candidate against job requirements.

Four components on a 0-100 scale (skills, experience, education,
keywords) are combined into a weighted total clamped to [0, 100].
"""
import logging
from typing import Iterable, List, Optional, Sequence

from ..extractors.vocabulary import education_rank, extract_keywords, skills_overlap
from ..utils.config import DEFAULT_STOP_WORDS
from ..utils.numbers import round_half_up
from .models import ATSScore, ATSWeights, CandidateAttributes, RequirementAttributes

logger = logging.getLogger(__name__)

# Neutral scores used when the job gives nothing to compare against
NO_SKILLS_REQUIRED_SCORE = 70
NO_KEYWORDS_SCORE = 70
NO_EDUCATION_SCORE = 50

SKILL_PRESENCE_BONUS = 20
EXPERIENCE_BASELINE = 80
EXPERIENCE_STEP = 5
EDUCATION_MET_BASELINE = 90
EDUCATION_STEP = 5
EDUCATION_SHORTFALL_CEILING = 70


class ATSScorer:
    """
    Score candidates on:
    1. Skills overlap with the required skills
    2. Years of experience against the requirement
    3. Education level against the requirement
    4. Coverage of the posting's keywords
    """

    def __init__(self, weights: Optional[ATSWeights] = None,
                 stop_words: Iterable[str] = DEFAULT_STOP_WORDS):
        self.weights = weights or ATSWeights()
        self.stop_words = frozenset(stop_words)

    @staticmethod
    def compute_skills_score(candidate_skills: Sequence[str], required_skills: Sequence[str]) -> int:
        """
        Share of required skills matched, plus a flat bonus, capped at 100.

        A candidate skill counts once if it overlaps any required skill.
        """
        if not required_skills:
            return NO_SKILLS_REQUIRED_SCORE

        matched = [
            skill for skill in candidate_skills
            if any(skills_overlap(skill, required) for required in required_skills)
        ]
        match_ratio = len(matched) / len(required_skills)
        return min(100, round_half_up(match_ratio * 100 + SKILL_PRESENCE_BONUS))

    @staticmethod
    def compute_experience_score(candidate_years: int, required_years: int) -> int:
        """
        80 for meeting the requirement, +5 per extra year up to 100;
        proportional to an 80 ceiling when short.
        """
        if required_years <= 0:
            required_years = 1

        if candidate_years >= required_years:
            return min(100, EXPERIENCE_BASELINE + (candidate_years - required_years) * EXPERIENCE_STEP)

        return round_half_up(candidate_years / required_years * EXPERIENCE_BASELINE)

    @staticmethod
    def compute_education_score(candidate_education: Optional[str], required_level: int) -> int:
        if not candidate_education:
            return NO_EDUCATION_SCORE

        candidate_level = education_rank(candidate_education)

        if candidate_level >= required_level:
            return EDUCATION_MET_BASELINE + (candidate_level - required_level) * EDUCATION_STEP

        return round_half_up(candidate_level / required_level * EDUCATION_SHORTFALL_CEILING)

    def compute_keywords_score(self, cv_text: str, required_keywords: Iterable[str]) -> int:
        """Percentage of job keywords found inside some CV keyword."""
        required_keywords = list(required_keywords)
        if not required_keywords:
            return NO_KEYWORDS_SCORE

        cv_keywords = extract_keywords(cv_text, self.stop_words)
        matched = [
            keyword for keyword in required_keywords
            if any(keyword in cv_keyword for cv_keyword in cv_keywords)
        ]
        return round_half_up(len(matched) / len(required_keywords) * 100)

    def score(self, candidate: CandidateAttributes, requirement: RequirementAttributes) -> ATSScore:
        """
        Compute the full ATS breakdown for one candidate.

        Args:
            candidate: Extracted CV attributes
            requirement: Extracted job requirements

        Returns:
            ATSScore with components and weighted total
        """
        skills_score = self.compute_skills_score(candidate.skills, requirement.required_skills)
        experience_score = self.compute_experience_score(
            candidate.experience_years, requirement.required_experience_years
        )
        education_score = self.compute_education_score(
            candidate.education, requirement.required_education_level
        )
        keywords_score = self.compute_keywords_score(candidate.raw_text, requirement.keywords)

        total = round_half_up(
            skills_score * self.weights.skills +
            experience_score * self.weights.experience +
            education_score * self.weights.education +
            keywords_score * self.weights.keywords
        )

        logger.debug(
            f"ATS components for {candidate.name}: skills={skills_score}, experience={experience_score}, "
            f"education={education_score}, keywords={keywords_score}, total={total}"
        )

        return ATSScore(
            skills_score=skills_score,
            experience_score=experience_score,
            education_score=education_score,
            keywords_score=keywords_score,
            total_score=min(100, max(0, total)),
        )


def missing_skills(candidate_skills: Sequence[str], required_skills: Sequence[str]) -> List[str]:
    """Required skills with no overlapping candidate skill, in requirement order."""
    return [
        required for required in required_skills
        if not any(skills_overlap(skill, required) for skill in candidate_skills)
    ]


def score_candidate(candidate: CandidateAttributes, requirement: RequirementAttributes,
                    weights: Optional[ATSWeights] = None) -> ATSScore:
    """Functional shortcut for :meth:`ATSScorer.score`."""
    return ATSScorer(weights).score(candidate, requirement)
