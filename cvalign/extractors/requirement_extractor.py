"""
Requirement extraction from job posting text.
"""
import logging
import re
from typing import Iterable, Sequence

from ..scoring.models import RequirementAttributes
from ..utils.config import DEFAULT_SKILL_VOCABULARY, DEFAULT_STOP_WORDS
from .vocabulary import education_rank, extract_keywords, find_terms

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_YEARS = 2
DEFAULT_EDUCATION_LEVEL = 2  # bachelor

REQUIRED_YEARS_PATTERN = re.compile(
    r'([0-9]+)[+\s]*years?\s*(?:of\s*)?experience',
    re.IGNORECASE,
)


class RequirementExtractor:
    """Turn job requirement text into :class:`RequirementAttributes`."""

    def __init__(self, vocabulary: Sequence[str] = DEFAULT_SKILL_VOCABULARY,
                 stop_words: Iterable[str] = DEFAULT_STOP_WORDS):
        self.vocabulary = list(vocabulary)
        self.stop_words = frozenset(stop_words)

    def extract(self, requirements_text: str, description: str = "") -> RequirementAttributes:
        """
        Extract structured requirements.

        Skills, experience and education come from the requirements text
        only. Keywords are taken from the description and requirements
        together.

        Args:
            requirements_text: The "requirements" part of the posting
            description: Free-text job description, optional

        Returns:
            RequirementAttributes
        """
        keyword_source = f"{description} {requirements_text}" if description else requirements_text

        requirements = RequirementAttributes(
            required_skills=find_terms(requirements_text, self.vocabulary),
            required_experience_years=self.extract_required_years(requirements_text),
            required_education_level=education_rank(requirements_text, default=DEFAULT_EDUCATION_LEVEL),
            keywords=extract_keywords(keyword_source, self.stop_words),
        )

        logger.info(
            f"Extracted requirements: skills={requirements.required_skills}, "
            f"years={requirements.required_experience_years}, "
            f"education={requirements.required_education_level}, "
            f"keywords={len(requirements.keywords)}"
        )
        return requirements

    @staticmethod
    def extract_required_years(text: str) -> int:
        match = REQUIRED_YEARS_PATTERN.search(text)
        return int(match.group(1)) if match else DEFAULT_REQUIRED_YEARS


def extract_requirements(requirements_text: str, description: str = "",
                         vocabulary: Sequence[str] = DEFAULT_SKILL_VOCABULARY,
                         stop_words: Iterable[str] = DEFAULT_STOP_WORDS) -> RequirementAttributes:
    """Functional shortcut for :meth:`RequirementExtractor.extract`."""
    return RequirementExtractor(vocabulary, stop_words).extract(requirements_text, description)
