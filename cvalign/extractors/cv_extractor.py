"""
Field extraction from plain CV text.

Every field has a fallback, so extraction never fails: a CV with no
recognisable structure still yields a record with sentinel values.
"""
import logging
import re
from typing import List, Optional, Sequence

from ..scoring.models import CandidateAttributes
from ..utils.config import DEFAULT_SKILL_VOCABULARY
from .vocabulary import find_terms

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown Candidate"
NO_EMAIL = "no-email@example.com"

EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')
PHONE_PATTERN = re.compile(r'\+?[1-9]?[-\s]?\(?[0-9]{3}\)?[-\s]?[0-9]{3}[-\s]?[0-9]{4}')
YEARS_PATTERN = re.compile(r'([0-9]+)\s*years?', re.IGNORECASE)

# A section ends at a blank (or whitespace-only) line, at the next
# EDUCATION/EXPERIENCE header, or at the end of the text.
SKILLS_SECTION = re.compile(
    r'SKILLS[\s\S]*?(?=\n[ \t]*\n|\n[ \t]*EDUCATION|\n[ \t]*EXPERIENCE|\Z)',
    re.IGNORECASE,
)
EDUCATION_SECTION = re.compile(r'EDUCATION[\s\S]*?(?=\n[ \t]*\n|\Z)', re.IGNORECASE)


class CVFieldExtractor:
    """Turn raw CV text into :class:`CandidateAttributes`."""

    def __init__(self, vocabulary: Sequence[str] = DEFAULT_SKILL_VOCABULARY):
        self.vocabulary = list(vocabulary)

    def extract(self, raw_text: str, filename: Optional[str] = None) -> CandidateAttributes:
        """
        Extract candidate attributes from CV text.

        Args:
            raw_text: Full CV text
            filename: Original upload name, kept for display

        Returns:
            CandidateAttributes with fallbacks for anything not found
        """
        attributes = CandidateAttributes(
            name=self.extract_name(raw_text),
            email=self.extract_email(raw_text),
            phone=self.extract_phone(raw_text),
            raw_text=raw_text,
            skills=self.extract_skills(raw_text),
            experience_years=self.extract_experience(raw_text),
            education=self.extract_education(raw_text),
            filename=filename,
        )
        logger.debug(
            f"Extracted CV fields: name={attributes.name!r}, skills={len(attributes.skills)}, "
            f"years={attributes.experience_years}"
        )
        return attributes

    @staticmethod
    def extract_name(text: str) -> str:
        stripped = text.strip()
        if not stripped:
            return UNKNOWN_NAME

        first_line = stripped.splitlines()[0].strip()
        if first_line and '@' not in first_line and 'EXPERIENCE' not in first_line:
            return first_line

        return UNKNOWN_NAME

    @staticmethod
    def extract_email(text: str) -> str:
        match = EMAIL_PATTERN.search(text)
        return match.group(0) if match else NO_EMAIL

    @staticmethod
    def extract_phone(text: str) -> Optional[str]:
        match = PHONE_PATTERN.search(text)
        return match.group(0).strip() if match else None

    def extract_skills(self, text: str) -> List[str]:
        """Vocabulary terms listed in the SKILLS section; empty without one."""
        section = SKILLS_SECTION.search(text)
        if not section:
            return []

        return find_terms(section.group(0), self.vocabulary)

    @staticmethod
    def extract_experience(text: str) -> int:
        match = YEARS_PATTERN.search(text)
        return int(match.group(1)) if match else 0

    @staticmethod
    def extract_education(text: str) -> Optional[str]:
        """Second non-empty line of the EDUCATION section."""
        section = EDUCATION_SECTION.search(text)
        if not section:
            return None

        lines = [line for line in section.group(0).split('\n') if line.strip()]
        return lines[1].strip() if len(lines) > 1 else None


def extract_candidate(raw_text: str, vocabulary: Sequence[str] = DEFAULT_SKILL_VOCABULARY,
                      filename: Optional[str] = None) -> CandidateAttributes:
    """Functional shortcut for :meth:`CVFieldExtractor.extract`."""
    return CVFieldExtractor(vocabulary).extract(raw_text, filename=filename)
