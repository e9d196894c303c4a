"""
Term matching shared by the CV and requirement extractors and the scorers.
"""
import re
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from ..utils.config import DEFAULT_SKILL_VOCABULARY, DEFAULT_STOP_WORDS

# Checked in this order; the first group with a hit decides the level.
EDUCATION_LEVELS: Tuple[Tuple[int, Tuple[str, ...]], ...] = (
    (4, ('phd', 'doctorate')),
    (3, ('master', 'mba')),
    (2, ('bachelor', 'degree')),
    (1, ('associate', 'diploma')),
)

MIN_KEYWORD_LENGTH = 4

_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)


def find_terms(text: str, vocabulary: Sequence[str] = DEFAULT_SKILL_VOCABULARY) -> List[str]:
    """Vocabulary terms contained in ``text`` (case-insensitive), in vocabulary order."""
    text_lower = text.lower()
    return [term for term in vocabulary if term.lower() in text_lower]


def education_rank(text: str, default: int = 0) -> int:
    """Education level 0-4 implied by ``text``; ``default`` when no keyword matches."""
    text_lower = text.lower()
    for rank, words in EDUCATION_LEVELS:
        if any(word in text_lower for word in words):
            return rank
    return default


def extract_keywords(text: str, stop_words: Iterable[str] = DEFAULT_STOP_WORDS) -> FrozenSet[str]:
    """Distinct lowercase words longer than three characters, minus stop words."""
    stop = set(stop_words)
    words = _NON_WORD.sub(' ', text.lower()).split()
    return frozenset(
        word for word in words
        if len(word) >= MIN_KEYWORD_LENGTH and word not in stop
    )


def skills_overlap(a: str, b: str) -> bool:
    """Two skill names match when either contains the other, ignoring case."""
    a_lower, b_lower = a.lower(), b.lower()
    return a_lower in b_lower or b_lower in a_lower
