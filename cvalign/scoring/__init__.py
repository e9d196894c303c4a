"""Scoring, feedback and ranking."""
from .models import (
    ATSScore,
    ATSWeights,
    CandidateAttributes,
    CandidateRanking,
    Feedback,
    JobPosting,
    MatchCategory,
    RankingBatch,
    RequirementAttributes,
)
