"""
Export of a ranking batch for download.
"""
import json
from typing import Any, Dict, Sequence

import pandas as pd

from ..scoring.models import CandidateRanking
from ..utils.numbers import round_half_up

EXPORT_COLUMNS = [
    'Rank', 'Name', 'Email', 'Overall Score', 'ATS Score', 'Semantic Score', 'Match',
    'Recommended', 'Experience Years', 'Skills', 'Skills Score', 'Experience Score',
    'Education Score', 'Keywords Score', 'Skill Gaps', 'Assessment',
]


def build_report(job_title: str, rankings: Sequence[CandidateRanking]) -> Dict[str, Any]:
    """
    Summarise a ranked batch.

    Args:
        job_title: Title of the job the batch was ranked for
        rankings: Candidates in ranking order

    Returns:
        Report dict with totals, rounded average overall score and per-candidate rows
    """
    total = len(rankings)
    average = round_half_up(sum(r.overall_score for r in rankings) / total) if total else 0

    return {
        'jobTitle': job_title,
        'totalCandidates': total,
        'recommendedCandidates': sum(1 for r in rankings if r.is_recommended),
        'averageScore': average,
        'rankings': [
            {
                'name': r.name,
                'email': r.email,
                'atsScore': r.ats_score,
                'semanticScore': r.semantic_score,
                'overallScore': r.overall_score,
                'matchCategory': r.match_category.value,
                'isRecommended': r.is_recommended,
            }
            for r in rankings
        ],
    }


def report_to_json(job_title: str, rankings: Sequence[CandidateRanking]) -> str:
    return json.dumps(build_report(job_title, rankings), indent=2)


def rankings_dataframe(rankings: Sequence[CandidateRanking]) -> pd.DataFrame:
    """One row per candidate, in ranking order."""
    rows = []
    for r in rankings:
        breakdown = r.ats_breakdown
        rows.append({
            'Rank': r.ranking_position,
            'Name': r.name,
            'Email': r.email,
            'Overall Score': r.overall_score,
            'ATS Score': r.ats_score,
            'Semantic Score': r.semantic_score,
            'Match': r.match_category.value,
            'Recommended': r.is_recommended,
            'Experience Years': r.experience_years,
            'Skills': ', '.join(r.skills),
            'Skills Score': breakdown.skills_score if breakdown else None,
            'Experience Score': breakdown.experience_score if breakdown else None,
            'Education Score': breakdown.education_score if breakdown else None,
            'Keywords Score': breakdown.keywords_score if breakdown else None,
            'Skill Gaps': ', '.join(r.feedback.skill_gaps),
            'Assessment': r.feedback.overall_assessment,
        })

    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def rankings_to_csv(rankings: Sequence[CandidateRanking]) -> str:
    return rankings_dataframe(rankings).to_csv(index=False)
