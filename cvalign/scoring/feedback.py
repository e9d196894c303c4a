"""
Rule-based candidate feedback.

Each rule adds at most one fixed sentence; when no rule in a category
fires, a generic fallback sentence is used instead.
"""
from typing import List

from .models import ATSScore, CandidateAttributes, Feedback, RequirementAttributes
from .scorer import missing_skills

FALLBACK_STRENGTH = "Basic qualifications present"
FALLBACK_WEAKNESS = "No major weaknesses identified"
FALLBACK_RECOMMENDATION = "Continue developing technical skills"

# (minimum combined score, assessment), highest band first
ASSESSMENT_BANDS = (
    (85, "Excellent candidate with strong alignment to job requirements"),
    (70, "Good candidate with solid qualifications and potential"),
    (55, "Fair candidate with some relevant skills but gaps in key areas"),
)
LIMITED_ASSESSMENT = "Limited alignment with job requirements, significant skill gaps"


def combined_score(ats_total: int, similarity: float) -> float:
    """Plain average of the ATS total and the similarity on a 0-100 scale."""
    return (ats_total + similarity * 100) / 2


def overall_assessment(score: float) -> str:
    for threshold, text in ASSESSMENT_BANDS:
        if score >= threshold:
            return text
    return LIMITED_ASSESSMENT


def generate_feedback(candidate: CandidateAttributes, ats_score: ATSScore, similarity: float,
                      requirement: RequirementAttributes) -> Feedback:
    """
    Derive strengths, weaknesses and recommendations from the scores.

    Args:
        candidate: Extracted CV attributes
        ats_score: ATS breakdown for this candidate
        similarity: Cosine similarity between CV and job, 0-1
        requirement: Extracted job requirements

    Returns:
        Feedback
    """
    gaps = missing_skills(candidate.skills, requirement.required_skills)

    strengths: List[str] = []
    if ats_score.skills_score >= 80:
        strengths.append("Strong technical skill set matching job requirements")
    if ats_score.experience_score >= 80:
        strengths.append("Excellent relevant work experience")
    if similarity >= 0.8:
        strengths.append("CV content highly relevant to job description")
    if len(candidate.skills) >= 5:
        strengths.append("Diverse technical skill portfolio")

    weaknesses: List[str] = []
    if ats_score.skills_score < 60:
        weaknesses.append("Limited technical skills matching job requirements")
    if ats_score.experience_score < 60:
        weaknesses.append("Insufficient relevant work experience")
    if len(gaps) > 3:
        weaknesses.append("Missing several key technical skills")

    recommendations: List[str] = []
    if gaps:
        recommendations.append(f"Consider gaining experience in: {', '.join(gaps[:3])}")
    if ats_score.experience_score < 70:
        recommendations.append("Highlight more relevant project experience and achievements")
    if ats_score.keywords_score < 70:
        recommendations.append("Include more industry-specific keywords and terminology")

    return Feedback(
        strengths=strengths or [FALLBACK_STRENGTH],
        weaknesses=weaknesses or [FALLBACK_WEAKNESS],
        recommendations=recommendations or [FALLBACK_RECOMMENDATION],
        skill_gaps=gaps,
        overall_assessment=overall_assessment(combined_score(ats_score.total_score, similarity)),
    )
