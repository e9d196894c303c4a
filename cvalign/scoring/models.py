"""
Records passed between the extraction, scoring and ranking stages.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


class MatchCategory(str, Enum):
    """Banding of a 0-100 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class CandidateAttributes:
    """Structured fields pulled out of one CV."""

    name: str
    email: str
    raw_text: str
    phone: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience_years: int = 0
    education: Optional[str] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class RequirementAttributes:
    """Structured fields pulled out of a job posting."""

    required_skills: List[str] = field(default_factory=list)
    required_experience_years: int = 2
    required_education_level: int = 2
    keywords: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ATSWeights:
    """Component weights for the ATS total (should sum to 1.0)."""

    skills: float = 0.4
    experience: float = 0.3
    education: float = 0.15
    keywords: float = 0.15

    @classmethod
    def from_dict(cls, weights: Dict[str, float]) -> "ATSWeights":
        return cls(**{k: float(v) for k, v in weights.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class ATSScore:
    skills_score: int
    experience_score: int
    education_score: int
    keywords_score: int
    total_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'skillsScore': self.skills_score,
            'experienceScore': self.experience_score,
            'educationScore': self.education_score,
            'keywordsScore': self.keywords_score,
            'totalScore': self.total_score,
        }


@dataclass(frozen=True)
class Feedback:
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]
    skill_gaps: List[str]
    overall_assessment: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'strengths': list(self.strengths),
            'weaknesses': list(self.weaknesses),
            'recommendations': list(self.recommendations),
            'skillGaps': list(self.skill_gaps),
            'overallAssessment': self.overall_assessment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feedback":
        return cls(
            strengths=list(data.get('strengths', [])),
            weaknesses=list(data.get('weaknesses', [])),
            recommendations=list(data.get('recommendations', [])),
            skill_gaps=list(data.get('skillGaps', [])),
            overall_assessment=data.get('overallAssessment', ''),
        )


@dataclass(frozen=True)
class JobPosting:
    """A vacancy that candidates are ranked against."""

    title: str
    description: str
    requirements: str
    vacancies: int = 1
    job_id: Optional[str] = None


@dataclass
class CandidateRanking:
    """
    One ranked candidate within a batch.

    ``ranking_position`` and ``is_recommended`` are filled in by the
    ranking engine once the whole batch has been scored.
    """

    candidate_id: str
    job_id: Optional[str]
    name: str
    email: str
    ats_score: int
    semantic_score: int
    overall_score: int
    match_category: MatchCategory
    feedback: Feedback
    skills: List[str] = field(default_factory=list)
    experience_years: int = 0
    ats_breakdown: Optional[ATSScore] = None
    ranking_position: int = 0
    is_recommended: bool = False
    ranking_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.ranking_id,
            'candidateId': self.candidate_id,
            'jobId': self.job_id,
            'name': self.name,
            'email': self.email,
            'atsScore': self.ats_score,
            'semanticScore': self.semantic_score,
            'overallScore': self.overall_score,
            'matchCategory': self.match_category.value,
            'feedback': self.feedback.to_dict(),
            'rankingPosition': self.ranking_position,
            'isRecommended': self.is_recommended,
            'skills': list(self.skills),
            'experience': self.experience_years,
        }


@dataclass
class RankingBatch:
    """Result of ranking one batch of CVs for one job."""

    job_id: Optional[str]
    rankings: List[CandidateRanking] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def recommended(self) -> List[CandidateRanking]:
        return [r for r in self.rankings if r.is_recommended]

    def __len__(self) -> int:
        return len(self.rankings)

    def __iter__(self):
        return iter(self.rankings)
