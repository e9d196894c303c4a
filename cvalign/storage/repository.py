"""
Persistence client for jobs, candidates, rankings and CV embeddings.

``Repository`` is the contract the ranking engine and interview scheduler
depend on; ``InMemoryRepository`` is the thread-safe implementation used
by the dashboard and the tests.
"""
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..embeddings.embedder import cosine_similarity
from ..errors import DataNotFound, PersistenceWriteFailure
from ..utils.numbers import round_half_up
from ..scoring.models import (
    CandidateAttributes,
    CandidateRanking,
    Feedback,
    JobPosting,
    MatchCategory,
)

logger = logging.getLogger(__name__)

INTERVIEW_STATUSES = ('scheduled', 'confirmed', 'completed', 'cancelled', 'rescheduled')


class Repository(ABC):
    """Storage operations used by the core. Write failures raise PersistenceWriteFailure."""

    @abstractmethod
    def save_job(self, job: JobPosting) -> str:
        ...

    @abstractmethod
    def get_job(self, job_id: str) -> JobPosting:
        ...

    @abstractmethod
    def save_candidate(self, job_id: Optional[str], attributes: CandidateAttributes) -> str:
        ...

    @abstractmethod
    def get_candidate(self, candidate_id: str) -> CandidateAttributes:
        ...

    @abstractmethod
    def save_rankings(self, job_id: Optional[str], rankings: Sequence[CandidateRanking]) -> List[str]:
        ...

    @abstractmethod
    def get_rankings(self, job_id: str) -> List[CandidateRanking]:
        ...

    @abstractmethod
    def update_ranking(self, ranking_id: str, is_recommended: Optional[bool] = None,
                       feedback: Optional[Feedback] = None) -> None:
        ...

    @abstractmethod
    def store_embeddings(self, candidate_id: str, job_id: Optional[str],
                         cv_vector: Sequence[float], job_vector: Sequence[float]) -> None:
        ...

    @abstractmethod
    def get_embeddings(self, candidate_id: str, job_id: Optional[str]) -> Tuple[np.ndarray, np.ndarray]:
        ...

    @abstractmethod
    def save_interview(self, job_id: str, candidate_id: str, ranking_id: Optional[str],
                       interview_type: str, scheduled_at: Optional[str]) -> str:
        ...

    @abstractmethod
    def update_interview(self, interview_id: str, status: str, notes: Optional[str] = None) -> None:
        ...

    @abstractmethod
    def list_interviews(self, job_id: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def search_similar_candidates(self, job_id: str, limit: int = 10) -> List[Tuple[str, float]]:
        """Candidates for a job ordered by stored CV/job similarity, best first."""

    def find_ranking(self, job_id: str, candidate_id: str) -> Optional[CandidateRanking]:
        for ranking in self.get_rankings(job_id):
            if ranking.candidate_id == candidate_id:
                return ranking
        return None


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryRepository(Repository):
    """Dictionary-backed repository, safe to share between worker threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self.jobs: Dict[str, JobPosting] = {}
        self.candidates: Dict[str, Dict[str, Any]] = {}
        self.rankings: Dict[str, Dict[str, Any]] = {}
        self.embeddings: Dict[Tuple[str, Optional[str]], Tuple[np.ndarray, np.ndarray]] = {}
        self.interviews: Dict[str, Dict[str, Any]] = {}

    def save_job(self, job: JobPosting) -> str:
        job_id = job.job_id or _new_id()
        with self._lock:
            self.jobs[job_id] = JobPosting(
                title=job.title,
                description=job.description,
                requirements=job.requirements,
                vacancies=job.vacancies,
                job_id=job_id,
            )
        logger.info(f"Saved job {job_id}: {job.title}", extra={'job_id': job_id})
        return job_id

    def get_job(self, job_id: str) -> JobPosting:
        with self._lock:
            job = self.jobs.get(job_id)
        if job is None:
            raise DataNotFound(f"Job not found: {job_id}")
        return job

    def save_candidate(self, job_id: Optional[str], attributes: CandidateAttributes) -> str:
        candidate_id = _new_id()
        with self._lock:
            self.candidates[candidate_id] = {'job_id': job_id, 'attributes': attributes}
        return candidate_id

    def get_candidate(self, candidate_id: str) -> CandidateAttributes:
        with self._lock:
            row = self.candidates.get(candidate_id)
        if row is None:
            raise DataNotFound(f"Candidate not found: {candidate_id}")
        return row['attributes']

    def save_rankings(self, job_id: Optional[str], rankings: Sequence[CandidateRanking]) -> List[str]:
        ranking_ids = []
        with self._lock:
            for ranking in rankings:
                ranking_id = _new_id()
                self.rankings[ranking_id] = {
                    'job_id': job_id,
                    'candidate_id': ranking.candidate_id,
                    'name': ranking.name,
                    'email': ranking.email,
                    'ats_score': ranking.ats_score,
                    # stored as a fraction, reported as a percentage
                    'semantic_score': ranking.semantic_score / 100,
                    'overall_score': ranking.overall_score,
                    'feedback': ranking.feedback.to_dict(),
                    'match_category': ranking.match_category.value,
                    'ranking_position': ranking.ranking_position,
                    'is_recommended': ranking.is_recommended,
                    'skills': list(ranking.skills),
                    'experience_years': ranking.experience_years,
                }
                ranking_ids.append(ranking_id)
        return ranking_ids

    def get_rankings(self, job_id: str) -> List[CandidateRanking]:
        with self._lock:
            rows = [(rid, dict(row)) for rid, row in self.rankings.items() if row['job_id'] == job_id]

        rows.sort(key=lambda item: item[1]['ranking_position'])
        return [
            CandidateRanking(
                candidate_id=row['candidate_id'],
                job_id=row['job_id'],
                name=row['name'],
                email=row['email'],
                ats_score=row['ats_score'],
                semantic_score=round_half_up(row['semantic_score'] * 100),
                overall_score=row['overall_score'],
                match_category=MatchCategory(row['match_category']),
                feedback=Feedback.from_dict(row['feedback']),
                skills=row['skills'],
                experience_years=row['experience_years'],
                ranking_position=row['ranking_position'],
                is_recommended=row['is_recommended'],
                ranking_id=ranking_id,
            )
            for ranking_id, row in rows
        ]

    def update_ranking(self, ranking_id: str, is_recommended: Optional[bool] = None,
                       feedback: Optional[Feedback] = None) -> None:
        with self._lock:
            row = self.rankings.get(ranking_id)
            if row is None:
                raise DataNotFound(f"Ranking not found: {ranking_id}")
            if is_recommended is not None:
                row['is_recommended'] = is_recommended
            if feedback is not None:
                row['feedback'] = feedback.to_dict()

    def store_embeddings(self, candidate_id: str, job_id: Optional[str],
                         cv_vector: Sequence[float], job_vector: Sequence[float]) -> None:
        cv_array = np.asarray(cv_vector, dtype=np.float64)
        job_array = np.asarray(job_vector, dtype=np.float64)
        if cv_array.shape != job_array.shape:
            raise PersistenceWriteFailure(
                f"Embedding shapes differ for candidate {candidate_id}: {cv_array.shape} vs {job_array.shape}"
            )
        with self._lock:
            self.embeddings[(candidate_id, job_id)] = (cv_array, job_array)

    def get_embeddings(self, candidate_id: str, job_id: Optional[str]) -> Tuple[np.ndarray, np.ndarray]:
        with self._lock:
            pair = self.embeddings.get((candidate_id, job_id))
        if pair is None:
            raise DataNotFound(f"No embeddings for candidate {candidate_id} and job {job_id}")
        return pair

    def search_similar_candidates(self, job_id: str, limit: int = 10) -> List[Tuple[str, float]]:
        with self._lock:
            pairs = [(cid, vecs) for (cid, jid), vecs in self.embeddings.items() if jid == job_id]

        scored = [(cid, cosine_similarity(cv, job)) for cid, (cv, job) in pairs]
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:limit]

    def save_interview(self, job_id: str, candidate_id: str, ranking_id: Optional[str],
                       interview_type: str, scheduled_at: Optional[str]) -> str:
        interview_id = _new_id()
        with self._lock:
            self.interviews[interview_id] = {
                'job_id': job_id,
                'candidate_id': candidate_id,
                'ranking_id': ranking_id,
                'interview_type': interview_type,
                'scheduled_at': scheduled_at,
                'status': 'scheduled',
                'notes': None,
            }
        return interview_id

    def update_interview(self, interview_id: str, status: str, notes: Optional[str] = None) -> None:
        if status not in INTERVIEW_STATUSES:
            raise ValueError(f"Unknown interview status: {status}")
        with self._lock:
            row = self.interviews.get(interview_id)
            if row is None:
                raise DataNotFound(f"Interview not found: {interview_id}")
            row['status'] = status
            row['notes'] = notes

    def list_interviews(self, job_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {'id': iid, **row} for iid, row in self.interviews.items() if row['job_id'] == job_id
            ]
