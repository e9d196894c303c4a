"""
Batch ranking of candidates for one job.

Per-candidate work (reading the upload, field extraction, ATS scoring,
embedding similarity, feedback) runs on a bounded thread pool. Once every
candidate has either produced a result, failed or timed out, results that
were collected are written to the repository, the batch is sorted by
overall score, positions are assigned and the top ``vacancies`` candidates
are flagged as recommended. Repository writes never count against a
candidate's timeout.
"""
import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..embeddings.embedder import cosine_similarity, create_embedder
from ..errors import ExtractionFailure
from ..extractors.cv_extractor import CVFieldExtractor
from ..extractors.requirement_extractor import RequirementExtractor
from ..utils.config import Config
from ..utils.numbers import round_half_up
from ..utils.uploads import sanitize_filename
from .feedback import generate_feedback
from .models import (
    ATSWeights,
    CandidateAttributes,
    CandidateRanking,
    JobPosting,
    MatchCategory,
    RankingBatch,
    RequirementAttributes,
)
from .scorer import ATSScorer

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05

# (minimum overall score, category), highest band first
CATEGORY_BANDS = (
    (85, MatchCategory.EXCELLENT),
    (70, MatchCategory.GOOD),
    (55, MatchCategory.FAIR),
)


def match_category(overall_score: float) -> MatchCategory:
    """Band an overall score: >=85 excellent, >=70 good, >=55 fair, else poor."""
    for threshold, category in CATEGORY_BANDS:
        if overall_score >= threshold:
            return category
    return MatchCategory.POOR


def assign_positions(rankings: List[CandidateRanking], vacancies: int) -> List[CandidateRanking]:
    """
    Sort by overall score (stable, so ties keep processing order), number
    the result from 1 and recommend the first ``vacancies`` entries.
    """
    vacancies = max(1, int(vacancies))
    ordered = sorted(rankings, key=lambda r: r.overall_score, reverse=True)

    for index, ranking in enumerate(ordered):
        ranking.ranking_position = index + 1
        ranking.is_recommended = index < vacancies

    return ordered


class RankingEngine:
    """Score and rank a batch of CVs against a job posting."""

    def __init__(self, config: Optional[Config] = None, embedder: Any = None,
                 repository: Any = None, text_source: Any = None):
        """
        Args:
            config: Configuration; defaults are used when omitted
            embedder: Object with ``embed(text)``; built from config when omitted
            repository: Optional persistence client for candidates, embeddings and rankings
            text_source: Optional object with ``read_text(file)`` used by ``rank_files``
        """
        self.config = config or Config(config_path=None)
        self.cv_extractor = CVFieldExtractor(self.config.skill_vocabulary)
        self.requirement_extractor = RequirementExtractor(
            self.config.skill_vocabulary, self.config.stop_words
        )
        self.scorer = ATSScorer(ATSWeights.from_dict(self.config.ats_weights), self.config.stop_words)
        self.embedder = embedder or create_embedder(self.config)
        self.repository = repository
        self.text_source = text_source

        self.ats_weight = self.config.overall_weights.get('ats', 0.7)
        self.semantic_weight = self.config.overall_weights.get('semantic', 0.3)
        self.max_workers = max(1, int(self.config.max_workers))
        self.per_candidate_timeout = float(self.config.per_file_timeout)
        self.batch_timeout = float(self.config.overall_timeout)

    def overall_score(self, ats_total: int, similarity: float) -> int:
        return round_half_up(ats_total * self.ats_weight + similarity * 100 * self.semantic_weight)

    def rank_batch(self, job: JobPosting, candidate_texts: Iterable[Tuple[str, str]]) -> RankingBatch:
        """
        Rank candidates for a job.

        Args:
            job: The posting; ``vacancies`` below 1 is treated as 1
            candidate_texts: ``(candidate_id, raw_text)`` pairs in processing order

        Returns:
            RankingBatch ordered by ranking position, with skipped candidates listed
        """
        items = [(ref, partial(_given_text, text), None) for ref, text in candidate_texts]
        return self._rank(job, items)

    def rank_job(self, job_id: str, candidate_texts: Iterable[Tuple[str, str]]) -> RankingBatch:
        """
        Rank candidates for a stored job.

        Raises:
            DataNotFound: If the job does not exist
        """
        if self.repository is None:
            raise ValueError("rank_job requires a repository")

        job = self.repository.get_job(job_id)
        return self.rank_batch(job, candidate_texts)

    def rank_files(self, job: JobPosting, files: Sequence[Any]) -> RankingBatch:
        """
        Read uploaded CV files through the text source and rank them.

        Each file is read inside its own candidate task, so reading shares the
        per-candidate timeout and a file that cannot be read is reported as skipped.
        """
        if self.text_source is None:
            raise ValueError("rank_files requires a text source")

        items = []
        for file in files:
            filename = sanitize_filename(getattr(file, 'name', 'upload'))
            items.append((filename, partial(self.text_source.read_text, file), filename))

        return self._rank(job, items)

    def _rank(self, job: JobPosting, items: List[Tuple[str, Callable[[], str], Optional[str]]]) -> RankingBatch:
        start_time = time.time()
        job_id = job.job_id

        # Requirements and job embedding are shared by every candidate
        requirement = self.requirement_extractor.extract(job.requirements, job.description)
        job_vector = self.embedder.embed(f"{job.description} {job.requirements}")

        batch = RankingBatch(job_id=job_id)
        scored = self._run_parallel(job_id, requirement, job_vector, items, batch)

        results = []
        for ranking, candidate, cv_vector in scored:
            self._save_candidate(job_id, ranking, candidate, cv_vector, job_vector, batch)
            results.append(ranking)

        batch.rankings = assign_positions(results, job.vacancies)
        self._save_rankings(job_id, batch)

        duration = time.time() - start_time
        logger.info(
            f"Ranked {len(batch.rankings)} candidates ({batch.skipped_count} skipped) in {duration:.2f}s",
            extra={'job_id': job_id, 'batch_size': len(items), 'skipped': batch.skipped_count}
        )
        return batch

    def _run_parallel(self, job_id: Optional[str], requirement: RequirementAttributes, job_vector: Any,
                      items: List[Tuple[str, Callable[[], str], Optional[str]]],
                      batch: RankingBatch) -> List[Tuple[CandidateRanking, CandidateAttributes, Any]]:
        """Process every candidate on the pool and collect results in input order."""
        if not items:
            return []

        started_at: Dict[int, float] = {}
        outcomes: Dict[int, Tuple[CandidateRanking, CandidateAttributes, Any]] = {}
        failures: Dict[int, str] = {}

        def run(index: int, ref: str, load: Callable[[], str], filename: Optional[str]):
            started_at[index] = time.monotonic()
            return self._process_candidate(job_id, requirement, job_vector, ref, load(), filename)

        def collect(future: Future) -> None:
            index = futures[future]
            ref = items[index][0]
            try:
                outcomes[index] = future.result()
            except Exception as e:
                logger.error(f"Failed to process CV {ref}: {str(e)}", extra={'candidate_id': ref})
                failures[index] = str(e) or e.__class__.__name__

        batch_started = time.monotonic()
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="cvalign-rank")
        try:
            futures: Dict[Future, int] = {
                executor.submit(run, index, ref, load, filename): index
                for index, (ref, load, filename) in enumerate(items)
            }
            pending = set(futures)

            while pending:
                done, pending = wait(pending, timeout=POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    collect(future)

                now = time.monotonic()
                batch_expired = now - batch_started > self.batch_timeout
                for future in list(pending):
                    index = futures[future]
                    begun = started_at.get(index)
                    if not (batch_expired or (begun is not None and now - begun > self.per_candidate_timeout)):
                        continue

                    pending.discard(future)
                    # Finished after wait() returned
                    if future.done():
                        collect(future)
                        continue

                    future.cancel()
                    ref = items[index][0]
                    limit = self.batch_timeout if batch_expired else self.per_candidate_timeout
                    logger.error(
                        f"Processing CV {ref} timed out after {limit}s",
                        extra={'candidate_id': ref}
                    )
                    failures[index] = "timed out"
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        scored = []
        for index, (ref, _, _) in enumerate(items):
            if index in outcomes:
                scored.append(outcomes[index])
            else:
                batch.skipped.append((ref, failures.get(index, "not processed")))

        return scored

    def _process_candidate(self, job_id: Optional[str], requirement: RequirementAttributes, job_vector: Any,
                           candidate_ref: str, raw_text: str,
                           filename: Optional[str]) -> Tuple[CandidateRanking, CandidateAttributes, Any]:
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise ExtractionFailure(f"CV {candidate_ref} has no text")

        candidate = self.cv_extractor.extract(raw_text, filename=filename)
        ats_score = self.scorer.score(candidate, requirement)

        cv_vector = self.embedder.embed(raw_text)
        similarity = max(0.0, min(1.0, cosine_similarity(cv_vector, job_vector)))

        feedback = generate_feedback(candidate, ats_score, similarity, requirement)
        overall = self.overall_score(ats_score.total_score, similarity)

        ranking = CandidateRanking(
            candidate_id=candidate_ref,
            job_id=job_id,
            name=candidate.name,
            email=candidate.email,
            ats_score=ats_score.total_score,
            semantic_score=round_half_up(similarity * 100),
            overall_score=overall,
            match_category=match_category(overall),
            feedback=feedback,
            skills=list(candidate.skills),
            experience_years=candidate.experience_years,
            ats_breakdown=ats_score,
        )
        return ranking, candidate, cv_vector

    def _save_candidate(self, job_id: Optional[str], ranking: CandidateRanking, candidate: CandidateAttributes,
                        cv_vector: Any, job_vector: Any, batch: RankingBatch) -> None:
        """Store a ranked candidate and its embeddings; the ranking keeps its ref if the write fails."""
        if self.repository is None:
            return

        ref = ranking.candidate_id
        try:
            ranking.candidate_id = self.repository.save_candidate(job_id, candidate)
        except Exception as e:
            message = f"Failed to save candidate {ref}: {str(e)}"
            logger.warning(message, extra={'candidate_id': ref})
            batch.warnings.append(message)

        try:
            self.repository.store_embeddings(ranking.candidate_id, job_id, cv_vector, job_vector)
        except Exception as e:
            message = f"Failed to store embeddings for {ranking.candidate_id}: {str(e)}"
            logger.warning(message, extra={'candidate_id': ranking.candidate_id})
            batch.warnings.append(message)

    def _save_rankings(self, job_id: Optional[str], batch: RankingBatch) -> None:
        if self.repository is None or not batch.rankings:
            return

        try:
            ranking_ids = self.repository.save_rankings(job_id, batch.rankings)
        except Exception as e:
            message = f"Failed to save rankings: {str(e)}"
            logger.warning(message, extra={'job_id': job_id})
            batch.warnings.append(message)
            return

        for ranking, ranking_id in zip(batch.rankings, ranking_ids):
            ranking.ranking_id = ranking_id


def _given_text(text: Any) -> Any:
    return text


def rank_batch(job: JobPosting, candidate_texts: Iterable[Tuple[str, str]],
               config: Optional[Config] = None) -> RankingBatch:
    """Rank a batch with a default engine."""
    return RankingEngine(config).rank_batch(job, candidate_texts)
