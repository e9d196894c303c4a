"""
Interview invitations for recommended candidates.

Delivery is pluggable: the scheduler composes an :class:`EmailTemplate`
and hands it to a ``send`` callable. The default sender only logs.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from ..scoring.models import CandidateRanking

logger = logging.getLogger(__name__)

INTERVIEW_TYPES = ('standard', 'ai_video')


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    body: str


def interview_invitation(candidate_name: str, job_title: str) -> EmailTemplate:
    """Compose the invitation sent to a shortlisted candidate."""
    body = f"""Dear {candidate_name},

We are pleased to invite you for an interview for the {job_title} position at our company.

Based on our initial review of your application, we believe you could be a great fit for our team. We would like to schedule an interview to discuss your qualifications and learn more about your experience.

Interview Details:
- Position: {job_title}
- Format: Video Interview
- Duration: Approximately 45 minutes

Please reply to this email with your availability for the next week, and we will send you the interview link and additional details.

We look forward to speaking with you soon!

Best regards,
The Hiring Team"""

    return EmailTemplate(subject=f"Interview Invitation - {job_title} Position", body=body)


def recommended_candidates(rankings: Iterable[CandidateRanking]) -> List[CandidateRanking]:
    """Recommended candidates in ranking order."""
    return sorted((r for r in rankings if r.is_recommended), key=lambda r: r.ranking_position)


def log_sender(to: str, template: EmailTemplate, interview_id: str) -> None:
    logger.info(f"Sending interview invitation {interview_id} to {to}: {template.subject}")


class InterviewScheduler:
    """Record interviews for shortlisted candidates and dispatch invitations."""

    def __init__(self, repository, send: Optional[Callable[[str, EmailTemplate, str], None]] = None):
        self.repository = repository
        self.send = send or log_sender

    def schedule_interviews(self, job_id: str, candidate_ids: Iterable[str],
                            interview_type: str = 'standard',
                            scheduled_at: Optional[datetime] = None) -> List[str]:
        """
        Create interview records and send invitations.

        Candidates without a ranking for the job are skipped. A failed
        delivery is logged; the interview record is kept.

        Returns:
            Ids of the interviews created

        Raises:
            DataNotFound: If the job does not exist
        """
        if interview_type not in INTERVIEW_TYPES:
            raise ValueError(f"Unknown interview type: {interview_type}")

        job = self.repository.get_job(job_id)
        rankings: Dict[str, CandidateRanking] = {
            r.candidate_id: r for r in self.repository.get_rankings(job_id)
        }
        interview_ids = []

        for candidate_id in candidate_ids:
            ranking = rankings.get(candidate_id)
            if ranking is None:
                logger.warning(f"No ranking for candidate {candidate_id}; skipping interview",
                               extra={'job_id': job_id, 'candidate_id': candidate_id})
                continue

            interview_id = self.repository.save_interview(
                job_id,
                candidate_id,
                ranking.ranking_id,
                interview_type,
                scheduled_at.isoformat() if scheduled_at else None,
            )
            interview_ids.append(interview_id)

            template = interview_invitation(ranking.name, job.title)
            try:
                self.send(ranking.email, template, interview_id)
            except Exception as e:
                logger.error(f"Failed to send invitation {interview_id}: {str(e)}",
                             extra={'candidate_id': candidate_id})

        return interview_ids

    def schedule_recommended(self, job_id: str, interview_type: str = 'standard',
                             scheduled_at: Optional[datetime] = None) -> List[str]:
        """Invite every recommended candidate for the job."""
        shortlist = recommended_candidates(self.repository.get_rankings(job_id))
        return self.schedule_interviews(
            job_id, [r.candidate_id for r in shortlist], interview_type, scheduled_at
        )

    def update_interview_status(self, interview_id: str, status: str, notes: Optional[str] = None) -> None:
        self.repository.update_interview(interview_id, status, notes)

    def interview_stats(self, job_id: str) -> Dict[str, int]:
        """Counts of interviews for a job by status."""
        stats = {'total': 0, 'scheduled': 0, 'completed': 0, 'cancelled': 0}
        for interview in self.repository.list_interviews(job_id):
            stats['total'] += 1
            if interview['status'] in stats:
                stats[interview['status']] += 1
        return stats

