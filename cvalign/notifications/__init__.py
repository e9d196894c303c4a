"""Interview invitations for shortlisted candidates."""
from .interviews import EmailTemplate, InterviewScheduler, interview_invitation, recommended_candidates
