"""
CVAlign Streamlit dashboard.
Ranks uploaded CVs against a job posting and exports the shortlist.
"""
import time
from typing import List, Optional

import streamlit as st

from cvalign.extractors.pdf_extractor import PDFExtractor
from cvalign.notifications.interviews import InterviewScheduler, recommended_candidates
from cvalign.reporting.report import rankings_dataframe, rankings_to_csv, report_to_json
from cvalign.scoring.models import JobPosting, RankingBatch
from cvalign.scoring.ranking import RankingEngine
from cvalign.storage.repository import InMemoryRepository
from cvalign.utils.config import Config
from cvalign.utils.uploads import sanitize_text, validate_file
from cvalign.utils.logging_config import setup_logging

logger = setup_logging()

st.set_page_config(
    page_title="CVAlign - Candidate Ranking",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .stApp {
        max-width: 1400px;
        margin: 0 auto;
    }
    .missing-skill {
        background-color: #fff3cd;
        padding: 2px 6px;
        border-radius: 3px;
        margin: 2px;
        display: inline-block;
    }
    .matched-skill {
        background-color: #d4edda;
        padding: 2px 6px;
        border-radius: 3px;
        margin: 2px;
        display: inline-block;
    }
</style>
""", unsafe_allow_html=True)

CATEGORY_ICONS = {
    'excellent': "🟢",
    'good': "🔵",
    'fair': "🟡",
    'poor': "🔴",
}


class CVAlignApp:
    """Dashboard over the ranking engine."""

    def __init__(self):
        self.config = Config()

        if 'repository' not in st.session_state:
            st.session_state.repository = InMemoryRepository()
        if 'batch' not in st.session_state:
            st.session_state.batch = None
        if 'job' not in st.session_state:
            st.session_state.job = None

        self.repository = st.session_state.repository

    def render_input_section(self) -> tuple:
        """Render job and upload controls."""
        col1, col2 = st.columns([1, 1])

        with col1:
            st.subheader("📋 Job Posting")
            title = st.text_input("Job title", placeholder="Senior Frontend Developer")
            description = st.text_area("Description", height=150)
            requirements = st.text_area(
                "Requirements",
                height=150,
                placeholder="React, TypeScript, 3+ years experience, Bachelor's degree"
            )
            vacancies = st.number_input("Vacancies", min_value=1, max_value=100, value=1, step=1)

        with col2:
            st.subheader("📄 CV Upload")
            uploaded_files = st.file_uploader(
                "Upload CVs",
                type=['pdf', 'txt'],
                accept_multiple_files=True,
                help=f"Upload 1-{self.config.max_files} PDF or TXT files"
            )
            enable_ocr = st.checkbox("Enable OCR Fallback", value=False, help="Use OCR for scanned PDFs (slower)")

            if uploaded_files:
                st.success(f"✅ {len(uploaded_files)} file(s) ready for analysis")

        job = JobPosting(title=title, description=description, requirements=requirements,
                         vacancies=int(vacancies))
        return job, uploaded_files, enable_ocr

    def validate_inputs(self, job: JobPosting, uploaded_files: Optional[List]) -> tuple:
        if not job.title.strip():
            return False, "Please provide a job title."

        if len(job.requirements.strip()) < 10:
            return False, "Please provide the job requirements (minimum 10 characters)."

        if not uploaded_files:
            return False, "Please upload at least one CV."

        if len(uploaded_files) > self.config.max_files:
            return False, f"Maximum {self.config.max_files} files allowed."

        for file in uploaded_files:
            is_valid, error = validate_file(file, self.config)
            if not is_valid:
                return False, f"{file.name}: {error}"

        return True, None

    def process(self, job: JobPosting, uploaded_files: List, enable_ocr: bool) -> RankingBatch:
        job_id = self.repository.save_job(job)
        job = self.repository.get_job(job_id)

        engine = RankingEngine(
            self.config,
            repository=self.repository,
            text_source=PDFExtractor(self.config, enable_ocr=enable_ocr),
        )
        return engine.rank_files(job, uploaded_files)

    def render_results(self, job: JobPosting, batch: RankingBatch) -> None:
        st.markdown("---")
        st.subheader("📊 Ranking Results")

        rankings = batch.rankings
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Ranked", len(rankings))
        col2.metric("Skipped", batch.skipped_count)
        col3.metric("Recommended", len(batch.recommended))
        if rankings:
            avg_score = sum(r.overall_score for r in rankings) / len(rankings)
            col4.metric("Average Score", f"{avg_score:.0f}")

        for ref, reason in batch.skipped:
            st.warning(f"Skipped {ref}: {reason}")
        for warning in batch.warnings:
            st.caption(f"⚠️ {warning}")

        if not rankings:
            return

        st.dataframe(rankings_dataframe(rankings), use_container_width=True, height=400)

        st.markdown("### 📋 Candidate Feedback")
        for ranking in rankings[:10]:
            icon = CATEGORY_ICONS[ranking.match_category.value]
            label = f"#{ranking.ranking_position} {icon} {sanitize_text(ranking.name)} ({ranking.overall_score})"
            with st.expander(label):
                col_d1, col_d2 = st.columns(2)
                feedback = ranking.feedback

                with col_d1:
                    st.write(f"**Assessment:** {feedback.overall_assessment}")
                    st.markdown("**Strengths:**")
                    for item in feedback.strengths:
                        st.write(f"- {item}")
                    st.markdown("**Weaknesses:**")
                    for item in feedback.weaknesses:
                        st.write(f"- {item}")

                with col_d2:
                    if ranking.skills:
                        skills_html = " ".join(
                            f'<span class="matched-skill">{sanitize_text(s)}</span>' for s in ranking.skills
                        )
                        st.markdown(skills_html, unsafe_allow_html=True)
                    if feedback.skill_gaps:
                        gaps_html = " ".join(
                            f'<span class="missing-skill">{sanitize_text(s)}</span>' for s in feedback.skill_gaps
                        )
                        st.markdown(gaps_html, unsafe_allow_html=True)
                    st.markdown("**💡 Recommendations:**")
                    for item in feedback.recommendations:
                        st.write(f"- {item}")

        st.markdown("### 💾 Export and Shortlist")
        col_dl1, col_dl2, col_dl3 = st.columns(3)

        with col_dl1:
            st.download_button(
                label="📥 Download JSON",
                data=report_to_json(job.title, rankings),
                file_name=f"cvalign-analysis-{int(time.time())}.json",
                mime="application/json"
            )

        with col_dl2:
            st.download_button(
                label="📥 Download CSV",
                data=rankings_to_csv(rankings),
                file_name=f"cvalign-analysis-{int(time.time())}.csv",
                mime="text/csv"
            )

        with col_dl3:
            shortlist = recommended_candidates(rankings)
            if st.button(f"📧 Invite {len(shortlist)} recommended"):
                scheduler = InterviewScheduler(self.repository)
                interview_ids = scheduler.schedule_recommended(batch.job_id)
                st.success(f"Interview invitations sent to {len(interview_ids)} candidates")

    def run(self) -> None:
        with st.sidebar:
            st.header("ℹ️ How candidates are scored")
            st.markdown("""
            **ATS score**
            - Skills (40%)
            - Experience (30%)
            - Education (15%)
            - Keywords (15%)

            **Overall score** = 70% ATS + 30% semantic similarity

            **Match bands:** excellent ≥ 85, good ≥ 70, fair ≥ 55
            """)

        job, uploaded_files, enable_ocr = self.render_input_section()

        if st.button("🚀 Rank Candidates", type="primary", use_container_width=True):
            is_valid, error_message = self.validate_inputs(job, uploaded_files)

            if not is_valid:
                st.error(error_message)
                return

            with st.spinner("Scoring candidates..."):
                try:
                    st.session_state.batch = self.process(job, uploaded_files, enable_ocr)
                    st.session_state.job = job
                    st.success("✅ Analysis complete!")
                except Exception as e:
                    logger.error(f"Application error: {str(e)}", exc_info=True)
                    st.error(f"Error: {str(e)}")

        if st.session_state.batch is not None:
            self.render_results(st.session_state.job, st.session_state.batch)


def main():
    """Entry point."""
    try:
        app = CVAlignApp()
        app.run()
    except Exception as e:
        logger.critical(f"Fatal error: {str(e)}", exc_info=True)
        st.error("Critical error. Please refresh the page.")


if __name__ == "__main__":
    main()
