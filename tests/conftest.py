"""Shared fixtures: sample CVs, a job posting and a test configuration."""
import textwrap

import pytest

from cvalign.scoring.models import JobPosting
from cvalign.utils.config import Config


SARAH_CV = textwrap.dedent("""
    Sarah Johnson
    Senior Frontend Developer
    sarah.johnson@email.com | +1 (555) 012-3456

    EXPERIENCE
    Senior Frontend Developer at TechCorp (2019-2024) - 5 years
    - Developed React applications with TypeScript
    - Led team of 4 developers

    SKILLS
    React, TypeScript, Node.js, JavaScript, HTML, CSS, Git, AWS

    EDUCATION
    Bachelor of Computer Science, MIT (2015-2019)
""")

MICHAEL_CV = textwrap.dedent("""
    Michael Chen
    Full Stack Developer
    michael.chen@email.com | 555-012-4567

    EXPERIENCE
    Full Stack Developer at StartupXYZ (2020-2024) - 4 years
    - Built scalable web applications
    - Python backend development

    SKILLS
    JavaScript, Python, AWS, Docker, PostgreSQL, React

    EDUCATION
    Master of Software Engineering, Stanford (2018-2020)
""")

EMILY_CV = textwrap.dedent("""
    Emily Davis
    Web Developer
    emily.davis@email.com

    EXPERIENCE
    Web Developer at WebAgency (2021-2024) - 1 year
    - Vue.js frontend development
    - PHP backend systems

    SKILLS
    Vue.js, PHP, MySQL, HTML, CSS

    EDUCATION
    Associate Diploma in Web Design
""")


@pytest.fixture
def config():
    cfg = Config(config_path=None)
    cfg.max_workers = 2
    cfg.per_file_timeout = 5
    return cfg


@pytest.fixture
def frontend_job():
    return JobPosting(
        title="Senior Frontend Developer",
        description="We build React applications for recruiting teams.",
        requirements="React, TypeScript, JavaScript, 3+ years of experience, Bachelor's degree",
        vacancies=2,
        job_id="job-1",
    )


@pytest.fixture
def candidate_texts():
    return [("sarah", SARAH_CV), ("michael", MICHAEL_CV), ("emily", EMILY_CV)]
