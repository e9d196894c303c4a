"""Tests for CV and requirement field extraction."""
import pytest

from cvalign.extractors.cv_extractor import NO_EMAIL, UNKNOWN_NAME, CVFieldExtractor, extract_candidate
from cvalign.extractors.requirement_extractor import RequirementExtractor, extract_requirements
from cvalign.extractors.vocabulary import education_rank, extract_keywords, find_terms, skills_overlap

from .conftest import EMILY_CV, MICHAEL_CV, SARAH_CV


class TestCVFieldExtractor:
    """Tests for CVFieldExtractor."""

    def test_extracts_all_fields(self):
        attrs = extract_candidate(SARAH_CV, filename="sarah.pdf")

        assert attrs.name == "Sarah Johnson"
        assert attrs.email == "sarah.johnson@email.com"
        assert attrs.phone == "+1 (555) 012-3456"
        assert attrs.experience_years == 5
        assert attrs.education == "Bachelor of Computer Science, MIT (2015-2019)"
        assert attrs.raw_text == SARAH_CV
        assert attrs.filename == "sarah.pdf"

    def test_skills_come_from_skills_section_in_vocabulary_order(self):
        attrs = extract_candidate(SARAH_CV)

        assert attrs.skills == [
            'React', 'JavaScript', 'TypeScript', 'Node.js', 'Java', 'HTML', 'CSS', 'AWS', 'Git'
        ]

    def test_substring_matching_picks_up_embedded_terms(self):
        attrs = extract_candidate(EMILY_CV)

        assert attrs.skills == ['Vue.js', 'PHP', 'HTML', 'CSS', 'SQL', 'MySQL']

    def test_no_skills_section_gives_no_skills(self):
        text = "Jane Roe\njane@example.com\n\nWorked with Python and Docker for 3 years."

        assert extract_candidate(text).skills == []

    def test_skills_section_stops_at_blank_line(self):
        text = "Jane Roe\n\nSKILLS\nPython\n\nHobbies: Docker meetups"

        assert extract_candidate(text).skills == ['Python']

    def test_skills_section_stops_at_next_header(self):
        text = "Jane Roe\nSKILLS\nPython\nEXPERIENCE\nDocker consultant"

        assert extract_candidate(text).skills == ['Python']

    def test_whitespace_only_line_counts_as_blank(self):
        text = "Jane Roe\nSKILLS\nPython\n    \nDocker"

        assert extract_candidate(text).skills == ['Python']

    def test_custom_vocabulary(self):
        extractor = CVFieldExtractor(vocabulary=['Terraform', 'Go'])
        attrs = extractor.extract("Jane Roe\nSKILLS\nTerraform, Go, Python")

        assert attrs.skills == ['Terraform', 'Go']

    def test_name_fallback_when_first_line_is_email(self):
        text = "jane@example.com\nJane Roe"

        assert extract_candidate(text).name == UNKNOWN_NAME

    def test_name_fallback_when_first_line_is_section_header(self):
        text = "EXPERIENCE\nDeveloper - 2 years"

        assert extract_candidate(text).name == UNKNOWN_NAME

    def test_empty_text_uses_all_fallbacks(self):
        attrs = extract_candidate("")

        assert attrs.name == UNKNOWN_NAME
        assert attrs.email == NO_EMAIL
        assert attrs.phone is None
        assert attrs.skills == []
        assert attrs.experience_years == 0
        assert attrs.education is None

    def test_phone_is_trimmed(self):
        assert extract_candidate(MICHAEL_CV).phone == "555-012-4567"

    def test_experience_is_first_number_before_years(self):
        text = "Jane\nYEARS: none\nLed 12 Years of projects, then 3 years more"

        assert extract_candidate(text).experience_years == 12

    def test_single_year(self):
        assert extract_candidate(EMILY_CV).experience_years == 1

    def test_education_needs_a_second_line(self):
        text = "Jane Roe\n\nEDUCATION: BSc Physics"

        assert extract_candidate(text).education is None

    def test_education_section_at_end_of_text(self):
        text = "Jane Roe\n\nEDUCATION\n  PhD in Chemistry  "

        assert extract_candidate(text).education == "PhD in Chemistry"

    def test_deterministic(self):
        assert extract_candidate(MICHAEL_CV) == extract_candidate(MICHAEL_CV)


class TestRequirementExtractor:
    """Tests for RequirementExtractor."""

    def test_extracts_requirements(self):
        req = extract_requirements("React, 3+ years experience, Bachelor's degree")

        assert req.required_skills == ['React']
        assert req.required_experience_years == 3
        assert req.required_education_level == 2

    @pytest.mark.parametrize("text,years", [
        ("5 years of experience", 5),
        ("10+ Years Experience in sales", 10),
        ("4 + years of experience", 4),
        ("1 year experience", 1),
        ("Experience with React", 2),
        ("", 2),
    ])
    def test_required_years(self, text, years):
        assert RequirementExtractor.extract_required_years(text) == years

    @pytest.mark.parametrize("text,level", [
        ("PhD preferred, master's accepted", 4),
        ("MBA or bachelor", 3),
        ("Any degree", 2),
        ("Associate or diploma", 1),
        ("No formal requirement", 2),
    ])
    def test_education_level_by_priority(self, text, level):
        assert extract_requirements(text).required_education_level == level

    def test_keywords_drop_short_words_and_stop_words(self):
        req = extract_requirements("Work with them on this: Python, APIs & cloud!")

        assert req.keywords == frozenset({'work', 'python', 'apis', 'cloud'})

    def test_keywords_include_description(self):
        req = RequirementExtractor().extract("Python", description="Remote position")

        assert req.keywords == frozenset({'python', 'remote', 'position'})

    def test_skills_use_requirements_text_only(self):
        req = RequirementExtractor().extract("Python", description="Our stack includes Docker")

        assert req.required_skills == ['Python']

    def test_no_vocabulary_terms(self):
        req = extract_requirements("Great communicator, 2+ years experience")

        assert req.required_skills == []

    def test_custom_stop_words(self):
        req = extract_requirements("python remote", stop_words=['remote'])

        assert req.keywords == frozenset({'python'})


class TestVocabulary:
    """Tests for shared matching helpers."""

    def test_find_terms_is_case_insensitive(self):
        assert find_terms("we use DOCKER and redis") == ['Docker', 'Redis']

    def test_education_rank_default(self):
        assert education_rank("High School") == 0
        assert education_rank("High School", default=2) == 2

    def test_extract_keywords_is_a_set(self):
        assert extract_keywords("Python python PYTHON") == frozenset({'python'})

    def test_skills_overlap_either_direction(self):
        assert skills_overlap("Java", "JavaScript")
        assert skills_overlap("javascript", "JAVA")
        assert not skills_overlap("Python", "Django")
