"""Text sources and field extraction."""
from .cv_extractor import CVFieldExtractor, extract_candidate
from .requirement_extractor import RequirementExtractor, extract_requirements

__all__ = [
    'CVFieldExtractor',
    'RequirementExtractor',
    'extract_candidate',
    'extract_requirements'
]
