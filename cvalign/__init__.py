"""CVAlign: CV extraction, ATS scoring and candidate ranking."""

__version__ = "0.1.0"
