"""
Error taxonomy for the scoring and ranking pipeline.
"""


class CVAlignError(Exception):
    """Base class for all pipeline errors."""


class ExtractionFailure(CVAlignError):
    """CV text is malformed or could not be read. Recovered per candidate."""


class DataNotFound(CVAlignError):
    """A job, candidate or ranking is missing from persistence."""


class DimensionMismatch(CVAlignError, ValueError):
    """Two embedding vectors of different length were compared."""


class PersistenceWriteFailure(CVAlignError):
    """Saving a candidate, ranking or embedding failed."""
