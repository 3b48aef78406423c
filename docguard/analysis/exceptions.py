class TriageError(Exception):
    """Base exception for all analysis-related errors."""


class ValidationError(TriageError):
    """Raised when an upload violates size or type constraints. Never queued."""


class AnalysisFailure(TriageError):
    """Raised when an analysis record could not be produced for a file."""


class ProfileError(TriageError):
    """Raised when the outcome/evidence profile file is missing or malformed."""


class AggregationWarning(UserWarning):
    """Issued when trend aggregation is asked to reduce an empty history."""
