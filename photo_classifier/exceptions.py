"""
Custom exception hierarchy for the photo classifier.

Per-image failures are contained by the Classifier and recorded as outcomes;
only ConfigurationError is allowed to abort a run.
"""


class PhotoClassifierError(Exception):
    """Base exception for all photo classifier errors."""
    pass


class FileHashError(PhotoClassifierError):
    """Raised when file hashing fails."""
    pass


class MetadataExtractionError(PhotoClassifierError):
    """Raised when metadata cannot be read from a file."""
    pass


class FileOperationError(PhotoClassifierError):
    """Raised when copying a file fails or the copy does not match its source."""
    pass


class ConfigurationError(PhotoClassifierError):
    """Raised when the run cannot start (bad destination, no sources)."""
    pass
