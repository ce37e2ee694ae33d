"""Errors that abort a migration run before any record is sent.

Per-record problems are never raised; the Submitter turns them into
SubmissionResult entries instead.
"""


class QuizSyncError(Exception):
    """Base error for this package."""


class LoadError(QuizSyncError):
    """Raised when a source file cannot be turned into a list of records."""


class NotFoundError(LoadError):
    """Raised when the source file does not exist."""


class ParseError(LoadError):
    """Raised when the source file is not a JSON array."""


class PreflightError(QuizSyncError):
    """Raised when the remote API is not usable for this run."""


class EndpointUnreachable(PreflightError):
    """The liveness probe could not complete or reported a failure."""


class Unauthenticated(PreflightError):
    """The access key is missing or was refused by the API."""
