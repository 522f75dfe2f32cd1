"""Repository exceptions for the document store."""

from .base import AdvisorDocsError


class RepositoryError(AdvisorDocsError):
    """Error in the document repository."""

    error_code = "DOC_REP_001"


class DocumentNotFoundError(RepositoryError):
    """No document exists with the requested id.

    Repository lookups return ``None`` for unknown ids; only the HTTP layer
    raises this to produce a 404.
    """

    error_code = "DOC_REP_002"


class InvalidSnapshotError(RepositoryError):
    """An imported snapshot is malformed."""

    error_code = "DOC_REP_003"
