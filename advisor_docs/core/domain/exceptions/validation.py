"""Validation exceptions raised before any extraction work starts."""

from .base import AdvisorDocsError


class ValidationError(AdvisorDocsError):
    """Input validation failed."""

    error_code = "DOC_VAL_001"


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the configured size limit."""

    error_code = "DOC_VAL_002"


class UnsupportedFileTypeError(ValidationError):
    """Neither the declared content type nor the extension is supported."""

    error_code = "DOC_VAL_003"


class EmptyQueryError(ValidationError):
    """Search query cannot be empty or whitespace only."""

    error_code = "DOC_VAL_004"
