"""Domain error taxonomy.

Every user-visible failure is a DocsenseError subclass carrying a stable
``kind`` and an HTTP ``status_code``. The API layer renders them as
``{"error": ..., "kind": ..., "suggestion": ...}``.
"""


class DocsenseError(Exception):
    """Base class for all domain errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str, *, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> dict[str, str]:
        """Serialize to the wire error shape."""
        body = {"error": self.message, "kind": self.kind}
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class InvalidInput(DocsenseError):
    """Missing or malformed request fields."""

    kind = "invalid_input"
    status_code = 400


class InvalidUrl(InvalidInput):
    """URL is not a well-formed absolute http(s) URL."""

    kind = "invalid_url"


class ExtractionError(DocsenseError):
    """Base for failures while turning a source into text."""

    kind = "extraction_failed"
    status_code = 400


class FetchFailed(ExtractionError):
    """DNS, connection or transport failure reaching a web source."""

    kind = "fetch_failed"


class AccessError(ExtractionError):
    """YouTube page could not be fetched (network, HTTP, restricted video)."""

    kind = "access_error"


class NotFound(ExtractionError):
    """Fetched source answered HTTP 404."""

    kind = "not_found"


class InsufficientText(ExtractionError):
    """Source yielded too little readable text."""

    kind = "insufficient_text"


class InsufficientMetadata(ExtractionError):
    """YouTube page yielded too little metadata."""

    kind = "insufficient_metadata"


class NoContent(ExtractionError):
    """Web page was empty after cleanup."""

    kind = "no_content"


class DuplicateAccount(DocsenseError):
    """Registration collided with an existing email."""

    kind = "duplicate_account"
    status_code = 409


class AuthFailed(DocsenseError):
    """Bad credentials or token."""

    kind = "auth_failed"
    status_code = 401


class QuotaExceeded(DocsenseError):
    """Daily request limit reached."""

    kind = "quota_exceeded"
    status_code = 429


class InternalError(DocsenseError):
    """Unexpected, unclassified failure."""

    kind = "internal_error"
    status_code = 500
