"""Error taxonomy for the agri advisor service.

Every error that reaches a route handler derives from AdvisoryError and
carries the HTTP status it maps to. The API layer turns them into
`{"error": ...}` bodies with a single exception handler.
"""


class AdvisoryError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AdvisoryError):
    """A required request field is missing or empty."""

    status_code = 400


class UpstreamError(AdvisoryError):
    """The generation endpoint failed or returned a non-success status."""

    status_code = 500


class PersistenceError(AdvisoryError):
    """A store operation failed."""

    status_code = 500


class TranslationError(Exception):
    """Translation call failed. Never leaves the translation client."""
