"""Error types raised along the summarize pipeline."""
from __future__ import annotations

QUOTA_ERROR_TYPE = "insufficient_quota"


class SummarizerError(Exception):
    """Base class for pipeline failures."""


class InputValidationError(SummarizerError):
    """Request cannot be served: missing text or missing credential."""


class TemplateError(SummarizerError):
    """Prompt template could not be loaded."""


class TemplateNotFoundError(TemplateError):
    pass


class TemplateParseError(TemplateError):
    pass


class CompletionAPIError(SummarizerError):
    """Error reported by the remote completion API.

    Mirrors the provider's ``{"error": {"message", "type", "code"}}`` envelope.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_type: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.code = code

    @property
    def is_quota_exceeded(self) -> bool:
        return self.error_type == QUOTA_ERROR_TYPE
