"""Domain-specific error types for the LLM module."""


class LlmAuthError(Exception):
    """Missing or rejected service credential."""


class LlmApiError(Exception):
    """Chat-completion API call failure.

    Attributes:
        status_code: HTTP status code from the API response (0 when none).
        rate_limited: Whether the service reported a rate limit.
    """

    def __init__(
        self, message: str, status_code: int = 0, rate_limited: bool = False
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.rate_limited = rate_limited


class LlmProcessingError(Exception):
    """Response parsing or processing failure."""
