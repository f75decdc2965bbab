"""Error taxonomy shared by the pipeline, the provider adapters and the routes."""

from typing import Optional


class ValidationError(Exception):
    """Malformed caller input. Reported as 400, never retried."""


class ProviderError(Exception):
    """Provider failure that is not a rate limit. Not retried."""


class ProviderRateLimited(ProviderError):
    """The provider asked us to slow down. `retry_after` is in seconds, if given."""

    def __init__(self, message: str = "Rate limited by provider", retry_after: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after


class PreviewGenerationFailure(Exception):
    """Preview step failed; the pipeline swaps in the fallback document."""


class GenerationFailure(Exception):
    """Any unrecovered error during a pipeline run."""
