"""
Provider exceptions.
"""
from typing import Any, Optional


def is_retryable_status(status_code: Optional[int]) -> bool:
    """Rate limits (429) and server errors (5xx) are worth retrying."""
    if status_code is None:
        return False
    return status_code == 429 or 500 <= status_code < 600


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        retryable: bool = False,
        response: Any = None,
    ):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        self.retryable = retryable
        self.response = response
        super().__init__(f"[{provider}] {message}")


class ProviderUnavailable(ProviderError):
    """Provider is not available (missing API key, etc.)."""

    def __init__(self, provider: str, reason: str = "unavailable"):
        super().__init__(provider, f"Provider unavailable: {reason}")
        self.reason = reason


class SynthesisError(ProviderError):
    """Speech synthesis failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
        response: Any = None,
        provider: str = "elevenlabs",
    ):
        if retryable is None:
            retryable = is_retryable_status(status_code)
        super().__init__(provider, message, status_code, retryable, response)


class VideoGenerationError(ProviderError):
    """Video job submission, status query, job outcome or download failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
        response: Any = None,
        provider: str = "grok",
    ):
        if retryable is None:
            retryable = is_retryable_status(status_code)
        super().__init__(provider, message, status_code, retryable, response)


class VideoGenerationTimeout(ProviderError):
    """Job did not reach a terminal status before the polling ceiling."""

    def __init__(self, job_id: str, timeout: float, provider: str = "grok"):
        self.job_id = job_id
        self.timeout = timeout
        super().__init__(
            provider,
            f"Video generation {job_id} timed out after {timeout:g}s",
        )
