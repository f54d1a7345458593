"""Translator retry infrastructure settings."""

from pydantic import Field, model_validator

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry policy applied by the translator gateway to transient failures.

    Only transient backend failures (network errors, timeouts, 429/5xx) are
    retried. Permanent failures surface on the first attempt.

    Environment Variables:
        RETRY_ATTEMPTS: Total attempts per translator call (default: 3)
        RETRY_BACKOFF_BASE_SECONDS: Delay before the second attempt (default: 0.5s)
        RETRY_BACKOFF_MULTIPLIER: Growth factor between attempts (default: 2.0)
        RETRY_BACKOFF_MAX_SECONDS: Cap for a single delay (default: 8s)

    Exponential Backoff:
        Delay calculation: min(base * (multiplier ^ attempt), max)

        Example with defaults (base=0.5s, multiplier=2, max=8s):
            After attempt 1: 0.5s
            After attempt 2: 1.0s
            After attempt 3: 2.0s

    Example:
        ```python
        from infrastructure.configuration import settings

        attempts = settings.retry.attempts
        ```
    """

    attempts: int = Field(
        default=3,
        ge=1,
        alias="RETRY_ATTEMPTS",
        description="Total attempts per translator call, including the first one",
    )
    backoff_base_seconds: float = Field(
        default=0.5,
        ge=0,
        alias="RETRY_BACKOFF_BASE_SECONDS",
        description="Delay before the second attempt (seconds)",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1,
        alias="RETRY_BACKOFF_MULTIPLIER",
        description="Multiplier applied to the delay after each failed attempt",
    )
    backoff_max_seconds: float = Field(
        default=8.0,
        ge=0,
        alias="RETRY_BACKOFF_MAX_SECONDS",
        description="Maximum delay between two attempts (seconds)",
    )

    @model_validator(mode="after")
    def _validate_backoff(self) -> "RetrySettings":
        if self.backoff_max_seconds < self.backoff_base_seconds:
            raise ValueError(
                "RETRY_BACKOFF_MAX_SECONDS must be >= RETRY_BACKOFF_BASE_SECONDS"
            )
        return self

    def delay_for(self, attempt: int) -> float:
        """Return the delay to wait after the given zero-based failed attempt."""
        delay = self.backoff_base_seconds * (self.backoff_multiplier**attempt)
        return min(delay, self.backoff_max_seconds)
