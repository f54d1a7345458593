"""Rate limiting infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RateLimitSettings(InfrastructureSettings):
    """Per-actor admission quota shared by every write operation.

    Counting uses fixed windows, so an actor can be admitted up to twice the
    quota across a window boundary. Counters live in process memory and reset
    on restart.

    Environment Variables:
        RATE_LIMIT_QUOTA: Admissions allowed per actor per window (default: 60)
        RATE_LIMIT_WINDOW_SECONDS: Window duration in whole seconds (default: 60)

    Example:
        ```python
        from infrastructure.configuration import settings

        quota = settings.rate_limit.quota
        ```
    """

    quota: int = Field(
        default=60,
        ge=1,
        alias="RATE_LIMIT_QUOTA",
        description="Admissions allowed per actor in one window",
    )
    window_seconds: int = Field(
        default=60,
        ge=1,
        alias="RATE_LIMIT_WINDOW_SECONDS",
        description="Duration of one counting window (seconds)",
    )
