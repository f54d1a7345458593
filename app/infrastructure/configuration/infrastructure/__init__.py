"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.rate_limit import RateLimitSettings
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = [
    "RateLimitSettings",
    "RetrySettings",
]
