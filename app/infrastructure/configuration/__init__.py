"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
translation engine using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    TranslationsFeatureSettings: Feature settings class (for testing)
    RateLimitSettings: Rate limiter settings class (for testing)
    RetrySettings: Translator retry settings class (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    workers = settings.translations.max_concurrency
    quota = settings.rate_limit.quota

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import TranslationsFeatureSettings
from infrastructure.configuration.infrastructure import (
    RateLimitSettings,
    RetrySettings,
)

__all__ = [
    "Settings",
    "settings",
    "TranslationsFeatureSettings",
    "RateLimitSettings",
    "RetrySettings",
]
