"""Settings aggregator for the translation engine."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import TranslationsFeatureSettings
from infrastructure.configuration.infrastructure import (
    RateLimitSettings,
    RetrySettings,
)

_SECTIONS = {
    "translations": TranslationsFeatureSettings,
    "rate_limit": RateLimitSettings,
    "retry": RetrySettings,
}


class Settings(BaseSettings):
    """All engine configuration, read from the environment and ``.env``.

    Sections:
        translations: concurrency, locales, backends, graph store
        rate_limit: per-actor admission quota
        retry: translator retry policy

    Any section passed as a keyword argument replaces the one that would be
    read from the environment, which is how tests inject their own values:

        Settings(rate_limit=RateLimitSettings(quota=3))
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    translations: TranslationsFeatureSettings
    rate_limit: RateLimitSettings
    retry: RetrySettings

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        for section, section_class in _SECTIONS.items():
            kwargs.setdefault(section, section_class())
        super().__init__(**kwargs)

    @property
    def is_production(self) -> bool:
        """An empty PREFIX marks the production deployment."""
        return not self.PREFIX


settings = Settings()
