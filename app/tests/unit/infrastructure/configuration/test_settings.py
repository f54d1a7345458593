"""Unit tests for infrastructure.configuration.

Tests cover:
- TranslationsFeatureSettings parsing and validation
- RetrySettings and RateLimitSettings defaults and backoff
- Settings aggregator initialization
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import (
    RateLimitSettings,
    RetrySettings,
    Settings,
    TranslationsFeatureSettings,
)

pytestmark = pytest.mark.unit


class TestTranslationsFeatureSettings:
    def test_defaults(self):
        cfg = TranslationsFeatureSettings()

        assert cfg.max_concurrency == 4
        assert cfg.active_locales == ["en", "es", "fr", "de"]
        assert cfg.default_locale == "en"
        assert cfg.default_backend == "pseudo"
        assert cfg.store_backend == "memory"
        assert cfg.batch_timeout_seconds is None
        assert cfg.enabled_backends() == {"pseudo": {"enabled": True}}

    def test_comma_separated_locales(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_ACTIVE_LOCALES", "en, pt-BR ,ja")

        cfg = TranslationsFeatureSettings()

        assert cfg.active_locales == ["en", "pt-BR", "ja"]

    def test_json_locales(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_ACTIVE_LOCALES", '["en", "it"]')

        assert TranslationsFeatureSettings().active_locales == ["en", "it"]

    def test_invalid_json_locales(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_ACTIVE_LOCALES", '["en", ')

        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()

    def test_backends_from_json(self, monkeypatch):
        monkeypatch.setenv(
            "TRANSLATION_BACKENDS",
            '{"pseudo": {"enabled": true}, '
            '"libretranslate": {"enabled": false, "url": "http://lt"}}',
        )

        cfg = TranslationsFeatureSettings()

        assert set(cfg.backends) == {"pseudo", "libretranslate"}
        assert set(cfg.enabled_backends()) == {"pseudo"}

    def test_invalid_backends_json(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_BACKENDS", "{not json")

        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()

    def test_default_locale_must_be_active(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_DEFAULT_LOCALE", "it")

        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()

    def test_default_backend_must_be_enabled(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_DEFAULT_BACKEND", "libretranslate")

        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()

    def test_store_backend_is_validated(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_STORE_BACKEND", "SQLite")
        assert TranslationsFeatureSettings().store_backend == "sqlite"

        monkeypatch.setenv("TRANSLATION_STORE_BACKEND", "dynamodb")
        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()

    def test_max_concurrency_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("TRANSLATION_MAX_CONCURRENCY", "0")

        with pytest.raises(ValidationError):
            TranslationsFeatureSettings()


class TestRetrySettings:
    def test_defaults(self):
        retry = RetrySettings()

        assert retry.attempts == 3
        assert retry.backoff_base_seconds == 0.5
        assert retry.backoff_multiplier == 2.0
        assert retry.backoff_max_seconds == 8.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RETRY_ATTEMPTS", "5")
        monkeypatch.setenv("RETRY_BACKOFF_BASE_SECONDS", "1")

        retry = RetrySettings()

        assert retry.attempts == 5
        assert retry.backoff_base_seconds == 1.0

    def test_delay_for_is_exponential_and_capped(self):
        retry = RetrySettings(
            backoff_base_seconds=0.5, backoff_multiplier=2.0, backoff_max_seconds=3.0
        )

        assert [retry.delay_for(i) for i in range(4)] == [0.5, 1.0, 2.0, 3.0]

    def test_max_must_not_be_below_base(self):
        with pytest.raises(ValidationError):
            RetrySettings(backoff_base_seconds=5, backoff_max_seconds=1)


class TestRateLimitSettings:
    def test_defaults(self):
        rate = RateLimitSettings()

        assert rate.quota == 60
        assert rate.window_seconds == 60.0

    def test_window_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "0")

        with pytest.raises(ValidationError):
            RateLimitSettings()


class TestSettings:
    def test_subsettings_are_instantiated(self):
        settings = Settings()

        assert isinstance(settings.translations, TranslationsFeatureSettings)
        assert isinstance(settings.rate_limit, RateLimitSettings)
        assert isinstance(settings.retry, RetrySettings)

    def test_overrides_are_kept(self):
        retry = RetrySettings(attempts=9)

        assert Settings(retry=retry).retry.attempts == 9

    def test_is_production_follows_prefix(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False
