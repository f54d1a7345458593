"""Shared fixtures for the translation engine test suite."""

import pytest

from infrastructure.configuration import RetrySettings
from modules.translations.content import InMemoryContentStore
from modules.translations.core import TranslationService
from modules.translations.domain import Element
from modules.translations.gateway import TranslatorGateway
from modules.translations.locales import LocaleRegistry
from modules.translations.rate_limiter import FixedWindowRateLimiter
from modules.translations.store import InMemoryTranslationGraphStore
from tests.fakes import FakeBackend, FakeClock


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def locales():
    return LocaleRegistry(["en", "es", "fr", "de", "pt-BR"], default_locale="en")


@pytest.fixture
def content_store():
    store = InMemoryContentStore()
    store.add(Element("1"), "Hello", "<p>World</p>", locale="en")
    store.add(Element("2"), "Second", "<p>Body two</p>", locale="en")
    store.add(Element("3"), "Tercero", "<p>Cuerpo</p>", locale="es")
    return store


@pytest.fixture
def graph_store():
    return InMemoryTranslationGraphStore()


@pytest.fixture
def retry_settings():
    return RetrySettings(
        attempts=3,
        backoff_base_seconds=0.5,
        backoff_multiplier=2.0,
        backoff_max_seconds=8.0,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def gateway(fake_backend, retry_settings, sleeps):
    return TranslatorGateway(
        {"fake": fake_backend},
        retry=retry_settings,
        default_backend="fake",
        sleep=sleeps.append,
    )


@pytest.fixture
def make_service(locales, graph_store, gateway, content_store):
    """Factory building a TranslationService around the shared fixtures."""

    def _make(quota: int = 100, window_seconds: int = 60, max_concurrency: int = 4):
        return TranslationService(
            locales=locales,
            store=graph_store,
            gateway=gateway,
            rate_limiter=FixedWindowRateLimiter(quota, window_seconds),
            content_store=content_store,
            max_concurrency=max_concurrency,
        )

    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def clock():
    return FakeClock()
