"""Unit tests for the translator gateway.

Tests cover:
- Backend resolution and misconfiguration
- Retry with exponential backoff on transient failures
- Permanent failures surfacing without retry
- Circuit breaker integration
- Capability checks and output sanitization
"""

import pytest

from infrastructure.configuration import RetrySettings
from infrastructure.resilience import CircuitBreaker, CircuitState
from modules.translations.domain import (
    BackendUnavailable,
    ConfigurationError,
    ContentRejected,
    UnsupportedLocalePair,
)
from modules.translations.gateway import TranslatorGateway
from tests.fakes import (
    FakeBackend,
    FakeRejection,
    FakeTransientError,
    FakeUnsupportedPair,
)

pytestmark = pytest.mark.unit


class TestBackendResolution:
    def test_default_backend_is_used(self, gateway, fake_backend):
        assert gateway.translate("Hello", "en", "es") == "es:Hello"
        assert fake_backend.calls == [("Hello", "en", "es")]

    def test_named_backend_is_used(self, gateway):
        assert gateway.translate("Hello", "en", "fr", backend="fake") == "fr:Hello"

    def test_unknown_backend_raises_configuration_error(self, gateway):
        with pytest.raises(ConfigurationError) as exc_info:
            gateway.translate("Hello", "en", "es", backend="nope")

        assert exc_info.value.details["available"] == ["fake"]

    def test_no_default_backend(self, fake_backend):
        gateway = TranslatorGateway({"fake": fake_backend})

        with pytest.raises(ConfigurationError):
            gateway.translate("Hello", "en", "es")

    def test_empty_text_skips_backend(self, gateway, fake_backend):
        assert gateway.translate("", "en", "es") == ""
        assert fake_backend.calls == []


class TestRetry:
    def test_transient_failure_is_retried_with_backoff(self, gateway, fake_backend, sleeps):
        fake_backend.failures["Hello"] = [FakeTransientError("down"), FakeTransientError("down")]

        assert gateway.translate("Hello", "en", "es") == "es:Hello"
        assert len(fake_backend.calls) == 3
        assert sleeps == [0.5, 1.0]

    def test_exhausted_retries_raise_backend_unavailable(self, gateway, fake_backend, sleeps):
        fake_backend.failures["Hello"] = FakeTransientError("down")

        with pytest.raises(BackendUnavailable) as exc_info:
            gateway.translate("Hello", "en", "es")

        assert exc_info.value.transient is True
        assert exc_info.value.details["error_code"] == "FAKE_TRANSIENT"
        assert len(fake_backend.calls) == 3
        assert len(sleeps) == 2

    def test_delay_is_capped(self, fake_backend, sleeps):
        retry = RetrySettings(
            attempts=5,
            backoff_base_seconds=1.0,
            backoff_multiplier=10.0,
            backoff_max_seconds=5.0,
        )
        gateway = TranslatorGateway(
            {"fake": fake_backend}, retry=retry, default_backend="fake", sleep=sleeps.append
        )
        fake_backend.failures["Hello"] = FakeTransientError("down")

        with pytest.raises(BackendUnavailable):
            gateway.translate("Hello", "en", "es")

        assert sleeps == [1.0, 5.0, 5.0, 5.0]

    def test_content_rejected_is_not_retried(self, gateway, fake_backend, sleeps):
        fake_backend.failures["Hello"] = FakeRejection("too long")

        with pytest.raises(ContentRejected) as exc_info:
            gateway.translate("Hello", "en", "es")

        assert exc_info.value.transient is False
        assert len(fake_backend.calls) == 1
        assert sleeps == []

    def test_unsupported_pair_is_not_retried(self, gateway, fake_backend):
        fake_backend.failures["Hello"] = FakeUnsupportedPair("no")

        with pytest.raises(UnsupportedLocalePair):
            gateway.translate("Hello", "en", "es")

        assert len(fake_backend.calls) == 1


class TestCircuitBreaker:
    def test_open_circuit_fails_fast(self, clock, sleeps):
        breaker = CircuitBreaker("fake", failure_threshold=2, timeout_seconds=30, clock=clock)
        backend = FakeBackend(circuit_breaker=breaker)
        backend.failures["Hello"] = FakeTransientError("down")
        gateway = TranslatorGateway(
            {"fake": backend},
            retry=RetrySettings(attempts=5),
            default_backend="fake",
            sleep=sleeps.append,
        )

        with pytest.raises(BackendUnavailable) as exc_info:
            gateway.translate("Hello", "en", "es")

        assert breaker.state == CircuitState.OPEN
        assert exc_info.value.details["error_code"] == "CIRCUIT_BREAKER_OPEN"
        assert len(backend.calls) == 2

    def test_permanent_rejections_do_not_open_circuit(self, clock):
        breaker = CircuitBreaker("fake", failure_threshold=2, clock=clock)
        backend = FakeBackend(circuit_breaker=breaker)
        backend.failures["Hello"] = FakeRejection("too long")
        gateway = TranslatorGateway({"fake": backend}, default_backend="fake")

        for _ in range(3):
            with pytest.raises(ContentRejected):
                gateway.translate("Hello", "en", "es")

        assert breaker.state == CircuitState.CLOSED


class TestCapabilities:
    def test_text_longer_than_limit_is_rejected_without_call(self, sleeps):
        backend = FakeBackend(config={"max_text_length": 5})
        gateway = TranslatorGateway({"fake": backend}, default_backend="fake")

        with pytest.raises(ContentRejected):
            gateway.translate("Too long text", "en", "es")

        assert backend.calls == []

    def test_unsupported_locales_are_rejected_without_call(self):
        backend = FakeBackend(config={"supported_locales": ["en", "fr"]})
        gateway = TranslatorGateway({"fake": backend}, default_backend="fake")

        with pytest.raises(UnsupportedLocalePair):
            gateway.translate("Hello", "en", "es")

        assert backend.calls == []
        assert gateway.translate("Hello", "en", "fr") == "fr:Hello"


class TestSanitization:
    def test_output_is_sanitized(self, gateway, fake_backend):
        result = gateway.translate("<p>Hi</p><script>x()</script>", "en", "es")

        assert result == "es:<p>Hi</p>"
