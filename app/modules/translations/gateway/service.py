"""Translator gateway.

Single entry point for machine translation. Resolves the backend by name,
retries transient failures with exponential backoff, converts the final
outcome into typed errors and sanitizes every translated string.
"""

import time
from typing import Callable, Dict, Optional

from infrastructure.configuration import RetrySettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from modules.translations.domain import (
    BackendUnavailable,
    ConfigurationError,
    ContentRejected,
    TranslationsError,
    UnsupportedLocalePair,
)
from modules.translations.gateway.base import (
    CIRCUIT_BREAKER_OPEN,
    CONTENT_REJECTED,
    UNSUPPORTED_LOCALE_PAIR,
    TranslatorBackend,
)
from modules.translations.gateway.sanitizer import sanitize_translation

logger = get_module_logger()


class TranslatorGateway:
    """Retrying, sanitizing front for the active translator backends.

    Args:
        backends: Active backends keyed by name.
        retry: Retry policy for transient failures.
        default_backend: Backend used when a call names none.
        sleep: Delay function, injectable for tests.
    """

    def __init__(
        self,
        backends: Dict[str, TranslatorBackend],
        retry: Optional[RetrySettings] = None,
        default_backend: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._backends = dict(backends)
        self.retry = retry or RetrySettings()
        self.default_backend = default_backend
        self._sleep = sleep

    @property
    def backend_names(self):
        return sorted(self._backends)

    def resolve_backend(self, name: Optional[str] = None) -> TranslatorBackend:
        """Return the backend called ``name`` (or the default one).

        Raises:
            ConfigurationError: no active backend with that name.
        """
        name = name or self.default_backend
        backend = self._backends.get(name) if name else None
        if backend is None:
            raise ConfigurationError(
                f"Unknown translator backend: {name!r}",
                details={"backend": name, "available": self.backend_names},
            )
        return backend

    def translate(
        self,
        text: str,
        source_locale: str,
        target_locale: str,
        backend: Optional[str] = None,
    ) -> str:
        """Translate ``text`` and return sanitized output.

        Raises:
            ConfigurationError: unknown backend.
            BackendUnavailable: transient failure persisted through every
                attempt, or the backend circuit is open.
            UnsupportedLocalePair: permanent, never retried.
            ContentRejected: permanent, never retried.
        """
        translator = self.resolve_backend(backend)
        if not text:
            return ""

        attempts = self.retry.attempts
        result: Optional[OperationResult] = None
        for attempt in range(attempts):
            result = translator.translate(text, source_locale, target_locale)

            if result.is_success:
                if attempt:
                    logger.info(
                        "translation_succeeded_after_retry",
                        backend=translator.name,
                        attempt=attempt + 1,
                    )
                return sanitize_translation(result.data)

            if not result.is_transient:
                raise self._permanent_error(translator, result)

            if result.error_code == CIRCUIT_BREAKER_OPEN:
                raise BackendUnavailable(
                    result.message,
                    details={"backend": translator.name, "error_code": CIRCUIT_BREAKER_OPEN},
                )

            if attempt + 1 < attempts:
                delay = self.retry.delay_for(attempt)
                if result.retry_after:
                    delay = max(
                        delay, min(result.retry_after, self.retry.backoff_max_seconds)
                    )
                logger.warning(
                    "translation_attempt_failed",
                    backend=translator.name,
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    error_code=result.error_code,
                    error=result.message,
                    retry_in_seconds=delay,
                )
                self._sleep(delay)

        logger.error(
            "translation_retries_exhausted",
            backend=translator.name,
            attempts=attempts,
            error_code=result.error_code,
            error=result.message,
        )
        raise BackendUnavailable(
            f"{translator.name} unavailable after {attempts} attempts: {result.message}",
            details={"backend": translator.name, "error_code": result.error_code},
        )

    @staticmethod
    def _permanent_error(
        translator: TranslatorBackend, result: OperationResult
    ) -> TranslationsError:
        details = {"backend": translator.name, "error_code": result.error_code}
        if result.error_code == UNSUPPORTED_LOCALE_PAIR:
            return UnsupportedLocalePair(result.message, details=details)
        if result.error_code == CONTENT_REJECTED:
            return ContentRejected(result.message, details=details)
        logger.error(
            "translation_permanent_failure",
            backend=translator.name,
            error_code=result.error_code,
            error=result.message,
        )
        error = BackendUnavailable(result.message, details=details)
        error.transient = False
        return error
