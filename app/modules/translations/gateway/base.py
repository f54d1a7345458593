"""Translator backend abstract class and capabilities.

Backends are pluggable machine-translation adapters. Each one:

- implements ``_translate_impl`` and raises on failure;
- classifies its own exceptions into an ``OperationResult`` through
  ``classify_error`` (transient vs permanent, with an error code);
- is protected by an optional per-backend circuit breaker.

``translate`` never raises for backend failures. It returns an
``OperationResult`` whose ``data`` holds the raw translated text on success,
so the gateway can decide on retries from the status alone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience import CircuitBreaker, CircuitBreakerOpenError

logger = get_module_logger()

UNSUPPORTED_LOCALE_PAIR = "UNSUPPORTED_LOCALE_PAIR"
CONTENT_REJECTED = "CONTENT_REJECTED"
CIRCUIT_BREAKER_OPEN = "CIRCUIT_BREAKER_OPEN"


@dataclass(frozen=True)
class BackendCapabilities:
    """What a backend accepts.

    Attributes:
        max_text_length: Longest input accepted, None for unlimited.
        supported_locales: Locales the backend can translate between, None for any.
    """

    max_text_length: Optional[int] = None
    supported_locales: Optional[FrozenSet[str]] = None

    def supports(self, source_locale: str, target_locale: str) -> bool:
        if self.supported_locales is None:
            return True
        return (
            source_locale in self.supported_locales
            and target_locale in self.supported_locales
        )

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], default: "BackendCapabilities"
    ) -> "BackendCapabilities":
        """Overlay ``max_text_length`` / ``supported_locales`` from backend config."""
        max_len = config.get("max_text_length", default.max_text_length)
        locales = config.get("supported_locales")
        return cls(
            max_text_length=int(max_len) if max_len is not None else None,
            supported_locales=(
                frozenset(locales) if locales is not None else default.supported_locales
            ),
        )


class TranslatorBackend(ABC):
    """Abstract Base Class for translator backends.

    Args:
        config: Backend configuration block from ``TRANSLATION_BACKENDS``.
        circuit_breaker: Breaker guarding calls, None to disable.
    """

    name: str = "backend"

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.config = dict(config or {})
        self._circuit_breaker = None
        if circuit_breaker is not None:
            self.attach_circuit_breaker(circuit_breaker)
        self._capabilities = BackendCapabilities.from_config(
            self.config, self.default_capabilities()
        )

    def default_capabilities(self) -> BackendCapabilities:
        """Capabilities before configuration overrides."""
        return BackendCapabilities()

    @property
    def capabilities(self) -> BackendCapabilities:
        return self._capabilities

    def attach_circuit_breaker(self, breaker: CircuitBreaker) -> None:
        """Guard this backend with ``breaker``.

        The breaker only counts failures this backend classifies as
        transient, permanent rejections leave it untouched.
        """
        breaker.counts_as_failure = self._is_backend_failure
        self._circuit_breaker = breaker

    @property
    def circuit_breaker(self) -> Optional[CircuitBreaker]:
        return self._circuit_breaker

    def classify_error(self, exc: Exception) -> OperationResult:
        """Classify backend-specific exceptions into OperationResult.

        Default implementation: treat all as transient errors.
        """
        return OperationResult.transient_error(str(exc))

    def _is_backend_failure(self, exc: Exception) -> bool:
        return self.classify_error(exc).is_transient

    def translate(
        self, text: str, source_locale: str, target_locale: str
    ) -> OperationResult:
        """Translate ``text`` with capability checks and circuit breaker protection.

        Subclasses should implement ``_translate_impl`` instead of this method.
        """
        caps = self.capabilities
        if not caps.supports(source_locale, target_locale):
            return OperationResult.permanent_error(
                f"{self.name} does not support {source_locale} -> {target_locale}",
                error_code=UNSUPPORTED_LOCALE_PAIR,
            )
        if caps.max_text_length is not None and len(text) > caps.max_text_length:
            return OperationResult.permanent_error(
                f"Text of {len(text)} characters exceeds {self.name} limit "
                f"of {caps.max_text_length}",
                error_code=CONTENT_REJECTED,
            )

        try:
            if self._circuit_breaker:
                translated = self._circuit_breaker.call(
                    self._translate_impl, text, source_locale, target_locale
                )
            else:
                translated = self._translate_impl(text, source_locale, target_locale)
        except CircuitBreakerOpenError as e:
            logger.warning(
                "circuit_breaker_rejected_translate",
                backend=self.name,
                source_locale=source_locale,
                target_locale=target_locale,
            )
            return OperationResult.transient_error(
                message=str(e),
                error_code=CIRCUIT_BREAKER_OPEN,
                retry_after=e.retry_in_seconds,
            )
        except Exception as e:  # pylint: disable=broad-except
            return self.classify_error(e)

        return OperationResult.success(data=translated)

    @abstractmethod
    def _translate_impl(self, text: str, source_locale: str, target_locale: str) -> str:
        """Implementation of translate (no circuit breaker wrapper).

        Returns the translated text or raises. Raised exceptions are passed
        to ``classify_error``.
        """
