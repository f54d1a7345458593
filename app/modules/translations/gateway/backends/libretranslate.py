"""LibreTranslate HTTP backend.

Talks to a LibreTranslate compatible ``/translate`` endpoint::

    POST {url}/translate
    {"q": "...", "source": "en", "target": "es", "format": "html", "api_key": "..."}
    -> {"translatedText": "..."}
"""

from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from modules.translations.gateway.base import (
    CONTENT_REJECTED,
    UNSUPPORTED_LOCALE_PAIR,
    TranslatorBackend,
)
from modules.translations.gateway.registry import register_backend

logger = get_module_logger()

DEFAULT_TIMEOUT_SECONDS = 30


class LibreTranslateResponseError(Exception):
    """The endpoint answered 200 but without a usable translation."""


@register_backend("libretranslate")
class LibreTranslateBackend(TranslatorBackend):
    """Backend for LibreTranslate servers.

    Config:
        url: Base URL of the server (required).
        api_key: Optional API key.
        timeout: Request timeout in seconds (default 30).
        max_text_length / supported_locales: capability overrides.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        circuit_breaker=None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(config=config, circuit_breaker=circuit_breaker)
        url = self.config.get("url")
        if not url:
            raise ValueError("libretranslate backend requires 'url' in its config")
        self.url = url.rstrip("/")
        self.api_key = self.config.get("api_key")
        self.timeout = float(self.config.get("timeout", DEFAULT_TIMEOUT_SECONDS))
        self.session = session or requests.Session()

    def _translate_impl(self, text: str, source_locale: str, target_locale: str) -> str:
        payload = {
            "q": text,
            "source": _to_backend_code(source_locale),
            "target": _to_backend_code(target_locale),
            "format": "html",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        response = self.session.post(
            f"{self.url}/translate", json=payload, timeout=self.timeout
        )
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError as e:
            raise LibreTranslateResponseError("Response is not valid JSON") from e
        translated = body.get("translatedText") if isinstance(body, dict) else None
        if not isinstance(translated, str):
            raise LibreTranslateResponseError("Response has no translatedText")
        return translated

    def classify_error(self, exc: Exception) -> OperationResult:
        if isinstance(exc, requests.HTTPError) and exc.response is not None:
            status_code = exc.response.status_code
            detail = _error_detail(exc.response)
            if status_code == 400 and "not supported" in detail.lower():
                return OperationResult.permanent_error(
                    f"libretranslate: {detail}", error_code=UNSUPPORTED_LOCALE_PAIR
                )
            if status_code == 400 and "character limit" in detail.lower():
                return OperationResult.permanent_error(
                    f"libretranslate: {detail}", error_code=CONTENT_REJECTED
                )
        if isinstance(exc, requests.RequestException):
            return classify_http_error(exc, service="libretranslate")
        if isinstance(exc, LibreTranslateResponseError):
            return OperationResult.transient_error(
                f"libretranslate: {exc}", error_code="BAD_RESPONSE"
            )
        logger.warning(
            "libretranslate_unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return OperationResult.transient_error(f"libretranslate: {exc}")


def _to_backend_code(locale: str) -> str:
    """LibreTranslate uses bare language codes except for a few variants."""
    if locale in ("zh-Hans", "zh-CN"):
        return "zh"
    if locale in ("zh-Hant", "zh-TW"):
        return "zt"
    if locale == "pt-BR":
        return "pb"
    return locale.split("-", 1)[0]


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or ""
    if isinstance(body, dict):
        return str(body.get("error", ""))
    return ""
