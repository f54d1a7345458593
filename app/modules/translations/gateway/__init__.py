"""Translator gateway: pluggable backends behind retry, circuit breaking and sanitization."""

from modules.translations.gateway.base import BackendCapabilities, TranslatorBackend
from modules.translations.gateway.registry import (
    activate_backends,
    register_backend,
)
from modules.translations.gateway.sanitizer import sanitize_translation
from modules.translations.gateway.service import TranslatorGateway

__all__ = [
    "BackendCapabilities",
    "TranslatorBackend",
    "TranslatorGateway",
    "activate_backends",
    "register_backend",
    "sanitize_translation",
]
