"""Exception hierarchy for the translations module.

Every error carries a machine ``code`` that ends up in per-job results and a
``transient`` flag telling callers whether a later retry may succeed.
"""

from typing import Any, Dict, Optional


class TranslationsError(Exception):
    """Base error with optional code and details."""

    code = "INTERNAL_ERROR"
    transient = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class AlreadyGrouped(TranslationsError):
    """The element already belongs to a translation group."""

    code = "ALREADY_GROUPED"


class LocaleTaken(TranslationsError):
    """The group already has a member for the locale."""

    code = "LOCALE_TAKEN"


class UnknownGroup(TranslationsError):
    code = "UNKNOWN_GROUP"


class InvalidSourceLocale(TranslationsError):
    """The declared source locale is not a member of the group."""

    code = "INVALID_SOURCE_LOCALE"


class ElementNotFound(TranslationsError):
    code = "ELEMENT_NOT_FOUND"


class InvalidLocale(TranslationsError):
    """Locale code is malformed or not in the active set."""

    code = "INVALID_LOCALE"


class BackendUnavailable(TranslationsError):
    """Translator backend failed transiently (after retries) or its circuit is open."""

    code = "BACKEND_UNAVAILABLE"
    transient = True


class UnsupportedLocalePair(TranslationsError):
    code = "UNSUPPORTED_LOCALE_PAIR"


class ContentRejected(TranslationsError):
    """Backend refused the content (too long, policy)."""

    code = "CONTENT_REJECTED"


class RateLimited(TranslationsError):
    """Actor exhausted the quota for the current window."""

    code = "RATE_LIMITED"
    transient = True


class Cancelled(TranslationsError):
    code = "CANCELLED"
    transient = True


class ConfigurationError(TranslationsError):
    """Misconfiguration that fails a whole call (e.g. unknown backend)."""

    code = "CONFIGURATION_ERROR"
