"""Domain types and errors for the translations module."""

from modules.translations.domain.errors import (
    AlreadyGrouped,
    BackendUnavailable,
    Cancelled,
    ConfigurationError,
    ContentRejected,
    ElementNotFound,
    InvalidLocale,
    InvalidSourceLocale,
    LocaleTaken,
    RateLimited,
    TranslationsError,
    UnknownGroup,
    UnsupportedLocalePair,
)
from modules.translations.domain.models import (
    BatchResult,
    Element,
    GroupMember,
    JobResult,
    JobStatus,
    Locale,
    SiblingInfo,
    TranslationGroup,
    TranslationJob,
    TranslationView,
)

__all__ = [
    "AlreadyGrouped",
    "BackendUnavailable",
    "BatchResult",
    "Cancelled",
    "ConfigurationError",
    "ContentRejected",
    "Element",
    "ElementNotFound",
    "GroupMember",
    "InvalidLocale",
    "InvalidSourceLocale",
    "JobResult",
    "JobStatus",
    "Locale",
    "LocaleTaken",
    "RateLimited",
    "SiblingInfo",
    "TranslationGroup",
    "TranslationJob",
    "TranslationView",
    "TranslationsError",
    "UnknownGroup",
    "UnsupportedLocalePair",
]
