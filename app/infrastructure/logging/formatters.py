"""Structlog processors for the translation engine.

Backend configuration dicts (API keys, bearer tokens) and whole source
texts can end up in log calls; these processors keep both out of the
rendered output.
"""

from typing import Any, Callable, Dict, FrozenSet, Optional

EventDict = Dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

REDACTED = "***REDACTED***"

# Key fragments matched case-insensitively against every key, nested ones included
SENSITIVE_PATTERNS: FrozenSet[str] = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "cookie",
        "bearer",
    }
)


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Stamp ``app_name`` and ``app_version`` on every entry."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: Optional[FrozenSet[str]] = None,
) -> Processor:
    """Replace values of sensitive keys with ``mask_value``.

    A key is sensitive when any pattern is a substring of its lowercased
    name. Dict values are walked so a logged backend config such as
    ``{"libretranslate": {"api_key": ...}}`` is masked too. ``None`` values
    are left alone.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def is_sensitive(key: Any) -> bool:
        lowered = str(key).lower()
        return any(pattern in lowered for pattern in patterns)

    def scrub(mapping: Dict[Any, Any]) -> Dict[Any, Any]:
        scrubbed = {}
        for key, value in mapping.items():
            if value is not None and is_sensitive(key):
                scrubbed[key] = mask_value
            elif isinstance(value, dict):
                scrubbed[key] = scrub(value)
            else:
                scrubbed[key] = value
        return scrubbed

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return scrub(event_dict)

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cut top-level string values longer than ``max_length`` characters."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
