"""Unit tests for infrastructure.logging.formatters module."""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestAddAppInfo:
    def test_adds_name_and_version(self):
        processor = add_app_info("translation-engine", "1.2.3")

        result = processor(None, "info", {"event": "batch_started"})

        assert result == {
            "event": "batch_started",
            "app_name": "translation-engine",
            "app_version": "1.2.3",
        }

    def test_default_version(self):
        result = add_app_info("translation-engine")(None, "info", {"event": "x"})

        assert result["app_version"] == "unknown"


@pytest.mark.unit
class TestMaskSensitiveData:
    def test_masks_backend_credentials(self):
        processor = mask_sensitive_data()
        event_dict = {
            "event": "backend_configured",
            "api_key": "abc123",
            "Authorization": "Bearer xyz",
            "backend": "libretranslate",
        }

        result = processor(None, "info", event_dict)

        assert result["api_key"] == "***REDACTED***"
        assert result["Authorization"] == "***REDACTED***"
        assert result["backend"] == "libretranslate"

    def test_none_values_are_kept(self):
        result = mask_sensitive_data()(None, "info", {"token": None})

        assert result["token"] is None

    def test_substring_match(self):
        result = mask_sensitive_data()(None, "info", {"backend_api_key_hint": "k"})

        assert result["backend_api_key_hint"] == "***REDACTED***"

    def test_custom_mask_and_additional_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"source_text"})
        )

        result = processor(None, "info", {"source_text": "Hello", "locale": "es"})

        assert result == {"source_text": "[hidden]", "locale": "es"}

    def test_patterns_cover_common_secrets(self):
        assert {"password", "token", "api_key", "secret"} <= SENSITIVE_PATTERNS


@pytest.mark.unit
class TestTruncateLargeValues:
    def test_truncates_long_strings(self):
        processor = truncate_large_values(max_length=10)

        result = processor(None, "info", {"body": "x" * 25})

        assert result["body"] == "x" * 10 + "...[truncated, 25 chars total]"

    def test_short_strings_and_other_types_untouched(self):
        processor = truncate_large_values(max_length=10)
        event_dict = {"body": "short", "count": 12345678901234, "items": ["a" * 50]}

        result = processor(None, "info", dict(event_dict))

        assert result == event_dict


@pytest.mark.unit
class TestMaskNestedData:
    def test_masks_keys_inside_nested_dicts(self):
        processor = mask_sensitive_data()
        event_dict = {
            "event": "backends_activated",
            "backends": {"libretranslate": {"url": "http://lt", "api_key": "k"}},
        }

        result = processor(None, "info", event_dict)

        assert result["backends"] == {
            "libretranslate": {"url": "http://lt", "api_key": "***REDACTED***"}
        }
        assert event_dict["backends"]["libretranslate"]["api_key"] == "k"
