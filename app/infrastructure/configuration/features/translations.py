"""Translations feature settings."""

import json
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import NoDecode
import structlog

from infrastructure.configuration.base import FeatureSettings

logger = structlog.stdlib.get_logger().bind(component="config.translations")


class TranslationsFeatureSettings(FeatureSettings):
    """Configuration for the translation-group engine and its backends.

    Environment Variables:
        TRANSLATION_MAX_CONCURRENCY: Jobs in flight at once per batch
        TRANSLATION_ACTIVE_LOCALES: Comma separated list or JSON array of locale codes
        TRANSLATION_DEFAULT_LOCALE: Locale assumed for ungrouped content without one
        TRANSLATION_DEFAULT_BACKEND: Backend used when a request names none
        TRANSLATION_BACKENDS: JSON dict of backend configurations
        TRANSLATION_BATCH_TIMEOUT_SECONDS: Optional wall-clock limit per batch
        TRANSLATION_STORE_BACKEND: Graph store type ('memory' or 'sqlite')
        TRANSLATION_SQLITE_PATH: Database file for the sqlite graph store
        CIRCUIT_BREAKER_ENABLED: Enable circuit breaker protection per backend
        CIRCUIT_BREAKER_FAILURE_THRESHOLD: Failures before opening circuit
        CIRCUIT_BREAKER_TIMEOUT_SECONDS: Recovery attempt timeout
        CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS: Max calls in half-open state

    Backends Configuration (TRANSLATION_BACKENDS):
        Schema:
            {
                "pseudo": {"enabled": true},
                "libretranslate": {
                    "enabled": true,
                    "url": "https://translate.example.org",
                    "api_key": "...",
                    "timeout": 30,
                    "max_text_length": 5000,
                    "supported_locales": ["en", "es", "fr"]
                }
            }

        Validation:
            - Disabled backends (enabled=False) are not activated
            - The default backend must be enabled when backends are configured

    Example:
        ```python
        from infrastructure.configuration import settings

        workers = settings.translations.max_concurrency
        locales = settings.translations.active_locales
        ```
    """

    max_concurrency: int = Field(
        default=4,
        ge=1,
        alias="TRANSLATION_MAX_CONCURRENCY",
        description="Maximum number of jobs in flight at once within one batch",
    )
    active_locales: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["en", "es", "fr", "de"],
        alias="TRANSLATION_ACTIVE_LOCALES",
        description="Locale codes accepted by the locale registry",
    )
    default_locale: str = Field(
        default="en",
        alias="TRANSLATION_DEFAULT_LOCALE",
        description="Locale assumed for ungrouped content that reports none",
    )
    default_backend: str = Field(
        default="pseudo",
        alias="TRANSLATION_DEFAULT_BACKEND",
        description="Translator backend used when a request does not name one",
    )
    backends: dict[str, dict] = Field(
        default_factory=lambda: {"pseudo": {"enabled": True}},
        alias="TRANSLATION_BACKENDS",
        description="Per-backend configuration (enable/disable, endpoints, limits)",
    )
    batch_timeout_seconds: Optional[float] = Field(
        default=None,
        alias="TRANSLATION_BATCH_TIMEOUT_SECONDS",
        description="Wall-clock limit after which undispatched jobs are cancelled",
    )
    store_backend: str = Field(
        default="memory",
        alias="TRANSLATION_STORE_BACKEND",
        description="Graph store backend: 'memory' or 'sqlite'",
    )
    sqlite_path: str = Field(
        default="translations.db",
        alias="TRANSLATION_SQLITE_PATH",
        description="Database file used by the sqlite graph store",
    )

    # Circuit breaker configuration
    circuit_breaker_enabled: bool = Field(
        default=True,
        alias="CIRCUIT_BREAKER_ENABLED",
        description="Enable circuit breaker for translator backends",
    )
    circuit_breaker_failure_threshold: int = Field(
        default=5,
        alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD",
        description="Consecutive failures before opening circuit",
    )
    circuit_breaker_timeout_seconds: int = Field(
        default=60,
        alias="CIRCUIT_BREAKER_TIMEOUT_SECONDS",
        description="Seconds before attempting recovery (HALF_OPEN state)",
    )
    circuit_breaker_half_open_max_calls: int = Field(
        default=3,
        alias="CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS",
        description="Max concurrent requests in HALF_OPEN state",
    )

    @field_validator("active_locales", mode="before")
    @classmethod
    def _parse_locales(cls, v: Optional[Any]) -> Any:
        """Parse TRANSLATION_ACTIVE_LOCALES from a comma list, JSON array or list."""
        if v is None:
            return []
        if isinstance(v, (list, tuple, set, frozenset)):
            return [str(code).strip() for code in v if str(code).strip()]
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except (json.JSONDecodeError, ValueError) as e:
                    raise ValueError(
                        f"Invalid TRANSLATION_ACTIVE_LOCALES JSON: {e}"
                    ) from e
                return [str(code).strip() for code in parsed if str(code).strip()]
            return [code.strip() for code in s.split(",") if code.strip()]
        raise ValueError("TRANSLATION_ACTIVE_LOCALES must be a list or a string")

    @field_validator("backends", mode="before")
    @classmethod
    def _parse_backends(cls, v: Optional[Any]) -> Any:
        """Parse TRANSLATION_BACKENDS from JSON string or dict."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return v
        if isinstance(v, str):
            s = v.strip()
            if (s.startswith("'") and s.endswith("'")) or (
                s.startswith('"') and s.endswith('"')
            ):
                s = s[1:-1]
            try:
                parsed = json.loads(s) if s else {}
                return parsed
            except (json.JSONDecodeError, ValueError) as e:
                raise ValueError(
                    f"Invalid TRANSLATION_BACKENDS JSON: {e} (value: {s[:80]}...)"
                ) from e
        raise ValueError("TRANSLATION_BACKENDS must be a JSON string or a mapping")

    @field_validator("store_backend", mode="after")
    @classmethod
    def _validate_store_backend(cls, v: str) -> str:
        value = v.strip().lower()
        if value not in ("memory", "sqlite"):
            raise ValueError(
                f"TRANSLATION_STORE_BACKEND must be 'memory' or 'sqlite', got '{v}'"
            )
        return value

    @model_validator(mode="after")
    def _validate_defaults(self) -> "TranslationsFeatureSettings":
        if self.default_locale not in self.active_locales:
            raise ValueError(
                f"TRANSLATION_DEFAULT_LOCALE '{self.default_locale}' is not in "
                f"TRANSLATION_ACTIVE_LOCALES"
            )

        enabled = self.enabled_backends()
        if not enabled:
            logger.warning("no_enabled_backends_configured")
        elif self.default_backend not in enabled:
            raise ValueError(
                f"TRANSLATION_DEFAULT_BACKEND '{self.default_backend}' is not an "
                f"enabled backend. Enabled: {sorted(enabled)}"
            )
        return self

    def enabled_backends(self) -> Dict[str, dict]:
        """Return configuration for every backend not explicitly disabled."""
        return {
            name: cfg
            for name, cfg in self.backends.items()
            if isinstance(cfg, dict) and cfg.get("enabled", True)
        }
