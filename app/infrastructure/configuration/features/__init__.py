"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.translations import (
    TranslationsFeatureSettings,
)

__all__ = [
    "TranslationsFeatureSettings",
]
