"""Core engine: resolver, orchestrator and service facade."""

from modules.translations.locks import KeyedLockRegistry
from modules.translations.core.orchestration import BatchOrchestrator
from modules.translations.core.resolver import AttachOutcome, GroupMutator
from modules.translations.core.service import (
    TranslationService,
    create_translation_service,
)

__all__ = [
    "AttachOutcome",
    "BatchOrchestrator",
    "GroupMutator",
    "KeyedLockRegistry",
    "TranslationService",
    "create_translation_service",
]
