"""Translation-group consistency and batch orchestration engine.

Keeps elements and their translation groups consistent under concurrent
writers and drives batch machine translation through pluggable backends
with per-job isolation, idempotency and per-actor rate limiting.

Example:
    from infrastructure.configuration import settings
    from modules.translations import create_translation_service
    from modules.translations.content import InMemoryContentStore

    service = create_translation_service(settings, InMemoryContentStore())
"""

from modules.translations.core import TranslationService, create_translation_service

__all__ = ["TranslationService", "create_translation_service"]
