"""Translation service: the external interface of the engine.

Wires the locale registry, graph store, gateway, rate limiter, resolver and
orchestrator together and exposes the operations a transport layer (REST
controller, CLI, background task) calls.
"""

import threading
from typing import Iterable, List, Optional, Sequence, Tuple

from infrastructure.logging import get_module_logger
from modules.translations.content import ContentStore
from modules.translations.core.orchestration import BatchOrchestrator
from modules.translations.core.resolver import GroupMutator
from modules.translations.domain import (
    BatchResult,
    Element,
    ElementNotFound,
    JobResult,
    Locale,
    SiblingInfo,
    TranslationGroup,
    TranslationJob,
    TranslationView,
)
from modules.translations.gateway import TranslatorGateway, activate_backends
from modules.translations.locales import LocaleRegistry
from modules.translations.rate_limiter import FixedWindowRateLimiter
from modules.translations.store import TranslationGraphStore, build_store

logger = get_module_logger()

DEFAULT_ACTOR = "system"


class TranslationService:
    """Facade over the translation engine."""

    def __init__(
        self,
        locales: LocaleRegistry,
        store: TranslationGraphStore,
        gateway: TranslatorGateway,
        rate_limiter: FixedWindowRateLimiter,
        content_store: ContentStore,
        max_concurrency: int = 4,
        batch_timeout: Optional[float] = None,
    ):
        self.locales = locales
        self.store = store
        self.gateway = gateway
        self.rate_limiter = rate_limiter
        self.content_store = content_store
        self.mutator = GroupMutator(store)
        self.orchestrator = BatchOrchestrator(
            mutator=self.mutator,
            gateway=gateway,
            rate_limiter=rate_limiter,
            locales=locales,
            content_store=content_store,
            max_concurrency=max_concurrency,
            default_timeout=batch_timeout,
        )

    def get_translation_view(self, element: Element) -> TranslationView:
        """Describe ``element`` and its siblings in every locale of its group."""
        group = self.store.get_group(element)
        if group is None:
            content = self.content_store.get_content(element)
            return TranslationView(
                element=element,
                current_locale=content.locale or self.locales.default_locale,
                trid=None,
                siblings={},
            )

        siblings = {}
        for locale, member in group.members.items():
            try:
                title, permalink, status = self.content_store.describe(member.element)
            except ElementNotFound:
                logger.warning(
                    "translation_sibling_missing",
                    trid=group.trid,
                    element=str(member.element),
                    locale=locale,
                )
                title, permalink, status = "", None, "missing"
            siblings[locale] = SiblingInfo(
                element=member.element,
                title=title,
                permalink=permalink,
                status=status,
            )
        return TranslationView(
            element=element,
            current_locale=group.locale_of(element),
            trid=group.trid,
            siblings=siblings,
        )

    def request_translation(
        self,
        source: Element,
        target_locales: Iterable[Locale],
        backend: Optional[str] = None,
        actor: str = DEFAULT_ACTOR,
    ) -> List[JobResult]:
        """Translate one element into several locales.

        Duplicate target locales are collapsed, keeping their first position.
        """
        targets = list(dict.fromkeys(target_locales))
        jobs = [
            TranslationJob(source=source, target_locale=locale, actor=actor, backend=backend)
            for locale in targets
        ]
        return self.orchestrator.run_batch(jobs, actor).results

    def request_batch_translation(
        self,
        items: Sequence[Tuple[Element, Locale]],
        actor: str = DEFAULT_ACTOR,
        backend: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> BatchResult:
        """Run a batch of ``(source element, target locale)`` items."""
        jobs = [
            TranslationJob(source=source, target_locale=locale, actor=actor, backend=backend)
            for source, locale in items
        ]
        return self.orchestrator.run_batch(
            jobs, actor, cancel_event=cancel_event, timeout=timeout
        )

    def link_translation(
        self,
        element: Element,
        locale: Locale,
        translation_of: Optional[Element] = None,
    ) -> TranslationGroup:
        """Record ``element`` as the ``locale`` version of ``translation_of``.

        Without ``translation_of`` the element becomes the origin of a new
        group.
        """
        locale = self.locales.require(locale)
        source_locale = None
        if translation_of is not None:
            source_locale = self.orchestrator.source_locale_of(translation_of)
        group = self.mutator.link(
            element, locale, translation_of=translation_of, source_locale=source_locale
        )
        logger.info(
            "translation_linked",
            element=str(element),
            locale=locale,
            translation_of=str(translation_of) if translation_of else None,
            trid=group.trid,
        )
        return group

    def remove_element(self, element: Element) -> Optional[TranslationGroup]:
        """Detach ``element`` from its group, e.g. when the host deletes it."""
        group = self.mutator.unlink(element)
        logger.info(
            "translation_element_removed",
            element=str(element),
            trid=group.trid if group else None,
        )
        return group


def create_translation_service(
    settings,
    content_store: ContentStore,
    store: Optional[TranslationGraphStore] = None,
) -> TranslationService:
    """Build a service from the application ``Settings``.

    Args:
        settings: ``infrastructure.configuration.Settings`` instance.
        content_store: Host content collaborator.
        store: Graph store override; built from settings when omitted.
    """
    cfg = settings.translations
    locales = LocaleRegistry(cfg.active_locales, default_locale=cfg.default_locale)
    if store is None:
        store = build_store(cfg.store_backend, cfg.sqlite_path)
    gateway = TranslatorGateway(
        activate_backends(cfg),
        retry=settings.retry,
        default_backend=cfg.default_backend,
    )
    rate_limiter = FixedWindowRateLimiter(
        quota=settings.rate_limit.quota,
        window_seconds=settings.rate_limit.window_seconds,
    )
    logger.info(
        "translation_service_created",
        locales=sorted(locales.active_locales()),
        backends=gateway.backend_names,
        store=type(store).__name__,
        max_concurrency=cfg.max_concurrency,
    )
    return TranslationService(
        locales=locales,
        store=store,
        gateway=gateway,
        rate_limiter=rate_limiter,
        content_store=content_store,
        max_concurrency=cfg.max_concurrency,
        batch_timeout=cfg.batch_timeout_seconds,
    )
