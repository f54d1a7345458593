"""Group resolution and mutation.

All writes to the translation graph that originate from the engine go
through ``GroupMutator``. Discovery and mutation happen under a per-element
token and, once the group exists, the per-group token. Tokens are always
taken in that order (element keys sorted when more than one is needed) so
concurrent writers cannot deadlock.
"""

from contextlib import ExitStack
from dataclasses import dataclass
from typing import Callable, Optional

from infrastructure.logging import get_module_logger
from modules.translations.locks import KeyedLockRegistry
from modules.translations.domain import (
    AlreadyGrouped,
    Element,
    InvalidSourceLocale,
    JobStatus,
    Locale,
    TranslationGroup,
)
from modules.translations.store import TranslationGraphStore

logger = get_module_logger()


@dataclass(frozen=True)
class AttachOutcome:
    """Result of ``attach_translation``.

    ``status`` is SUCCEEDED when a new member was added and SKIPPED when the
    target locale was already present; ``element`` is the new or existing
    member element.
    """

    status: JobStatus
    element: Element
    trid: Optional[int]
    source_locale: Locale


class GroupMutator:
    """Serializes discovery and mutation of translation groups."""

    def __init__(
        self,
        store: TranslationGraphStore,
        locks: Optional[KeyedLockRegistry] = None,
    ):
        self.store = store
        self.locks = locks or KeyedLockRegistry()

    @staticmethod
    def _element_token(element: Element):
        return ("element",) + element.key

    @staticmethod
    def _group_token(trid: int):
        return ("trid", trid)

    def attach_translation(
        self,
        source: Element,
        source_locale: Locale,
        target_locale: Locale,
        produce: Callable[[], Element],
    ) -> AttachOutcome:
        """Attach a translation of ``source`` in ``target_locale``.

        ``produce`` is called at most once, and only when the target locale is
        not yet a member. It performs the actual translation and returns the
        new element. Exceptions from ``produce`` propagate and leave the
        graph untouched.

        ``source_locale`` is used only when ``source`` is not grouped yet;
        otherwise the source's locale inside its group wins.
        """
        with self.locks.hold(self._element_token(source)):
            group = self.store.get_group(source)

            if group is None:
                if target_locale == source_locale:
                    return AttachOutcome(JobStatus.SKIPPED, source, None, source_locale)
                new_element = produce()
                group = self._create(source, source_locale, new_element, target_locale)
                with self.locks.hold(self._group_token(group.trid)):
                    group = self._add(group.trid, new_element, target_locale, source_locale)
                return AttachOutcome(
                    JobStatus.SUCCEEDED, new_element, group.trid, source_locale
                )

            with self.locks.hold(self._group_token(group.trid)):
                # Re-read under the group token; the first read may be stale
                group = self.store.get_group_by_id(group.trid) or group
                group_locale = group.locale_of(source) or source_locale
                existing = group.member_for(target_locale)
                if existing is not None:
                    logger.debug(
                        "translation_already_present",
                        trid=group.trid,
                        source=str(source),
                        target_locale=target_locale,
                        element=str(existing.element),
                    )
                    return AttachOutcome(
                        JobStatus.SKIPPED, existing.element, group.trid, group_locale
                    )
                new_element = produce()
                group = self._add(group.trid, new_element, target_locale, group_locale)
                return AttachOutcome(
                    JobStatus.SUCCEEDED, new_element, group.trid, group_locale
                )

    def _create(
        self, source: Element, source_locale: Locale, element: Element, locale: Locale
    ) -> TranslationGroup:
        try:
            return self.store.create_group(source, source_locale)
        except Exception as e:
            logger.error(
                "translation_orphaned",
                source=str(source),
                element=str(element),
                locale=locale,
                error=str(e),
            )
            raise

    def _add(
        self, trid: int, element: Element, locale: Locale, source_locale: Locale
    ) -> TranslationGroup:
        try:
            return self.store.add_member(trid, element, locale, source_locale)
        except Exception as e:
            logger.error(
                "translation_orphaned",
                trid=trid,
                element=str(element),
                locale=locale,
                error=str(e),
            )
            raise

    def link(
        self,
        element: Element,
        locale: Locale,
        translation_of: Optional[Element] = None,
        source_locale: Optional[Locale] = None,
    ) -> TranslationGroup:
        """Explicitly link ``element`` as the ``locale`` member of a group.

        Without ``translation_of`` a new group is created with ``element`` as
        origin. Otherwise ``element`` joins the group of ``translation_of``;
        ``source_locale`` is the locale of ``translation_of`` and is required
        when that element is not grouped yet.

        Raises:
            AlreadyGrouped, LocaleTaken, InvalidSourceLocale: see the store.
        """
        if translation_of is None:
            with self.locks.hold(self._element_token(element)):
                return self.store.create_group(element, locale)

        if translation_of == element:
            raise AlreadyGrouped(
                f"Element {element} cannot be a translation of itself",
                details={"element": str(element)},
            )

        tokens = sorted([self._element_token(element), self._element_token(translation_of)])
        with ExitStack() as stack:
            for token in tokens:
                stack.enter_context(self.locks.hold(token))

            existing = self.store.get_group(element)
            if existing is not None:
                raise AlreadyGrouped(
                    f"Element {element} already belongs to group {existing.trid}",
                    details={"element": str(element), "trid": existing.trid},
                )

            group = self.store.get_group(translation_of)
            if group is None:
                if source_locale is None:
                    raise InvalidSourceLocale(
                        f"Locale of {translation_of} is required to create its group",
                        details={"element": str(translation_of)},
                    )
                group = self.store.create_group(translation_of, source_locale)

            with self.locks.hold(self._group_token(group.trid)):
                group = self.store.get_group_by_id(group.trid) or group
                return self.store.add_member(
                    group.trid, element, locale, group.locale_of(translation_of)
                )

    def unlink(self, element: Element) -> Optional[TranslationGroup]:
        """Remove ``element`` from its group.

        Returns the updated group, or None when the element was ungrouped or
        its group was deleted.
        """
        with self.locks.hold(self._element_token(element)):
            group = self.store.get_group(element)
            if group is None:
                return None
            with self.locks.hold(self._group_token(group.trid)):
                return self.store.remove_member(group.trid, element)
