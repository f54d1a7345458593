"""In-memory translation graph store.

Suitable for development, tests and single-process deployments. A single
store lock makes every check-then-write atomic.
"""

import threading
from typing import Dict, Optional, Tuple

from infrastructure.logging import get_module_logger
from modules.translations.domain import (
    AlreadyGrouped,
    Element,
    GroupMember,
    InvalidSourceLocale,
    Locale,
    LocaleTaken,
    TranslationGroup,
    UnknownGroup,
)
from modules.translations.store.base import members_after_removal

logger = get_module_logger()


class InMemoryTranslationGraphStore:
    """Thread-safe in-memory graph store."""

    def __init__(self):
        self._groups: Dict[int, Dict[Locale, GroupMember]] = {}
        self._element_index: Dict[Tuple[str, str], int] = {}
        self._next_trid = 1
        self._lock = threading.Lock()

    def _snapshot(self, trid: int) -> TranslationGroup:
        return TranslationGroup(trid=trid, members=self._groups[trid])

    def get_group(self, element: Element) -> Optional[TranslationGroup]:
        with self._lock:
            trid = self._element_index.get(element.key)
            if trid is None:
                return None
            return self._snapshot(trid)

    def get_group_by_id(self, trid: int) -> Optional[TranslationGroup]:
        with self._lock:
            if trid not in self._groups:
                return None
            return self._snapshot(trid)

    def create_group(self, origin: Element, origin_locale: Locale) -> TranslationGroup:
        with self._lock:
            existing = self._element_index.get(origin.key)
            if existing is not None:
                raise AlreadyGrouped(
                    f"Element {origin} already belongs to group {existing}",
                    details={"element": str(origin), "trid": existing},
                )
            trid = self._next_trid
            self._next_trid += 1
            self._groups[trid] = {origin_locale: GroupMember(origin, origin_locale)}
            self._element_index[origin.key] = trid
            logger.info(
                "translation_group_created",
                trid=trid,
                element=str(origin),
                locale=origin_locale,
            )
            return self._snapshot(trid)

    def add_member(
        self,
        trid: int,
        element: Element,
        locale: Locale,
        source_locale: Optional[Locale] = None,
    ) -> TranslationGroup:
        with self._lock:
            members = self._groups.get(trid)
            if members is None:
                raise UnknownGroup(f"Unknown group {trid}", details={"trid": trid})
            current = self._element_index.get(element.key)
            if current is not None and current != trid:
                raise AlreadyGrouped(
                    f"Element {element} already belongs to group {current}",
                    details={"element": str(element), "trid": current},
                )
            if locale in members:
                raise LocaleTaken(
                    f"Group {trid} already has a member for '{locale}'",
                    details={
                        "trid": trid,
                        "locale": locale,
                        "element": str(members[locale].element),
                    },
                )
            if current == trid:
                raise AlreadyGrouped(
                    f"Element {element} is already a member of group {trid}",
                    details={"element": str(element), "trid": trid},
                )
            if source_locale is not None and source_locale not in members:
                raise InvalidSourceLocale(
                    f"Source locale '{source_locale}' is not a member of group {trid}",
                    details={"trid": trid, "source_locale": source_locale},
                )
            if source_locale is None:
                # A second origin would break the single-origin rule
                source_locale = self._snapshot(trid).origin.locale

            members[locale] = GroupMember(element, locale, source_locale)
            self._element_index[element.key] = trid
            logger.info(
                "translation_member_added",
                trid=trid,
                element=str(element),
                locale=locale,
                source_locale=source_locale,
            )
            return self._snapshot(trid)

    def remove_member(self, trid: int, element: Element) -> Optional[TranslationGroup]:
        with self._lock:
            if trid not in self._groups:
                raise UnknownGroup(f"Unknown group {trid}", details={"trid": trid})
            remaining = members_after_removal(self._snapshot(trid), element)
            del self._element_index[element.key]
            if not remaining:
                del self._groups[trid]
                logger.info(
                    "translation_group_deleted", trid=trid, element=str(element)
                )
                return None
            self._groups[trid] = remaining
            logger.info(
                "translation_member_removed", trid=trid, element=str(element)
            )
            return self._snapshot(trid)
