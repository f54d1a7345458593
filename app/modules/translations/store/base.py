"""Translation graph store contract."""

from typing import Dict, Optional, Protocol, runtime_checkable

from modules.translations.domain import (
    Element,
    ElementNotFound,
    GroupMember,
    Locale,
    TranslationGroup,
)


@runtime_checkable
class TranslationGraphStore(Protocol):
    """Persistence of element ↔ group membership.

    Every implementation enforces, atomically with respect to concurrent
    writers:

    - no two members of a group share a locale (``LocaleTaken``)
    - an element belongs to at most one group (``AlreadyGrouped``)
    - a non-empty group has exactly one origin member (no source locale)

    Reads return immutable snapshots.
    """

    def get_group(self, element: Element) -> Optional[TranslationGroup]:
        """Return the group containing ``element`` or None."""
        ...

    def get_group_by_id(self, trid: int) -> Optional[TranslationGroup]: ...

    def create_group(self, origin: Element, origin_locale: Locale) -> TranslationGroup:
        """Create a group whose only member is ``origin``.

        Raises:
            AlreadyGrouped: ``origin`` already belongs to a group.
        """
        ...

    def add_member(
        self,
        trid: int,
        element: Element,
        locale: Locale,
        source_locale: Optional[Locale],
    ) -> TranslationGroup:
        """Add ``element`` to group ``trid`` and return the updated snapshot.

        Raises:
            UnknownGroup: no group ``trid``.
            LocaleTaken: the group already has a member for ``locale``.
            AlreadyGrouped: ``element`` belongs to a different group.
            InvalidSourceLocale: ``source_locale`` is set but not a member.
        """
        ...

    def remove_member(self, trid: int, element: Element) -> Optional[TranslationGroup]:
        """Remove ``element`` from group ``trid``.

        Returns the updated snapshot, or None when the group became empty and
        was deleted.

        Raises:
            UnknownGroup: no group ``trid``.
            ElementNotFound: ``element`` is not a member of the group.
        """
        ...


def members_after_removal(
    group: TranslationGroup, element: Element
) -> Dict[Locale, GroupMember]:
    """Compute the member map left after removing ``element`` from ``group``.

    Source relations that pointed at the removed locale are re-pointed so the
    group keeps exactly one origin:

    - removing a translation re-points its dependants to the removed
      member's own source locale;
    - removing the origin promotes the earliest-added remaining member to
      origin and re-points dependants of the removed locale to it.

    Sources always reference an earlier-added member, so the earliest
    remaining member was translated from the origin itself and promoting it
    never creates a cycle.
    """
    removed_locale = group.locale_of(element)
    if removed_locale is None:
        raise ElementNotFound(
            f"Element {element} is not a member of group {group.trid}",
            details={"trid": group.trid, "element": str(element)},
        )
    removed = group.members[removed_locale]
    remaining = [m for loc, m in group.members.items() if loc != removed_locale]
    if not remaining:
        return {}

    if removed.is_origin:
        new_origin = remaining[0]
        replacement = new_origin.locale
        remaining[0] = GroupMember(new_origin.element, new_origin.locale, None)
    else:
        replacement = removed.source_locale

    result = {}
    for member in remaining:
        if member.source_locale == removed_locale:
            member = GroupMember(member.element, member.locale, replacement)
        result[member.locale] = member
    return result
