"""SQLite translation graph store.

Schema::

    translation_groups(trid INTEGER PRIMARY KEY AUTOINCREMENT)
    translation_members(id, trid, element_id, element_kind, locale, source_locale)
        UNIQUE(element_id, element_kind)
        UNIQUE(trid, locale)

The unique constraints enforce locale and element uniqueness at the storage
level, so writers sharing the database file from other processes are held
to them too. Constraint violations surface as the store's typed errors.
"""

import sqlite3
import threading
from typing import Iterator, Optional
from contextlib import contextmanager

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

SCHEMA = """
CREATE TABLE IF NOT EXISTS translation_groups (
    trid INTEGER PRIMARY KEY AUTOINCREMENT
);

CREATE TABLE IF NOT EXISTS translation_members (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    trid INTEGER NOT NULL REFERENCES translation_groups(trid) ON DELETE CASCADE,
    element_id TEXT NOT NULL,
    element_kind TEXT NOT NULL,
    locale TEXT NOT NULL,
    source_locale TEXT NULL,
    UNIQUE(element_id, element_kind),
    UNIQUE(trid, locale)
);

CREATE INDEX IF NOT EXISTS idx_translation_members_trid
    ON translation_members(trid);
"""


class SqliteTranslationGraphStore:
    """Graph store persisted in a SQLite database.

    Args:
        path: Database file, or ``":memory:"`` for a private in-memory database.
    """

    def __init__(self, path: str = "translations.db"):
        self.path = path
        self._conn = sqlite3.connect(
            path, check_same_thread=False, isolation_level=None
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        self._lock = threading.Lock()
        logger.info("sqlite_graph_store_initialized", path=path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            try:
                yield cursor
            except BaseException:
                cursor.execute("ROLLBACK")
                raise
            else:
                cursor.execute("COMMIT")

    @staticmethod
    def _load(cursor: sqlite3.Cursor, trid: int) -> Optional[TranslationGroup]:
        cursor.execute(
            """
            SELECT element_id, element_kind, locale, source_locale
            FROM translation_members WHERE trid = ? ORDER BY id
            """,
            (trid,),
        )
        rows = cursor.fetchall()
        if not rows:
            return None
        members = {
            row["locale"]: GroupMember(
                Element(row["element_id"], row["element_kind"]),
                row["locale"],
                row["source_locale"],
            )
            for row in rows
        }
        return TranslationGroup(trid=trid, members=members)

    @staticmethod
    def _trid_of(cursor: sqlite3.Cursor, element: Element) -> Optional[int]:
        cursor.execute(
            "SELECT trid FROM translation_members WHERE element_id = ? AND element_kind = ?",
            (element.element_id, element.kind),
        )
        row = cursor.fetchone()
        return row["trid"] if row else None

    def get_group(self, element: Element) -> Optional[TranslationGroup]:
        with self._lock:
            cursor = self._conn.cursor()
            trid = self._trid_of(cursor, element)
            return self._load(cursor, trid) if trid is not None else None

    def get_group_by_id(self, trid: int) -> Optional[TranslationGroup]:
        with self._lock:
            return self._load(self._conn.cursor(), trid)

    def create_group(self, origin: Element, origin_locale: Locale) -> TranslationGroup:
        try:
            with self._transaction() as cursor:
                cursor.execute("INSERT INTO translation_groups DEFAULT VALUES")
                trid = cursor.lastrowid
                self._insert_member(cursor, trid, origin, origin_locale, None)
                group = self._load(cursor, trid)
        except sqlite3.IntegrityError as e:
            mapped = self._map_integrity_error(e, None, origin, origin_locale)
            if mapped is None:
                raise
            raise mapped from e
        logger.info(
            "translation_group_created",
            trid=trid,
            element=str(origin),
            locale=origin_locale,
        )
        return group

    def add_member(
        self,
        trid: int,
        element: Element,
        locale: Locale,
        source_locale: Optional[Locale] = None,
    ) -> TranslationGroup:
        try:
            with self._transaction() as cursor:
                group = self._load(cursor, trid)
                if group is None:
                    raise UnknownGroup(f"Unknown group {trid}", details={"trid": trid})
                if source_locale is None:
                    source_locale = group.origin.locale
                elif source_locale not in group.members:
                    # Locale collisions take precedence over a bad source
                    if locale in group.members:
                        raise self._locale_taken(trid, locale)
                    raise InvalidSourceLocale(
                        f"Source locale '{source_locale}' is not a member of group {trid}",
                        details={"trid": trid, "source_locale": source_locale},
                    )
                self._insert_member(cursor, trid, element, locale, source_locale)
                group = self._load(cursor, trid)
        except sqlite3.IntegrityError as e:
            mapped = self._map_integrity_error(e, trid, element, locale)
            if mapped is None:
                raise
            raise mapped from e
        logger.info(
            "translation_member_added",
            trid=trid,
            element=str(element),
            locale=locale,
            source_locale=source_locale,
        )
        return group

    def remove_member(self, trid: int, element: Element) -> Optional[TranslationGroup]:
        with self._transaction() as cursor:
            group = self._load(cursor, trid)
            if group is None:
                raise UnknownGroup(f"Unknown group {trid}", details={"trid": trid})
            remaining = members_after_removal(group, element)
            cursor.execute(
                "DELETE FROM translation_members WHERE element_id = ? AND element_kind = ?",
                (element.element_id, element.kind),
            )
            if not remaining:
                cursor.execute("DELETE FROM translation_groups WHERE trid = ?", (trid,))
                updated = None
            else:
                for member in remaining.values():
                    cursor.execute(
                        """
                        UPDATE translation_members SET source_locale = ?
                        WHERE trid = ? AND locale = ?
                        """,
                        (member.source_locale, trid, member.locale),
                    )
                updated = self._load(cursor, trid)
        logger.info(
            "translation_member_removed",
            trid=trid,
            element=str(element),
            group_deleted=updated is None,
        )
        return updated

    @staticmethod
    def _insert_member(cursor, trid, element, locale, source_locale) -> None:
        cursor.execute(
            """
            INSERT INTO translation_members
                (trid, element_id, element_kind, locale, source_locale)
            VALUES (?, ?, ?, ?, ?)
            """,
            (trid, element.element_id, element.kind, locale, source_locale),
        )

    @staticmethod
    def _locale_taken(trid: int, locale: Locale) -> LocaleTaken:
        return LocaleTaken(
            f"Group {trid} already has a member for '{locale}'",
            details={"trid": trid, "locale": locale},
        )

    def _map_integrity_error(
        self,
        error: sqlite3.IntegrityError,
        trid: Optional[int],
        element: Element,
        locale: Locale,
    ) -> Optional[Exception]:
        message = str(error)
        if "translation_members.trid, translation_members.locale" in message:
            return self._locale_taken(trid, locale)
        if "translation_members.element_id" in message:
            return AlreadyGrouped(
                f"Element {element} already belongs to a group",
                details={"element": str(element)},
            )
        if "FOREIGN KEY" in message:
            return UnknownGroup(f"Unknown group {trid}", details={"trid": trid})
        return None
