"""Unit tests for the translation graph stores.

Every test runs against both the in-memory and the SQLite implementation.
"""

import threading

import pytest

from modules.translations.domain import (
    AlreadyGrouped,
    Element,
    ElementNotFound,
    InvalidSourceLocale,
    LocaleTaken,
    UnknownGroup,
)
from modules.translations.store import (
    InMemoryTranslationGraphStore,
    SqliteTranslationGraphStore,
    TranslationGraphStore,
    build_store,
)

pytestmark = pytest.mark.unit

P1 = Element("1")
P2 = Element("2")
P3 = Element("3")
P4 = Element("4")


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryTranslationGraphStore()
    else:
        sqlite_store = SqliteTranslationGraphStore(str(tmp_path / "graph.db"))
        yield sqlite_store
        sqlite_store.close()


class TestProtocol:
    def test_implementations_satisfy_protocol(self, store):
        assert isinstance(store, TranslationGraphStore)

    def test_build_store_selects_backend(self, tmp_path):
        assert isinstance(build_store("memory"), InMemoryTranslationGraphStore)
        sqlite_store = build_store("sqlite", str(tmp_path / "x.db"))
        assert isinstance(sqlite_store, SqliteTranslationGraphStore)
        sqlite_store.close()


class TestCreateGroup:
    def test_creates_group_with_origin(self, store):
        group = store.create_group(P1, "en")

        assert group.locales == ["en"]
        assert group.origin.element == P1
        assert group.origin.source_locale is None

    def test_group_is_found_by_element_and_id(self, store):
        group = store.create_group(P1, "en")

        assert store.get_group(P1) == group
        assert store.get_group_by_id(group.trid) == group

    def test_unknown_lookups_return_none(self, store):
        assert store.get_group(P1) is None
        assert store.get_group_by_id(999) is None

    def test_element_cannot_start_two_groups(self, store):
        store.create_group(P1, "en")

        with pytest.raises(AlreadyGrouped):
            store.create_group(P1, "es")

    def test_groups_get_distinct_ids(self, store):
        first = store.create_group(P1, "en")
        second = store.create_group(P2, "en")

        assert first.trid != second.trid

    def test_element_kind_is_part_of_identity(self, store):
        store.create_group(Element("1", "post"), "en")

        group = store.create_group(Element("1", "page"), "en")

        assert group.origin.element.kind == "page"


class TestAddMember:
    def test_adds_translation_with_source(self, store):
        group = store.create_group(P1, "en")

        updated = store.add_member(group.trid, P2, "es", "en")

        assert updated.member_for("es").element == P2
        assert updated.member_for("es").source_locale == "en"
        assert store.get_group(P2).trid == group.trid

    def test_missing_source_attaches_to_origin(self, store):
        group = store.create_group(P1, "en")

        updated = store.add_member(group.trid, P2, "es", None)

        assert updated.member_for("es").source_locale == "en"
        assert updated.origin.element == P1

    def test_locale_taken(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")

        with pytest.raises(LocaleTaken):
            store.add_member(group.trid, P3, "es", "en")

        assert store.get_group(P3) is None

    def test_element_in_other_group(self, store):
        first = store.create_group(P1, "en")
        store.create_group(P2, "en")

        with pytest.raises(AlreadyGrouped):
            store.add_member(first.trid, P2, "es", "en")

    def test_element_already_member_under_other_locale(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")

        with pytest.raises(AlreadyGrouped):
            store.add_member(group.trid, P2, "fr", "en")

    def test_unknown_group(self, store):
        with pytest.raises(UnknownGroup):
            store.add_member(42, P2, "es", "en")

    def test_source_locale_must_be_member(self, store):
        group = store.create_group(P1, "en")

        with pytest.raises(InvalidSourceLocale):
            store.add_member(group.trid, P2, "es", "fr")

    def test_members_keep_insertion_order(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "fr", "en")
        updated = store.add_member(group.trid, P3, "es", "fr")

        assert updated.locales == ["en", "fr", "es"]

    def test_snapshots_are_immutable(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")

        assert group.locales == ["en"]
        with pytest.raises(TypeError):
            group.members["fr"] = None


class TestRemoveMember:
    def test_removing_last_member_deletes_group(self, store):
        group = store.create_group(P1, "en")

        assert store.remove_member(group.trid, P1) is None
        assert store.get_group(P1) is None
        assert store.get_group_by_id(group.trid) is None

    def test_removed_element_can_join_another_group(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")
        store.remove_member(group.trid, P2)

        other = store.create_group(P3, "en")
        updated = store.add_member(other.trid, P2, "es", "en")

        assert updated.member_for("es").element == P2

    def test_removing_translation_repoints_dependants(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")
        store.add_member(group.trid, P3, "pt-BR", "es")

        updated = store.remove_member(group.trid, P2)

        assert updated.locales == ["en", "pt-BR"]
        assert updated.member_for("pt-BR").source_locale == "en"

    def test_removing_origin_promotes_earliest_member(self, store):
        group = store.create_group(P1, "en")
        store.add_member(group.trid, P2, "es", "en")
        store.add_member(group.trid, P3, "fr", "en")
        store.add_member(group.trid, P4, "de", "es")

        updated = store.remove_member(group.trid, P1)

        assert updated.origin.element == P2
        assert updated.member_for("es").source_locale is None
        assert updated.member_for("fr").source_locale == "es"
        assert updated.member_for("de").source_locale == "es"
        assert sum(1 for m in updated.members.values() if m.is_origin) == 1

    def test_remove_unknown_group(self, store):
        with pytest.raises(UnknownGroup):
            store.remove_member(7, P1)

    def test_remove_non_member(self, store):
        group = store.create_group(P1, "en")

        with pytest.raises(ElementNotFound):
            store.remove_member(group.trid, P2)


class TestConcurrentWriters:
    def test_concurrent_group_creation_for_one_element(self, store):
        barrier = threading.Barrier(8)
        outcomes = []
        lock = threading.Lock()

        def create(locale):
            barrier.wait()
            try:
                store.create_group(P1, locale)
                result = "created"
            except AlreadyGrouped:
                result = "already_grouped"
            with lock:
                outcomes.append(result)

        threads = [
            threading.Thread(target=create, args=(loc,))
            for loc in ["en", "es", "fr", "de", "en", "es", "fr", "de"]
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("created") == 1
        assert outcomes.count("already_grouped") == 7

    def test_concurrent_add_of_same_locale(self, store):
        group = store.create_group(P1, "en")
        barrier = threading.Barrier(6)
        outcomes = []
        lock = threading.Lock()

        def add(index):
            barrier.wait()
            try:
                store.add_member(group.trid, Element(f"t{index}"), "es", "en")
                result = "added"
            except LocaleTaken:
                result = "taken"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=add, args=(i,)) for i in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("added") == 1
        assert len(store.get_group_by_id(group.trid)) == 2


class TestSqlitePersistence:
    def test_groups_survive_reopen(self, tmp_path):
        path = str(tmp_path / "persist.db")
        first = SqliteTranslationGraphStore(path)
        group = first.create_group(P1, "en")
        first.add_member(group.trid, P2, "es", "en")
        first.close()

        reopened = SqliteTranslationGraphStore(path)
        loaded = reopened.get_group(P2)
        reopened.close()

        assert loaded.trid == group.trid
        assert loaded.locales == ["en", "es"]
