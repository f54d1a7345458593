"""Translation graph store implementations."""

from modules.translations.store.base import TranslationGraphStore
from modules.translations.store.memory import InMemoryTranslationGraphStore
from modules.translations.store.sqlite import SqliteTranslationGraphStore


def build_store(store_backend: str, sqlite_path: str = "translations.db"):
    """Instantiate the configured graph store."""
    if store_backend == "sqlite":
        return SqliteTranslationGraphStore(sqlite_path)
    return InMemoryTranslationGraphStore()


__all__ = [
    "InMemoryTranslationGraphStore",
    "SqliteTranslationGraphStore",
    "TranslationGraphStore",
    "build_store",
]
