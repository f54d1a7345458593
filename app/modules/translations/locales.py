"""Locale registry.

Gates every operation that accepts a caller-supplied locale. Codes are
BCP-47-like (``en``, ``pt-BR``, ``zh-Hant-TW``); anything malformed or not
in the active set is rejected.
"""

import re
import threading
from typing import FrozenSet, Iterable

from infrastructure.logging import get_module_logger
from modules.translations.domain import InvalidLocale, Locale

logger = get_module_logger()

LOCALE_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})*$")


def is_well_formed(code: object) -> bool:
    return isinstance(code, str) and bool(LOCALE_PATTERN.match(code))


class LocaleRegistry:
    """Set of locales the engine currently accepts.

    Deactivating a locale only gates new writes. Stored group members keep
    their locale and remain readable.

    Args:
        codes: Initially active locale codes.
        default_locale: Locale assumed for ungrouped content that reports none.
    """

    def __init__(self, codes: Iterable[str], default_locale: str = "en"):
        self._lock = threading.Lock()
        self._active: FrozenSet[Locale] = frozenset()
        self.refresh(codes)
        self.default_locale = self.require(default_locale)

    def refresh(self, codes: Iterable[str]) -> None:
        """Replace the active set. Malformed codes are rejected as a whole."""
        normalized = []
        for code in codes:
            code = code.strip() if isinstance(code, str) else code
            if not is_well_formed(code):
                raise InvalidLocale(
                    f"Malformed locale code: {code!r}", details={"locale": code}
                )
            normalized.append(code)
        with self._lock:
            self._active = frozenset(normalized)
        logger.info("locale_registry_refreshed", locales=sorted(normalized))

    def active_locales(self) -> FrozenSet[Locale]:
        with self._lock:
            return self._active

    def is_active(self, code: str) -> bool:
        return is_well_formed(code) and code in self.active_locales()

    def require(self, code: str) -> Locale:
        """Return ``code`` if it is well formed and active.

        Raises:
            InvalidLocale: the code is malformed or inactive.
        """
        if not is_well_formed(code):
            raise InvalidLocale(
                f"Malformed locale code: {code!r}", details={"locale": code}
            )
        if code not in self.active_locales():
            raise InvalidLocale(
                f"Locale '{code}' is not active", details={"locale": code}
            )
        return code
