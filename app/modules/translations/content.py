"""Host content store collaborator.

The engine never owns content. It reads the source text of an element,
asks the host to create the translated element, and describes siblings for
the translation view.
"""

import itertools
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from modules.translations.domain import Element, ElementNotFound, Locale


@dataclass(frozen=True)
class ElementContent:
    title: str
    body: str
    locale: Optional[Locale] = None
    status: str = "draft"
    permalink: Optional[str] = None


@runtime_checkable
class ContentStore(Protocol):
    def get_content(self, element: Element) -> ElementContent:
        """Return the content of ``element``.

        Raises:
            ElementNotFound: the host has no such element.
        """
        ...

    def create_translation(
        self, source: Element, target_locale: Locale, title: str, body: str
    ) -> Element:
        """Create the translated element and return its reference."""
        ...

    def describe(self, element: Element) -> Tuple[str, Optional[str], str]:
        """Return ``(title, permalink, status)`` for ``element``."""
        ...


class InMemoryContentStore:
    """Dict-backed content store for development and tests."""

    def __init__(self, base_url: str = "https://example.org"):
        self.base_url = base_url.rstrip("/")
        self._items: Dict[Tuple[str, str], ElementContent] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(
        self,
        element: Element,
        title: str,
        body: str = "",
        locale: Optional[Locale] = None,
        status: str = "publish",
    ) -> Element:
        with self._lock:
            self._items[element.key] = ElementContent(
                title=title,
                body=body,
                locale=locale,
                status=status,
                permalink=f"{self.base_url}/{element.kind}/{element.element_id}",
            )
        return element

    def get_content(self, element: Element) -> ElementContent:
        with self._lock:
            content = self._items.get(element.key)
        if content is None:
            raise ElementNotFound(
                f"Element {element} not found", details={"element": str(element)}
            )
        return content

    def create_translation(
        self, source: Element, target_locale: Locale, title: str, body: str
    ) -> Element:
        with self._lock:
            element = Element(f"{source.element_id}-{target_locale}-{next(self._ids)}", source.kind)
            self._items[element.key] = ElementContent(
                title=title,
                body=body,
                locale=target_locale,
                status="draft",
                permalink=f"{self.base_url}/{target_locale}/{element.kind}/{element.element_id}",
            )
        return element

    def describe(self, element: Element) -> Tuple[str, Optional[str], str]:
        content = self.get_content(element)
        return content.title, content.permalink, content.status

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
