from __future__ import annotations

import logging
from typing import Any, Sequence

from playwright.sync_api import ElementHandle, Error as PlaywrightError, JSHandle, Page

from .dom import InvalidSelectorError

logger = logging.getLogger(__name__)

_JS_SNAPSHOT = """
(el) => {
  const attrs = {};
  for (const attr of Array.from(el.attributes || [])) {
    attrs[attr.name] = attr.value;
  }
  return {
    tag: (el.tagName || '').toLowerCase(),
    id: el.id || '',
    classes: Array.from(el.classList || []),
    attributes: attrs,
  };
}
"""

_JS_PARENT = "(el) => el.parentElement"

_JS_SAME_NODE = "([left, right]) => left === right"

_JS_CHILDREN = "(el) => Array.from(el.children)"

_JS_QUERY_ALL = "(selector) => Array.from(document.querySelectorAll(selector))"

_JS_QUERY_FIRST = "(selector) => document.querySelector(selector)"

_JS_CANDIDATES = """
({ tag, classes, names, limit }) => {
  const root = document.body || document.documentElement;
  let pool = tag
    ? Array.from(document.getElementsByTagName(tag))
    : root ? Array.from(root.querySelectorAll("*")) : [];
  if (pool.length > limit && classes.length) {
    let narrowed = [];
    try {
      narrowed = Array.from(document.querySelectorAll(classes.map((cls) => "." + CSS.escape(cls)).join("")));
    } catch (error) {
      narrowed = [];
    }
    if (narrowed.length > 0 && narrowed.length < limit) {
      pool = narrowed;
    }
  }
  if (pool.length > limit && names.length) {
    const filtered = [];
    for (const el of pool) {
      if (names.some((name) => el.hasAttribute(name))) {
        filtered.push(el);
        if (filtered.length >= limit) {
          break;
        }
      }
    }
    pool = filtered;
  }
  return pool.slice(0, limit);
}
"""


def _unpack_elements(page: Page, array: JSHandle) -> list[PageElement]:
    """Wrap the element entries of an in-page array, then release the array."""
    try:
        properties = array.get_properties()
        elements: list[PageElement] = []
        for key in sorted((key for key in properties if key.isdigit()), key=int):
            element = properties[key].as_element()
            if element is not None:
                elements.append(PageElement(page, element))
        return elements
    finally:
        array.dispose()


class PageElement:
    """Element of a live page, read through an ``ElementHandle``.

    Attribute reads are fetched in one round trip and cached for the lifetime
    of this wrapper; relations and text are fetched on demand. A node removed
    from the page mid-call reads as empty rather than raising.
    """

    __slots__ = ("page", "handle", "_snapshot")

    def __init__(self, page: Page, handle: ElementHandle) -> None:
        self.page = page
        self.handle = handle
        self._snapshot: dict[str, Any] | None = None

    def __repr__(self) -> str:
        return f"PageElement(<{self.tag}>)"

    def _read(self) -> dict[str, Any]:
        if self._snapshot is None:
            try:
                payload = self.handle.evaluate(_JS_SNAPSHOT)
            except PlaywrightError as exc:
                logger.debug("Element snapshot failed: %s", exc)
                payload = None
            self._snapshot = payload if isinstance(payload, dict) else {}
        return self._snapshot

    @property
    def tag(self) -> str:
        return str(self._read().get("tag") or "")

    @property
    def id(self) -> str:
        return str(self._read().get("id") or "")

    @property
    def classes(self) -> list[str]:
        return [str(cls) for cls in self._read().get("classes") or [] if cls]

    def get_attribute(self, name: str) -> str | None:
        attributes = self._read().get("attributes") or {}
        value = attributes.get(name)
        return None if value is None else str(value)

    def has_attribute(self, name: str) -> bool:
        return name in (self._read().get("attributes") or {})

    @property
    def parent(self) -> PageElement | None:
        try:
            handle = self.handle.evaluate_handle(_JS_PARENT)
        except PlaywrightError as exc:
            logger.debug("Parent lookup failed: %s", exc)
            return None
        element = handle.as_element()
        if element is None:
            handle.dispose()
            return None
        return PageElement(self.page, element)

    @property
    def children(self) -> list[PageElement]:
        try:
            return _unpack_elements(self.page, self.handle.evaluate_handle(_JS_CHILDREN))
        except PlaywrightError as exc:
            logger.debug("Children lookup failed: %s", exc)
            return []

    @property
    def text(self) -> str:
        try:
            value = self.handle.evaluate("(el) => el.textContent || ''")
        except PlaywrightError as exc:
            logger.debug("Text read failed: %s", exc)
            return ""
        return str(value or "")

    def same_as(self, other: object) -> bool:
        if not isinstance(other, PageElement):
            return False
        if other.handle is self.handle:
            return True
        try:
            return bool(self.page.evaluate(_JS_SAME_NODE, [self.handle, other.handle]))
        except PlaywrightError as exc:
            logger.debug("Identity check failed: %s", exc)
            return False


class PageDocument:
    def __init__(self, page: Page) -> None:
        self.page = page

    @property
    def body(self) -> PageElement | None:
        try:
            handle = self.page.evaluate_handle("() => document.body")
        except PlaywrightError as exc:
            logger.debug("Body lookup failed: %s", exc)
            return None
        element = handle.as_element()
        if element is None:
            handle.dispose()
            return None
        return PageElement(self.page, element)

    def element(self, handle: ElementHandle) -> PageElement:
        return PageElement(self.page, handle)

    def is_element(self, candidate: object) -> bool:
        return isinstance(candidate, PageElement)

    def query_all(self, selector: str) -> list[PageElement]:
        """Run ``document.querySelectorAll`` in the page; shadow roots are not pierced."""
        try:
            return _unpack_elements(self.page, self.page.evaluate_handle(_JS_QUERY_ALL, selector))
        except PlaywrightError as exc:
            raise InvalidSelectorError(str(selector), str(exc)) from exc

    def query_first(self, selector: str) -> PageElement | None:
        try:
            handle = self.page.evaluate_handle(_JS_QUERY_FIRST, selector)
        except PlaywrightError as exc:
            raise InvalidSelectorError(str(selector), str(exc)) from exc
        element = handle.as_element()
        if element is None:
            handle.dispose()
            return None
        return PageElement(self.page, element)

    def collect_candidates(
        self,
        tag: str | None,
        classes: Sequence[str],
        attribute_names: Sequence[str],
        limit: int,
    ) -> list[PageElement]:
        payload = {
            "tag": tag or "",
            "classes": list(classes),
            "names": list(attribute_names),
            "limit": limit,
        }
        try:
            return _unpack_elements(self.page, self.page.evaluate_handle(_JS_CANDIDATES, payload))
        except PlaywrightError as exc:
            logger.debug("Candidate collection failed: %s", exc)
            return []
