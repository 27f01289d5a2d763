from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .dom import DomElement, InvalidSelectorError
from .selector_rules import class_selector

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"


class SoupElement:
    """Element of a parsed HTML snapshot.

    BeautifulSoup compares tags structurally, so two identical ``<li>`` siblings
    are ``==``; identity here is always the underlying node object.
    """

    __slots__ = ("node",)

    def __init__(self, node: Tag) -> None:
        self.node = node

    def __repr__(self) -> str:
        return f"SoupElement(<{self.node.name}>)"

    @property
    def tag(self) -> str:
        return (self.node.name or "").lower()

    @property
    def id(self) -> str:
        return self.get_attribute("id") or ""

    @property
    def classes(self) -> list[str]:
        raw = self.node.get("class")
        if not raw:
            return []
        if isinstance(raw, str):
            return raw.split()
        return [str(cls) for cls in raw if cls]

    def get_attribute(self, name: str) -> str | None:
        raw = self.node.get(name)
        if raw is None:
            return None
        if isinstance(raw, (list, tuple)):
            return " ".join(str(item) for item in raw)
        return str(raw)

    def has_attribute(self, name: str) -> bool:
        return self.node.has_attr(name)

    @property
    def parent(self) -> SoupElement | None:
        parent = self.node.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupElement(parent)

    @property
    def children(self) -> list[SoupElement]:
        return [SoupElement(child) for child in self.node.children if isinstance(child, Tag)]

    @property
    def text(self) -> str:
        return self.node.get_text()

    def same_as(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other.node is self.node


class SoupDocument:
    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def from_html(cls, markup: str | bytes, parser: str = DEFAULT_PARSER) -> SoupDocument:
        return cls(BeautifulSoup(markup, parser))

    @classmethod
    def from_file(cls, path: Path, parser: str = DEFAULT_PARSER) -> SoupDocument:
        return cls.from_html(path.read_text(encoding="utf-8", errors="replace"), parser=parser)

    @property
    def body(self) -> SoupElement | None:
        node = self.soup.body
        return SoupElement(node) if node is not None else None

    def element(self, node: Tag) -> SoupElement:
        return SoupElement(node)

    def is_element(self, candidate: object) -> bool:
        return isinstance(candidate, SoupElement)

    def query_all(self, selector: str) -> list[DomElement]:
        try:
            nodes = self.soup.select(selector)
        except (SelectorSyntaxError, TypeError, ValueError, NotImplementedError) as exc:
            raise InvalidSelectorError(str(selector), str(exc)) from exc
        return [SoupElement(node) for node in nodes]

    def query_first(self, selector: str) -> SoupElement | None:
        try:
            node = self.soup.select_one(selector)
        except (SelectorSyntaxError, TypeError, ValueError, NotImplementedError) as exc:
            raise InvalidSelectorError(str(selector), str(exc)) from exc
        return SoupElement(node) if node is not None else None

    def by_tag(self, tag: str) -> list[SoupElement]:
        return [SoupElement(node) for node in self.soup.find_all(tag.lower())]

    def all_elements(self) -> list[SoupElement]:
        root = self.soup.body or self.soup
        return [SoupElement(node) for node in root.find_all(True)]

    def collect_candidates(
        self,
        tag: str | None,
        classes: Sequence[str],
        attribute_names: Sequence[str],
        limit: int,
    ) -> list[DomElement]:
        candidates: list[DomElement] = self.by_tag(tag) if tag else self.all_elements()

        if len(candidates) > limit and classes:
            try:
                narrowed = self.query_all(class_selector("", classes))
            except InvalidSelectorError as exc:
                logger.debug("Class narrowing skipped: %s", exc)
                narrowed = []
            if 0 < len(narrowed) < limit:
                candidates = narrowed

        if len(candidates) > limit and attribute_names:
            filtered: list[DomElement] = []
            for element in candidates:
                if any(element.has_attribute(name) for name in attribute_names):
                    filtered.append(element)
                    if len(filtered) >= limit:
                        break
            candidates = filtered

        return candidates[:limit]
