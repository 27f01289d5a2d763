"""Read-only view of a host document.

The engine only ever reads the tree through these two interfaces, so the same
strategies run against a parsed HTML snapshot (``soup_dom``) and against a
live browser page (``page_dom``).
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


class InvalidSelectorError(Exception):
    """Raised by a document backend when a selector cannot be executed."""

    def __init__(self, selector: str, reason: str = "") -> None:
        self.selector = selector
        self.reason = reason
        message = f"Invalid selector {selector!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@runtime_checkable
class DomElement(Protocol):
    @property
    def tag(self) -> str: ...

    @property
    def id(self) -> str: ...

    @property
    def classes(self) -> list[str]: ...

    def get_attribute(self, name: str) -> str | None: ...

    def has_attribute(self, name: str) -> bool: ...

    @property
    def parent(self) -> DomElement | None: ...

    @property
    def children(self) -> Sequence[DomElement]: ...

    @property
    def text(self) -> str: ...

    def same_as(self, other: object) -> bool: ...


@runtime_checkable
class DomDocument(Protocol):
    @property
    def body(self) -> DomElement | None: ...

    def query_all(self, selector: str) -> list[DomElement]: ...

    def query_first(self, selector: str) -> DomElement | None: ...

    def collect_candidates(
        self,
        tag: str | None,
        classes: Sequence[str],
        attribute_names: Sequence[str],
        limit: int,
    ) -> list[DomElement]:
        """At most ``limit`` elements worth fuzzy scoring, in document order.

        Narrowing order: tag (or every element under body), then the class
        query when it yields fewer than ``limit`` hits, then presence of any
        listed attribute. The two narrowing steps only run while the pool is
        larger than ``limit``.
        """
        ...

    def is_element(self, candidate: object) -> bool: ...


def is_body(document: DomDocument, element: DomElement | None) -> bool:
    if element is None:
        return False
    body = document.body
    return body is not None and element.same_as(body)


def position_among_type(element: DomElement) -> int:
    """1-based index of ``element`` among same-tag siblings, 0 when detached."""
    parent = element.parent
    if parent is None:
        return 0
    tag = element.tag
    index = 0
    for sibling in parent.children:
        if sibling.tag != tag:
            continue
        index += 1
        if sibling.same_as(element):
            return index
    return 0
