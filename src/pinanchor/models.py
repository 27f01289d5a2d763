from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

AnchorStatus = Literal["page", "resolved", "reanchored", "orphaned"]
AttributeMarker = str | bool


@dataclass(slots=True)
class SelectorDescriptor:
    tag_name: str | None = None
    id: str | None = None
    classes: list[str] = field(default_factory=list)
    attributes: dict[str, AttributeMarker] = field(default_factory=dict)
    nth_index: int | None = None

    def is_empty(self) -> bool:
        return not (self.tag_name or self.id or self.classes or self.attributes)


@dataclass(slots=True)
class ScoredCandidate:
    element: Any
    score: int


@dataclass(frozen=True, slots=True)
class SelectorValidation:
    valid: bool
    error: str | None = None


@dataclass(slots=True)
class AnchorRecord:
    selector: str
    anchor_text: str
    confidence: int
    fallbacks: list[str] = field(default_factory=list)


@dataclass(slots=True)
class AnchorResolution:
    status: AnchorStatus
    element: Any = None
    selector: str | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.element is not None
