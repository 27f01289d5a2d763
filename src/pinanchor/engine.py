from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from . import locator_generator, matcher, validation
from .config import DEFAULT_CONFIG, EngineConfig
from .dom import DomDocument, DomElement
from .models import SelectorDescriptor, SelectorValidation
from .scoring import get_confidence_score
from .selector_parser import parse_selector
from .selector_rules import is_dynamic_id
from .similarity import string_similarity


@dataclass(frozen=True, slots=True)
class SelectorEngine:
    """The selector engine bound to one document.

    Holds only the document handle and immutable configuration; every method
    is a fresh read of the current tree, so repeated calls may legitimately
    disagree while the host page mutates.
    """

    document: DomDocument
    config: EngineConfig = field(default=DEFAULT_CONFIG)

    def generate(self, element: object) -> str | None:
        return locator_generator.generate(self.document, element, self.config)

    def generate_fallback_selectors(self, element: object) -> list[str]:
        return locator_generator.generate_fallback_selectors(self.document, element, self.config)

    def is_unique(self, selector: str | None) -> bool:
        return validation.is_unique(self.document, selector)

    def validate(self, selector: str | None, element: DomElement | None) -> bool:
        return validation.validate(self.document, selector, element)

    def validate_selector(self, selector: object) -> SelectorValidation:
        return validation.validate_selector(selector, self.document, max_length=self.config.max_selector_length)

    def sanitize_selector(self, selector: object) -> str | None:
        return validation.sanitize_selector(selector, self.document, max_length=self.config.max_selector_length)

    def find_best_match(self, selector: str | None, metadata: Mapping[str, Any] | None = None) -> DomElement | None:
        return matcher.find_best_match(self.document, selector, metadata, self.config)

    @staticmethod
    def get_confidence_score(selector: str) -> int:
        return get_confidence_score(selector)

    @staticmethod
    def is_dynamic_id(value: str | None) -> bool:
        return is_dynamic_id(value)

    @staticmethod
    def parse_selector(selector: str | None) -> SelectorDescriptor:
        return parse_selector(selector)

    @staticmethod
    def string_similarity(left: str | None, right: str | None) -> float:
        return string_similarity(left, right)
