"""Resilient element anchors for third-party pages."""

from .anchoring import PAGE_LEVEL_SELECTOR, capture_anchor, resolve_anchor, resolve_record
from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config, save_engine_config
from .dom import DomDocument, DomElement, InvalidSelectorError
from .engine import SelectorEngine
from .locator_generator import generate, generate_fallback_selectors
from .matcher import find_best_match
from .models import AnchorRecord, AnchorResolution, ScoredCandidate, SelectorDescriptor, SelectorValidation
from .scoring import get_confidence_score
from .selector_parser import parse_selector
from .selector_rules import is_dynamic_id
from .similarity import string_similarity
from .soup_dom import SoupDocument, SoupElement
from .validation import is_unique, sanitize_selector, validate, validate_selector

__version__ = "0.1.0"

__all__ = [
    "AnchorRecord",
    "AnchorResolution",
    "DEFAULT_CONFIG",
    "DomDocument",
    "DomElement",
    "EngineConfig",
    "InvalidSelectorError",
    "PAGE_LEVEL_SELECTOR",
    "ScoredCandidate",
    "SelectorDescriptor",
    "SelectorEngine",
    "SelectorValidation",
    "SoupDocument",
    "SoupElement",
    "capture_anchor",
    "find_best_match",
    "generate",
    "generate_fallback_selectors",
    "get_confidence_score",
    "is_dynamic_id",
    "is_unique",
    "load_engine_config",
    "parse_selector",
    "resolve_anchor",
    "resolve_record",
    "sanitize_selector",
    "save_engine_config",
    "string_similarity",
    "validate",
    "validate_selector",
]
