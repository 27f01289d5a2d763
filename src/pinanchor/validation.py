from __future__ import annotations

import logging
import re

import soupsieve
from soupsieve import SelectorSyntaxError

from .config import DEFAULT_CONFIG
from .dom import DomDocument, DomElement, InvalidSelectorError
from .models import SelectorValidation

logger = logging.getLogger(__name__)

MAX_SELECTOR_LENGTH = DEFAULT_CONFIG.max_selector_length

DANGEROUS_SELECTOR_PATTERNS = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"behavior\s*:", re.IGNORECASE),
    re.compile(r"@import", re.IGNORECASE),
    re.compile(r"url\s*\([^)]*\)", re.IGNORECASE),
    # Hex escapes can smuggle any of the above past a plain-text filter.
    re.compile(r"\\[0-9a-f]", re.IGNORECASE),
)

ERROR_NOT_A_STRING = "Selector must be a non-empty string"
ERROR_EMPTY = "Selector cannot be empty"
ERROR_UNSAFE = "Selector contains potentially unsafe patterns"
ERROR_SYNTAX = "Invalid CSS selector syntax"


def count_matches(document: DomDocument, selector: str) -> int:
    if not selector or not isinstance(selector, str):
        return 0
    try:
        return len(document.query_all(selector))
    except InvalidSelectorError as exc:
        logger.debug("Selector query failed: %s", exc)
        return 0


def is_unique(document: DomDocument, selector: str | None) -> bool:
    return count_matches(document, selector or "") == 1


def validate(document: DomDocument, selector: str | None, element: DomElement | None) -> bool:
    """True when the first match of ``selector`` is ``element`` itself."""
    if element is None or not selector or not isinstance(selector, str):
        return False
    try:
        match = document.query_first(selector)
    except InvalidSelectorError as exc:
        logger.debug("Selector validation query failed: %s", exc)
        return False
    return match is not None and match.same_as(element)


def is_valid_selector_syntax(selector: str, document: DomDocument | None = None) -> bool:
    if document is not None:
        try:
            document.query_first(selector)
        except InvalidSelectorError:
            return False
        return True
    try:
        soupsieve.compile(selector)
    except (SelectorSyntaxError, TypeError, ValueError, NotImplementedError):
        return False
    return True


def validate_selector(
    selector: object,
    document: DomDocument | None = None,
    *,
    max_length: int = MAX_SELECTOR_LENGTH,
) -> SelectorValidation:
    """Safety and syntax gate for selectors that arrive from outside the session."""
    if not selector or not isinstance(selector, str):
        return SelectorValidation(False, ERROR_NOT_A_STRING)

    trimmed = selector.strip()
    if not trimmed:
        return SelectorValidation(False, ERROR_EMPTY)

    if len(trimmed) > max_length:
        return SelectorValidation(False, f"Selector exceeds maximum length of {max_length} characters")

    for pattern in DANGEROUS_SELECTOR_PATTERNS:
        if pattern.search(trimmed):
            logger.info("Rejected unsafe selector pattern %s", pattern.pattern)
            return SelectorValidation(False, ERROR_UNSAFE)

    if not is_valid_selector_syntax(trimmed, document):
        return SelectorValidation(False, ERROR_SYNTAX)

    return SelectorValidation(True)


def sanitize_selector(
    selector: object,
    document: DomDocument | None = None,
    *,
    max_length: int = MAX_SELECTOR_LENGTH,
) -> str | None:
    result = validate_selector(selector, document, max_length=max_length)
    if result.valid and isinstance(selector, str):
        return selector.strip()
    return None
