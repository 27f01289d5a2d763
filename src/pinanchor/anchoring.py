"""Capture and re-resolution of note anchors.

This is the caller-side flow around the engine: a note stores the selector
generated when it was created plus a short text hint, and on every later visit
the pair is resolved back to an element, re-anchored through fuzzy matching, or
reported as orphaned.
"""

from __future__ import annotations

import logging

from .dom import DomElement, InvalidSelectorError
from .engine import SelectorEngine
from .models import AnchorRecord, AnchorResolution

logger = logging.getLogger(__name__)

PAGE_LEVEL_SELECTOR = "__PAGE__"
ANCHOR_TEXT_LIMIT = 100


def anchor_text_for(element: DomElement, limit: int = ANCHOR_TEXT_LIMIT) -> str:
    return element.text.strip()[:limit]


def capture_anchor(engine: SelectorEngine, element: object) -> AnchorRecord | None:
    selector = engine.generate(element)
    if not selector:
        return None
    fallbacks = [item for item in engine.generate_fallback_selectors(element) if item != selector]
    return AnchorRecord(
        selector=selector,
        anchor_text=anchor_text_for(element, engine.config.text_compare_length),
        confidence=engine.get_confidence_score(selector),
        fallbacks=fallbacks,
    )


def _query(engine: SelectorEngine, selector: str) -> list[DomElement]:
    try:
        return engine.document.query_all(selector)
    except InvalidSelectorError as exc:
        logger.debug("Stored selector no longer executes: %s", exc)
        return []


def _direct_match(engine: SelectorEngine, selector: str, anchor_text: str) -> DomElement | None:
    matches = _query(engine, selector)
    if not matches:
        return None
    if len(matches) == 1 or not anchor_text:
        return matches[0]

    for element in matches:
        if element.text.strip() == anchor_text:
            return element

    best = engine.find_best_match(selector, {"text_content": anchor_text})
    return best if best is not None else matches[0]


def _reanchor(engine: SelectorEngine, selector: str, anchor_text: str) -> AnchorResolution | None:
    element = engine.find_best_match(selector, {"text_content": anchor_text})
    if element is None:
        return None
    new_selector = engine.generate(element)
    logger.info("Re-anchored %r to %r", selector, new_selector)
    return AnchorResolution(status="reanchored", element=element, selector=new_selector)


def resolve_anchor(
    engine: SelectorEngine,
    selector: str,
    anchor_text: str = "",
    *,
    trusted: bool = False,
) -> AnchorResolution:
    """Resolve a stored selector against the current document.

    Selectors that did not originate in this session must not be trusted; they
    are sanitized before they reach any query.
    """
    if isinstance(selector, str) and selector.strip() == PAGE_LEVEL_SELECTOR:
        return AnchorResolution(status="page", selector=PAGE_LEVEL_SELECTOR)

    if not trusted:
        validation = engine.validate_selector(selector)
        if not validation.valid:
            logger.info("Refused stored selector: %s", validation.error)
            return AnchorResolution(status="orphaned", selector=None, error=validation.error)
        selector = selector.strip()

    hint = (anchor_text or "").strip()
    element = _direct_match(engine, selector, hint)
    if element is not None:
        return AnchorResolution(status="resolved", element=element, selector=selector)

    return _reanchor(engine, selector, hint) or AnchorResolution(status="orphaned", selector=selector)


def resolve_record(engine: SelectorEngine, record: AnchorRecord, *, trusted: bool = False) -> AnchorResolution:
    """Resolve a captured anchor, trying its stored fallbacks before fuzzy matching."""
    if record.selector.strip() == PAGE_LEVEL_SELECTOR:
        return AnchorResolution(status="page", selector=PAGE_LEVEL_SELECTOR)

    hint = record.anchor_text.strip()
    rejected: str | None = None
    for candidate in [record.selector, *record.fallbacks]:
        selector = candidate if trusted else engine.sanitize_selector(candidate)
        if not selector:
            rejected = rejected or engine.validate_selector(candidate).error
            continue
        element = _direct_match(engine, selector, hint)
        if element is not None:
            status = "resolved" if candidate == record.selector else "reanchored"
            return AnchorResolution(status=status, element=element, selector=selector)

    primary = record.selector if trusted else engine.sanitize_selector(record.selector)
    if primary:
        resolution = _reanchor(engine, primary, hint)
        if resolution is not None:
            return resolution
    return AnchorResolution(status="orphaned", selector=primary, error=rejected)
