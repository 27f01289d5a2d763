from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from .config import DEFAULT_CONFIG, EngineConfig
from .dom import DomDocument, DomElement
from .models import ScoredCandidate, SelectorDescriptor
from .selector_parser import parse_selector
from .selector_rules import is_dynamic_id
from .similarity import string_similarity

logger = logging.getLogger(__name__)

TAG_WEIGHT = 20
ID_WEIGHT = 25
ID_PARTIAL_CREDIT = 15
CLASS_WEIGHT = 25
ATTRIBUTE_WEIGHT = 30
ATTRIBUTE_PARTIAL_WEIGHT = 20
TEXT_WEIGHT = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _text_hint(metadata: Mapping[str, Any] | None) -> str:
    if not metadata:
        return ""
    raw = metadata.get("text_content")
    if raw is None:
        raw = metadata.get("textContent")
    return raw if isinstance(raw, str) else ""


def find_candidates(
    document: DomDocument,
    descriptor: SelectorDescriptor,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[DomElement]:
    """Collect at most ``config.candidate_limit`` elements worth scoring."""
    return document.collect_candidates(
        descriptor.tag_name,
        descriptor.classes,
        list(descriptor.attributes),
        config.candidate_limit,
    )


def score_candidate(
    element: DomElement,
    descriptor: SelectorDescriptor,
    metadata: Mapping[str, Any] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """Score 0-100, normalized over the descriptor fields that are present."""
    score = 0
    max_score = 0

    if descriptor.tag_name:
        max_score += TAG_WEIGHT
        if element.tag == descriptor.tag_name:
            score += TAG_WEIGHT

    if descriptor.id:
        max_score += ID_WEIGHT
        element_id = element.id
        if element_id == descriptor.id:
            score += ID_WEIGHT
        elif (
            element_id
            and not is_dynamic_id(descriptor.id)
            and string_similarity(element_id, descriptor.id) > config.id_similarity_threshold
        ):
            score += ID_PARTIAL_CREDIT

    if descriptor.classes:
        max_score += CLASS_WEIGHT
        element_classes = set(element.classes)
        matching = sum(1 for cls in descriptor.classes if cls in element_classes)
        score += _round_half_up(matching / len(descriptor.classes) * CLASS_WEIGHT)

    if descriptor.attributes:
        max_score += ATTRIBUTE_WEIGHT
        count = len(descriptor.attributes)
        attribute_score = 0.0
        for name, expected in descriptor.attributes.items():
            actual = element.get_attribute(name)
            if actual is None:
                continue
            if expected is True or actual == expected:
                attribute_score += ATTRIBUTE_WEIGHT / count
            elif (
                isinstance(expected, str)
                and string_similarity(actual, expected) > config.attribute_similarity_threshold
            ):
                attribute_score += ATTRIBUTE_PARTIAL_WEIGHT / count
        score += _round_half_up(attribute_score)

    hint = _text_hint(metadata)
    if hint:
        max_score += TEXT_WEIGHT
        length = config.text_compare_length
        element_text = element.text.strip()[:length]
        if element_text and string_similarity(element_text, hint[:length]) > config.text_similarity_threshold:
            score += TEXT_WEIGHT

    if max_score <= 0:
        return 0
    return _round_half_up(score / max_score * 100)


def rank_candidates(
    candidates: list[DomElement],
    descriptor: SelectorDescriptor,
    metadata: Mapping[str, Any] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[ScoredCandidate]:
    """Highest score first; equal scores keep document order."""
    scored = [
        ScoredCandidate(element=element, score=score_candidate(element, descriptor, metadata, config))
        for element in candidates
    ]
    scored.sort(key=lambda item: -item.score)
    return scored


def find_best_match(
    document: DomDocument,
    selector: str | None,
    metadata: Mapping[str, Any] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> DomElement | None:
    """Recover the element a stale selector most plausibly meant.

    Returns None when nothing scores at least ``config.match_threshold``; the
    caller should then treat the anchor as orphaned.
    """
    descriptor = parse_selector(selector)
    candidates = find_candidates(document, descriptor, config)
    if not candidates:
        logger.debug("No fuzzy candidates for %r", selector)
        return None

    ranked = rank_candidates(candidates, descriptor, metadata, config)
    best = ranked[0]
    if best.score >= config.match_threshold:
        logger.debug("Fuzzy match for %r scored %s", selector, best.score)
        return best.element

    logger.debug("Best fuzzy candidate for %r scored %s, below threshold", selector, best.score)
    return None
