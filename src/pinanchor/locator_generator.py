from __future__ import annotations

import logging
from typing import Callable

from .config import DEFAULT_CONFIG, EngineConfig
from .dom import DomDocument, DomElement, is_body, position_among_type
from .selector_rules import (
    attribute_selector,
    class_selector,
    escape_css_string,
    first_stable_class,
    id_selector,
    is_dynamic_id,
    nth_of_type_selector,
    stable_classes,
)
from .validation import is_unique

logger = logging.getLogger(__name__)

Strategy = Callable[[DomDocument, DomElement, EngineConfig], "str | None"]


def id_strategy(document: DomDocument, element: DomElement, config: EngineConfig = DEFAULT_CONFIG) -> str | None:
    value = element.id
    if not value or is_dynamic_id(value):
        return None
    selector = id_selector(value)
    return selector if is_unique(document, selector) else None


def attribute_strategy(
    document: DomDocument, element: DomElement, config: EngineConfig = DEFAULT_CONFIG
) -> str | None:
    tag = element.tag
    for attr in config.preferred_attributes:
        value = element.get_attribute(attr)
        if not value:
            continue
        selector = attribute_selector(tag, attr, value)
        if is_unique(document, selector):
            return selector
    return None


def class_strategy(document: DomDocument, element: DomElement, config: EngineConfig = DEFAULT_CONFIG) -> str | None:
    tag = element.tag
    classes = stable_classes(element.classes, min_length=1)
    if not classes:
        return None

    for cls in classes:
        selector = class_selector(tag, [cls])
        if is_unique(document, selector):
            return selector

    if len(classes) >= 2:
        selector = class_selector(tag, classes[: config.class_combination_limit])
        if is_unique(document, selector):
            return selector
    return None


def nth_of_type_strategy(
    document: DomDocument, element: DomElement, config: EngineConfig = DEFAULT_CONFIG
) -> str | None:
    parent = element.parent
    if parent is None:
        return None

    index = position_among_type(element)
    if index == 0:
        return None

    parent_selector = short_selector(document, parent, config)
    if not parent_selector:
        return None

    selector = f"{parent_selector} > {nth_of_type_selector(element.tag, index)}"
    return selector if is_unique(document, selector) else None


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("id", id_strategy),
    ("attribute", attribute_strategy),
    ("class", class_strategy),
    ("nth_of_type", nth_of_type_strategy),
)


def short_selector(document: DomDocument, element: DomElement | None, config: EngineConfig = DEFAULT_CONFIG) -> str | None:
    """One-level selector for a parent; never recurses further up."""
    if element is None or is_body(document, element):
        return None

    if element.id and not is_dynamic_id(element.id):
        return id_selector(element.id)

    for attr in config.preferred_attributes[: config.short_selector_attribute_limit]:
        value = element.get_attribute(attr)
        if value:
            return f'[{attr}="{escape_css_string(value)}"]'

    tag = element.tag
    cls = first_stable_class(element.classes, min_length=2)
    if cls:
        return class_selector(tag, [cls])
    return tag


def element_part(element: DomElement, config: EngineConfig = DEFAULT_CONFIG) -> str:
    tag = element.tag

    if element.id and not is_dynamic_id(element.id):
        return tag + id_selector(element.id)

    for attr in config.preferred_attributes[: config.path_part_attribute_limit]:
        value = element.get_attribute(attr)
        if value:
            return attribute_selector(tag, attr, value)

    cls = first_stable_class(element.classes, min_length=2)
    if cls:
        return class_selector(tag, [cls])

    index = position_among_type(element)
    if index:
        return nth_of_type_selector(tag, index)
    return tag


def build_path_selector(document: DomDocument, element: DomElement, config: EngineConfig = DEFAULT_CONFIG) -> str:
    """Walk towards ``<body>`` until the joined path is unique.

    Returns the deepest path built when the depth cap or the body is reached,
    even if it still matches several elements.
    """
    path: list[str] = []
    current: DomElement | None = element
    depth = 0
    while current is not None and not is_body(document, current) and depth < config.max_path_depth:
        path.insert(0, element_part(current, config))
        selector = " > ".join(path)
        if is_unique(document, selector):
            return selector
        current = current.parent
        depth += 1
    return " > ".join(path)


def generate(document: DomDocument, element: object, config: EngineConfig = DEFAULT_CONFIG) -> str | None:
    if element is None or not document.is_element(element):
        return None

    for name, strategy in STRATEGIES:
        selector = strategy(document, element, config)
        if selector:
            logger.debug("Selector from %s strategy: %s", name, selector)
            return selector

    selector = build_path_selector(document, element, config)
    logger.debug("Selector from path fallback: %s", selector)
    return selector or None


def generate_fallback_selectors(
    document: DomDocument, element: object, config: EngineConfig = DEFAULT_CONFIG
) -> list[str]:
    """Primary selector followed by every other strategy's answer, deduplicated."""
    if element is None or not document.is_element(element):
        return []

    selectors: list[str] = []
    primary = generate(document, element, config)
    if primary:
        selectors.append(primary)

    alternatives = (
        id_strategy(document, element, config),
        attribute_strategy(document, element, config),
        class_strategy(document, element, config),
        nth_of_type_strategy(document, element, config),
        build_path_selector(document, element, config),
    )
    for selector in alternatives:
        if selector and selector not in selectors:
            selectors.append(selector)
    return selectors
