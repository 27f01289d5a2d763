from __future__ import annotations

import re

from .models import SelectorDescriptor

_TAG_PATTERN = re.compile(r"^(\w+)", re.ASCII)
_ID_PATTERN = re.compile(r"#([^\s.#\[:]+)")
_CLASS_PATTERN = re.compile(r"\.([^\s.#\[:]+)")
_ATTRIBUTE_PATTERN = re.compile(r'\[([^\]=]+)(?:="([^"]*)")?\]')
_NTH_PATTERN = re.compile(r":nth-(?:child|of-type)\((\d+)\)")


def parse_selector(text: str | None) -> SelectorDescriptor:
    """Split a selector into the pieces the matcher scores against.

    This is a lenient regex scan, not a CSS parser: combinators are ignored and
    every fragment found anywhere in the text is collected. An empty attribute
    value is recorded as a presence-only marker.
    """
    descriptor = SelectorDescriptor()
    if not text or not isinstance(text, str):
        return descriptor

    tag_match = _TAG_PATTERN.match(text)
    if tag_match:
        descriptor.tag_name = tag_match.group(1).lower()

    id_match = _ID_PATTERN.search(text)
    if id_match:
        descriptor.id = id_match.group(1)

    descriptor.classes = _CLASS_PATTERN.findall(text)

    for match in _ATTRIBUTE_PATTERN.finditer(text):
        descriptor.attributes[match.group(1)] = match.group(2) or True

    nth_match = _NTH_PATTERN.search(text)
    if nth_match:
        descriptor.nth_index = int(nth_match.group(1))

    return descriptor
