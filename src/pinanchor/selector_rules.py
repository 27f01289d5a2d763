from __future__ import annotations

import re
from typing import Iterable

# Ordered: framework prefixes, build-tool prefixes, then shape checks.
DYNAMIC_ID_PATTERNS = (
    re.compile(r"^ember\d+", re.IGNORECASE),
    re.compile(r"^react-", re.IGNORECASE),
    re.compile(r"^ng-", re.IGNORECASE),
    re.compile(r"^vue-", re.IGNORECASE),
    re.compile(r"^:r\d+:"),
    re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^js-", re.IGNORECASE),
    re.compile(r"^_"),
    re.compile(r"^yui_", re.IGNORECASE),
    re.compile(r"^ext-gen", re.IGNORECASE),
    re.compile(r"^gwt-", re.IGNORECASE),
)


def is_dynamic_id(value: str | None) -> bool:
    """Return True for ids and classes that look generated and unsafe to reuse."""
    if not value or not isinstance(value, str):
        return True
    return any(pattern.search(value) for pattern in DYNAMIC_ID_PATTERNS)


def stable_classes(classes: Iterable[str], min_length: int = 1) -> list[str]:
    return [cls for cls in classes if not is_dynamic_id(cls) and len(cls) > min_length]


def first_stable_class(classes: Iterable[str], min_length: int = 2) -> str | None:
    for cls in classes:
        if not is_dynamic_id(cls) and len(cls) > min_length:
            return cls
    return None


def css_escape(value: str) -> str:
    """Serialize ``value`` as a CSS identifier (CSSOM ``CSS.escape``)."""
    escaped: list[str] = []
    length = len(value)
    first = value[:1]
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            escaped.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            escaped.append(f"\\{code:x} ")
        elif index == 0 and char.isascii() and char.isdigit():
            escaped.append(f"\\{code:x} ")
        elif index == 1 and first == "-" and char.isascii() and char.isdigit():
            escaped.append(f"\\{code:x} ")
        elif index == 0 and char == "-" and length == 1:
            escaped.append("\\-")
        elif code >= 0x80 or char in "-_" or (char.isascii() and char.isalnum()):
            escaped.append(char)
        else:
            escaped.append(f"\\{char}")
    return "".join(escaped)


def escape_css_string(value: str) -> str:
    """Serialize ``value`` for use inside a double-quoted CSS string."""
    escaped: list[str] = []
    for char in value:
        code = ord(char)
        if code == 0:
            escaped.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            escaped.append(f"\\{code:x} ")
        elif char in '"\\':
            escaped.append(f"\\{char}")
        else:
            escaped.append(char)
    return "".join(escaped)


def id_selector(value: str) -> str:
    return f"#{css_escape(value)}"


def class_selector(tag: str, classes: Iterable[str]) -> str:
    return tag + "".join(f".{css_escape(cls)}" for cls in classes)


def attribute_selector(tag: str, attr: str, value: str) -> str:
    return f'{tag}[{attr}="{escape_css_string(value)}"]'


def nth_of_type_selector(tag: str, index: int) -> str:
    return f"{tag}:nth-of-type({index})"
