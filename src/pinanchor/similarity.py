from __future__ import annotations


def _bigrams(value: str) -> list[str]:
    return [value[index : index + 2] for index in range(len(value) - 1)]


def string_similarity(left: str | None, right: str | None) -> float:
    """Sorensen-Dice coefficient over character bigrams, case-insensitive.

    Repeated bigrams only match as many times as they occur on both sides.
    """
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0

    first = left.lower()
    second = right.lower()
    if len(first) < 2 or len(second) < 2:
        return 0.0

    counts: dict[str, int] = {}
    for bigram in _bigrams(first):
        counts[bigram] = counts.get(bigram, 0) + 1

    intersection = 0
    for bigram in _bigrams(second):
        remaining = counts.get(bigram, 0)
        if remaining > 0:
            counts[bigram] = remaining - 1
            intersection += 1

    return (2 * intersection) / (len(first) + len(second) - 2)
