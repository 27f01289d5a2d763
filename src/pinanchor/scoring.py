from __future__ import annotations

BASE_CONFIDENCE = 50

# Only the first matching attribute family earns a bonus.
ATTRIBUTE_BONUSES: tuple[tuple[str, int], ...] = (
    ("[data-testid=", 30),
    ("[data-", 20),
    ("[aria-", 15),
)

ID_BONUS = 20
COMBINATOR_PENALTY = 5
NTH_PENALTY = 10


def get_confidence_score(selector: str) -> int:
    """Estimate how likely ``selector`` is to survive page changes, 0-100.

    Pure text analysis: the document is never consulted.
    """
    if not isinstance(selector, str):
        return 0

    score = BASE_CONFIDENCE

    for marker, bonus in ATTRIBUTE_BONUSES:
        if marker in selector:
            score += bonus
            break

    if "#" in selector and ":nth" not in selector:
        score += ID_BONUS

    score -= selector.count(">") * COMBINATOR_PENALTY
    score -= selector.count(":nth") * NTH_PENALTY

    return max(0, min(100, score))
