import pytest

from pinanchor.similarity import string_similarity


def test_dice_coefficient_on_reference_pair() -> None:
    assert string_similarity("night", "nacht") == pytest.approx(0.25)


def test_identical_and_case_insensitive_strings() -> None:
    assert string_similarity("Save", "Save") == 1.0
    assert string_similarity("AB", "ab") == pytest.approx(1.0)


def test_missing_or_too_short_strings_score_zero() -> None:
    assert string_similarity(None, "abc") == 0.0
    assert string_similarity("abc", "") == 0.0
    assert string_similarity("a", "b") == 0.0
    assert string_similarity("a", "ab") == 0.0


def test_repeated_bigrams_are_not_over_counted() -> None:
    # "aaaa" has three "aa" bigrams, "aa" only one.
    assert string_similarity("aaaa", "aa") == pytest.approx(0.5)
