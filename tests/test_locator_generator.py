from pinanchor.config import EngineConfig
from pinanchor.locator_generator import (
    build_path_selector,
    class_strategy,
    generate,
    generate_fallback_selectors,
    short_selector,
)
from pinanchor.soup_dom import SoupDocument
from pinanchor.validation import is_unique, validate


def _doc(body: str) -> SoupDocument:
    return SoupDocument.from_html(f"<html><body>{body}</body></html>")


def test_stable_unique_id_is_used_directly() -> None:
    document = _doc('<div id="stable-id">Content</div>')
    element = document.query_first("div")

    selector = generate(document, element)

    assert selector == "#stable-id"
    assert validate(document, "#stable-id", element)


def test_dynamic_id_is_skipped_in_favour_of_class() -> None:
    document = _doc('<div id="ember123" class="test-class">Content</div>')
    element = document.query_first("div")

    selector = generate(document, element)

    assert selector == "div.test-class"
    assert "ember123" not in selector


def test_test_id_attribute_is_preferred_over_class() -> None:
    document = _doc('<div data-testid="my-component" class="some-class">Content</div>')
    element = document.query_first("div")

    assert generate(document, element) == 'div[data-testid="my-component"]'


def test_attribute_priority_and_non_unique_fallthrough() -> None:
    document = _doc('<input type="text" placeholder="Search"><input type="text">')
    element = document.query_all("input")[0]

    # "type" comes before "placeholder" but matches both inputs.
    assert generate(document, element) == 'input[placeholder="Search"]'


def test_class_combination_after_single_classes_fail() -> None:
    document = _doc('<div class="card featured"></div><div class="card"></div><div class="featured"></div>')
    element = document.query_all("div")[0]

    assert class_strategy(document, element) == "div.card.featured"
    assert generate(document, element) == "div.card.featured"


def test_nth_of_type_uses_parent_short_selector() -> None:
    document = _doc('<ul id="menu"><li>One</li><li>Two</li><li>Three</li></ul>')
    element = document.query_all("li")[1]

    selector = generate(document, element)

    assert selector == "#menu > li:nth-of-type(2)"
    assert validate(document, selector, element)


def test_nth_of_type_with_attribute_parent() -> None:
    document = _doc('<nav data-testid="main-nav"><a>Home</a><a>About</a></nav>')
    element = document.query_all("a")[1]

    assert generate(document, element) == '[data-testid="main-nav"] > a:nth-of-type(2)'


def test_short_selector_stops_at_body() -> None:
    document = _doc("<p>x</p>")

    assert short_selector(document, document.body) is None
    assert short_selector(document, None) is None


def test_path_fallback_walks_up_until_unique() -> None:
    document = _doc(
        "<section><div><span>a</span></div></section>"
        "<section><div><span>b</span></div></section>"
    )
    element = document.query_all("span")[1]

    selector = generate(document, element)

    assert selector == "section:nth-of-type(2) > div:nth-of-type(1) > span:nth-of-type(1)"
    assert validate(document, selector, element)


def test_path_fallback_returns_non_unique_path_at_depth_cap() -> None:
    document = _doc("<div><p>x</p></div><div><p>y</p></div>")
    element = document.query_all("p")[1]
    config = EngineConfig(max_path_depth=1)

    selector = build_path_selector(document, element, config)

    assert selector == "p:nth-of-type(1)"
    assert not is_unique(document, selector)
    assert generate(document, element, config) == "p:nth-of-type(1)"


def test_unstable_classes_fall_through_to_position() -> None:
    document = _doc('<span class="a js-hook">x</span>')
    element = document.query_first("span")

    assert generate(document, element) == "span:nth-of-type(1)"


def test_generate_rejects_non_elements() -> None:
    document = _doc("<p>x</p>")

    assert generate(document, None) is None
    assert generate(document, "p") is None
    assert generate_fallback_selectors(document, None) == []


def test_special_characters_are_escaped() -> None:
    document = _doc('<div id="a.b">x</div><input name=\'say "hi"\'>')
    div = document.query_first("div")
    field = document.query_first("input")

    div_selector = generate(document, div)
    field_selector = generate(document, field)

    assert div_selector == "#a\\.b"
    assert field_selector == 'input[name="say \\"hi\\""]'
    assert validate(document, div_selector, div)
    assert validate(document, field_selector, field)


def test_fallback_selectors_are_deduplicated_in_preference_order() -> None:
    document = _doc(
        '<button id="save" data-testid="save-btn" class="btn primary">Save</button>'
        '<button class="btn">Cancel</button>'
    )
    element = document.query_first("#save")

    selectors = generate_fallback_selectors(document, element)

    assert selectors == [
        "#save",
        'button[data-testid="save-btn"]',
        "button.primary",
        "button#save",
    ]
    assert all(validate(document, selector, element) for selector in selectors)


def test_control_characters_in_attribute_values_are_escaped() -> None:
    document = _doc('<div><button title="Save\ndraft">x</button><button>y</button></div>')
    button = document.query_first("button")

    selector = generate(document, button)

    assert selector == 'button[title="Save\\a draft"]'
    assert validate(document, selector, button)
