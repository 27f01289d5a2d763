from unittest.mock import MagicMock

from playwright.sync_api import Error as PlaywrightError

from pinanchor.config import EngineConfig
from pinanchor.dom import InvalidSelectorError
from pinanchor.matcher import find_best_match, find_candidates
from pinanchor.page_dom import PageDocument, PageElement
from pinanchor.selector_parser import parse_selector
from pinanchor.validation import is_unique, validate, validate_selector


def _handle(snapshot: dict) -> MagicMock:
    handle = MagicMock()
    handle.evaluate.return_value = snapshot
    return handle


def test_page_element_reads_snapshot_once() -> None:
    page = MagicMock()
    handle = _handle(
        {
            "tag": "button",
            "id": "save",
            "classes": ["btn", "primary"],
            "attributes": {"id": "save", "data-testid": "save-btn", "disabled": ""},
        }
    )
    element = PageElement(page, handle)

    assert element.tag == "button"
    assert element.id == "save"
    assert element.classes == ["btn", "primary"]
    assert element.get_attribute("data-testid") == "save-btn"
    assert element.get_attribute("missing") is None
    assert element.has_attribute("disabled")
    assert handle.evaluate.call_count == 1


def test_detached_element_reads_as_empty() -> None:
    handle = MagicMock()
    handle.evaluate.side_effect = PlaywrightError("Element is not attached to the DOM")
    handle.evaluate_handle.side_effect = PlaywrightError("Element is not attached to the DOM")
    element = PageElement(MagicMock(), handle)

    assert element.tag == ""
    assert element.classes == []
    assert element.text == ""
    assert element.parent is None
    assert element.children == []


def test_identity_is_checked_inside_the_page() -> None:
    page = MagicMock()
    page.evaluate.return_value = True
    left = PageElement(page, MagicMock())
    right = PageElement(page, MagicMock())

    assert left.same_as(right)
    assert left.same_as(left)
    assert not left.same_as(object())

    page.evaluate.side_effect = PlaywrightError("Target closed")
    assert not left.same_as(right)


def _array(*element_handles) -> MagicMock:
    """In-page array handle whose entries resolve to the given element handles."""
    properties = {}
    for index, element_handle in enumerate(element_handles):
        entry = MagicMock()
        entry.as_element.return_value = element_handle
        properties[str(index)] = entry
    length = MagicMock()
    length.as_element.return_value = None
    properties["length"] = length
    array = MagicMock()
    # Insertion order differs from index order on purpose.
    array.get_properties.return_value = dict(reversed(list(properties.items())))
    return array


def test_query_runs_document_query_selector_all_in_page() -> None:
    page = MagicMock()
    first, second = MagicMock(), MagicMock()
    array = _array(first, second)
    page.evaluate_handle.return_value = array
    document = PageDocument(page)

    matches = document.query_all("button.primary")

    assert [item.handle for item in matches] == [first, second]
    assert all(document.is_element(item) for item in matches)
    script, selector = page.evaluate_handle.call_args.args
    assert "document.querySelectorAll" in script
    assert selector == "button.primary"
    page.query_selector_all.assert_not_called()
    array.dispose.assert_called_once()


def test_query_first_returns_none_and_releases_empty_handle() -> None:
    page = MagicMock()
    empty = MagicMock()
    empty.as_element.return_value = None
    page.evaluate_handle.return_value = empty
    document = PageDocument(page)

    assert document.query_first("li") is None
    empty.dispose.assert_called_once()
    assert "document.querySelector(" in page.evaluate_handle.call_args.args[0]


def test_browser_syntax_errors_become_invalid_selector_errors() -> None:
    page = MagicMock()
    page.evaluate_handle.side_effect = PlaywrightError(
        "SyntaxError: Failed to execute 'querySelectorAll' on 'Document': 'div >> p' is not a valid selector."
    )
    document = PageDocument(page)

    try:
        document.query_all("div >> p")
    except InvalidSelectorError as exc:
        assert exc.selector == "div >> p"
    else:
        raise AssertionError("expected InvalidSelectorError")

    assert not is_unique(document, "div >> p")
    assert not validate(document, "div >> p", PageElement(page, MagicMock()))
    assert not validate_selector("div >> p", document).valid


def test_candidates_are_collected_in_one_round_trip() -> None:
    page = MagicMock()
    handles = [MagicMock() for _ in range(3)]
    array = _array(*handles)
    page.evaluate_handle.return_value = array
    document = PageDocument(page)

    candidates = find_candidates(document, parse_selector('div.card[data-x="1"]'), EngineConfig(candidate_limit=3))

    assert [item.handle for item in candidates] == handles
    assert page.evaluate_handle.call_count == 1
    _, payload = page.evaluate_handle.call_args.args
    assert payload == {"tag": "div", "classes": ["card"], "names": ["data-x"], "limit": 3}
    array.dispose.assert_called_once()
    for handle in handles:
        handle.evaluate.assert_not_called()


def test_candidate_collection_failure_yields_no_candidates() -> None:
    page = MagicMock()
    page.evaluate_handle.side_effect = PlaywrightError("Target closed")

    assert find_best_match(PageDocument(page), "div.card") is None


def test_children_keep_index_order_and_release_array() -> None:
    page = MagicMock()
    handle = MagicMock()
    first, second = MagicMock(), MagicMock()
    array = _array(first, second)
    handle.evaluate_handle.return_value = array

    children = PageElement(page, handle).children

    assert [child.handle for child in children] == [first, second]
    array.dispose.assert_called_once()
