from pinanchor.selector_parser import parse_selector


def test_parse_full_compound_selector() -> None:
    descriptor = parse_selector('button.btn.primary[data-testid="save"]:nth-of-type(2)')

    assert descriptor.tag_name == "button"
    assert descriptor.id is None
    assert descriptor.classes == ["btn", "primary"]
    assert descriptor.attributes == {"data-testid": "save"}
    assert descriptor.nth_index == 2


def test_parse_id_and_path_selectors() -> None:
    assert parse_selector("#main-content").id == "main-content"
    assert parse_selector("#main-content").tag_name is None

    descriptor = parse_selector("DIV#app > ul li:nth-child(3)")
    assert descriptor.tag_name == "div"
    assert descriptor.id == "app"
    assert descriptor.nth_index == 3


def test_presence_only_attributes_become_markers() -> None:
    assert parse_selector("[disabled]").attributes == {"disabled": True}
    assert parse_selector('[data-x=""]').attributes == {"data-x": True}


def test_parser_is_tolerant_of_garbage() -> None:
    assert parse_selector("]]][[").is_empty()
    assert parse_selector(None).is_empty()
    assert parse_selector("").is_empty()
