import pytest

from analysis.view_state import TableViewState
from processing.incidents import parse_incidents


@pytest.fixture
def records(csv_text_25):
    return parse_incidents(csv_text_25)


@pytest.fixture
def view(records):
    return TableViewState(records, page_size=10, filters=["all", "2023", "2025"])


def test_initial_state(view):
    assert view.active_filter == "all"
    assert view.current_page == 1
    assert view.total_pages == 3
    assert [r.name for r in view.visible_window] == [f"Person {i}" for i in range(1, 11)]


def test_filter_2023_end_to_end(view):
    assert view.set_filter("2023")
    assert view.total_pages == 2
    assert [r.name for r in view.visible_window] == [f"Person {i}" for i in range(1, 11)]

    assert not view.set_page(3)
    assert view.current_page == 1

    assert view.set_page(2)
    assert [r.name for r in view.visible_window] == ["Person 11", "Person 12"]


def test_same_filter_twice_keeps_page(view):
    view.set_page(3)
    assert not view.set_filter("all")
    assert view.current_page == 3


def test_new_filter_resets_page_even_if_page_exists(view):
    view.set_filter("2025")
    view.set_page(2)
    assert view.current_page == 2

    assert view.set_filter("all")
    assert view.current_page == 1


def test_invalid_page_requests_are_noops(view):
    for requested in (0, -1, 4, 1, "abc", None):
        assert not view.set_page(requested)
        assert view.current_page == 1


def test_unknown_filter_is_ignored(view):
    view.set_page(2)
    assert not view.set_filter("1999")
    assert view.active_filter == "all"
    assert view.current_page == 2


def test_last_page_is_partial(view):
    view.set_filter("2025")
    view.set_page(2)
    assert [r.name for r in view.visible_window] == ["Person 23", "Person 24", "Person 25"]
    assert view.window_start == 10


def test_empty_record_set():
    view = TableViewState([], page_size=10)
    assert view.total_pages == 0
    assert view.page_tokens == []
    assert view.visible_window == []
    assert not view.set_page(1)


def test_page_tokens_follow_state(records):
    view = TableViewState(records * 4, page_size=10)
    assert view.total_pages == 10
    view.set_page(6)
    assert view.page_tokens == [1, 2, "...", 5, 6, 7, "...", 9, 10]


def test_rejects_bad_page_size(records):
    with pytest.raises(ValueError):
        TableViewState(records, page_size=0)
