import pytest

from processing.data_utils import missing_columns, normalize_header
from processing.errors import MissingColumnsError
from processing.incidents import REQUIRED_COLUMNS, map_rows, parse_incidents
from processing.models import Spontaneity

from conftest import HEADERS, make_csv


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Accused Of ", "accused_of"),
        ("Source URL #1", "source_url_1"),
        ("Cause-of--Death", "cause_of_death"),
        ("__Year Sheet__", "year_sheet"),
        ("News/Brief", "news_brief"),
        ("!!!", ""),
        ("", ""),
    ],
)
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


@pytest.mark.parametrize("raw", ["Accused Of", "Source URL 1", "***x***", "a  b"])
def test_normalize_header_idempotent(raw):
    once = normalize_header(raw)
    assert normalize_header(once) == once


def test_parse_incidents_maps_every_field():
    text = make_csv(
        [
            {
                "District": "Chittagong",
                "Date": "2025-03-04",
                "Name": "A. Rahman",
                "Age": "about 30",
                "News Brief": "Beaten, then \"handed over\"",
                "Source URL 1": "https://example.org/a",
                "Source URL 2": "",
                "Year Sheet": " 2025 ",
                "Spontaneous Mob": "YES",
            }
        ]
    )
    [record] = parse_incidents(text)

    assert record.district == "Chittagong"
    assert record.district_key == "chattogram"
    assert record.age == "about 30"
    assert record.news_brief == 'Beaten, then "handed over"'
    assert record.source_url_1 == "https://example.org/a"
    assert record.source_url_2 == ""
    assert record.year_sheet == "2025"
    assert record.spontaneous is Spontaneity.YES


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("yes", Spontaneity.YES),
        (" No ", Spontaneity.NO),
        ("", Spontaneity.INDETERMINATE),
        ("unsure", Spontaneity.INDETERMINATE),
        ("unknown", Spontaneity.INDETERMINATE),
        ("yes?", Spontaneity.INDETERMINATE),
    ],
)
def test_spontaneity_is_ternary(cell, expected):
    [record] = parse_incidents(make_csv([{"Spontaneous Mob": cell}]))
    assert record.spontaneous is expected


def test_spontaneity_labels():
    assert [s.label for s in Spontaneity] == ["Yes", "No", "Unavailable"]


def test_alternate_narrative_spelling():
    headers = [h if h != "News Brief" else "New Brief" for h in HEADERS]
    [record] = parse_incidents(make_csv([{"New Brief": "Narrative"}], headers=headers))
    assert record.news_brief == "Narrative"


def test_short_rows_default_to_empty_strings():
    text = make_csv([]) + "Dhaka,2023-05-01,Someone\n"
    [record] = parse_incidents(text)
    assert record.name == "Someone"
    assert record.year_sheet == ""
    assert record.source_url_2 == ""
    assert record.spontaneous is Spontaneity.INDETERMINATE


def test_missing_columns_reports_all_at_once():
    headers = [h for h in HEADERS if h not in ("Age", "Year Sheet", "News Brief")]
    with pytest.raises(MissingColumnsError) as excinfo:
        parse_incidents(make_csv([{}], headers=headers))

    assert excinfo.value.missing == ["age", "year_sheet", "news_brief (or new_brief)"]
    assert str(excinfo.value) == "Missing CSV columns: age, year_sheet, news_brief (or new_brief)"


def test_missing_columns_helper():
    assert missing_columns(REQUIRED_COLUMNS + ["news_brief"], REQUIRED_COLUMNS, [("news_brief", "new_brief")]) == []
    assert missing_columns([], ["a", "b"]) == ["a", "b"]


def test_header_only_source_is_validated():
    with pytest.raises(MissingColumnsError):
        parse_incidents("date,name\n")
    assert parse_incidents(make_csv([])) == []


def test_empty_source_yields_no_records():
    assert parse_incidents("") == []


def test_map_rows_keeps_source_order():
    headers = [normalize_header(h) for h in HEADERS]
    rows = [["Dhaka", "", f"P{i}"] for i in range(5)]
    assert [r.name for r in map_rows(headers, rows)] == ["P0", "P1", "P2", "P3", "P4"]


def test_records_are_immutable():
    [record] = parse_incidents(make_csv([{}]))
    with pytest.raises(AttributeError):
        record.name = "changed"
