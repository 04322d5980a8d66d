import pytest

from processing.csv_parser import parse_delimited_text, quote_field


def test_simple_rows():
    assert parse_delimited_text("a,b,c\n1,2,3\n") == [["a", "b", "c"], ["1", "2", "3"]]


def test_crlf_does_not_produce_empty_rows():
    assert parse_delimited_text("a,b\r\n1,2\r\n3,4\r\n") == [["a", "b"], ["1", "2"], ["3", "4"]]


def test_bare_cr_ends_a_row():
    assert parse_delimited_text("a,b\r1,2") == [["a", "b"], ["1", "2"]]


def test_final_row_without_terminator():
    assert parse_delimited_text("a,b\n1,2") == [["a", "b"], ["1", "2"]]


def test_trailing_empty_field_is_kept():
    assert parse_delimited_text("a,b,\n") == [["a", "b", ""]]


def test_quoted_field_with_delimiter_newline_and_quotes():
    text = 'name,brief\nx,"He said ""stop"", then\nleft"\n'
    assert parse_delimited_text(text) == [["name", "brief"], ["x", 'He said "stop", then\nleft']]


def test_quoted_crlf_is_preserved():
    assert parse_delimited_text('"a\r\nb",c\r\n') == [["a\r\nb", "c"]]


@pytest.mark.parametrize(
    "value",
    ["plain", "with, comma", "line\nbreak", 'say "hi"', '"', ",,", "mixed, \"all\"\r\nthree"],
)
def test_quoted_field_round_trip(value):
    text = f"{quote_field(value)},tail\n"
    assert parse_delimited_text(text) == [[value, "tail"]]


def test_blank_rows_dropped():
    text = "a,b\n\n , \n1,2\n,\n"
    assert parse_delimited_text(text) == [["a", "b"], ["1", "2"]]


def test_ragged_rows_pass_through():
    assert parse_delimited_text("a,b,c\n1\n1,2,3,4\n") == [["a", "b", "c"], ["1"], ["1", "2", "3", "4"]]


def test_unterminated_quote_keeps_accumulated_text():
    assert parse_delimited_text('a,"open field\nstill open') == [["a", "open field\nstill open"]]


def test_empty_input():
    assert parse_delimited_text("") == []
    assert parse_delimited_text("\n\r\n") == []


def test_quote_field_leaves_plain_values_alone():
    assert quote_field("Dhaka") == "Dhaka"
    assert quote_field('a"b') == '"a""b"'
