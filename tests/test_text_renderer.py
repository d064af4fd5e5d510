from datetime import date

from devocrazia.output.formatter import format_long_date, format_short_date
from devocrazia.render import parse_document, render_text


def test_headings_and_paragraphs():
    text = render_text(parse_document("# Title\n\nSome *body* with a [link](https://x.test).\n\n## Part"))
    assert text.splitlines() == [
        "TITLE",
        "=====",
        "",
        "Some body with a link <https://x.test>.",
        "",
        "Part",
        "----",
    ]


def test_lists_quotes_and_code():
    src = "1. one\n2. two\n\n> said\n\n```sh\nls -la\n```"
    lines = render_text(parse_document(src)).splitlines()
    assert lines[:2] == ["1. one", "2. two"]
    assert "> said" in lines
    assert "--- sh ---" in lines
    assert "    ls -la" in lines


def test_table_columns_are_aligned():
    lines = render_text(parse_document("| a | bb |\n|---|---:|\n| ccc | d |")).splitlines()
    assert lines == ["| a   | bb |", "|-----|----|", "| ccc |  d |"]


def test_color_output_keeps_code_text():
    text = render_text(parse_document("```python\nx = 1\n```"), color=True)
    assert "\x1b[" in text
    assert "1" in text


def test_date_formats():
    assert format_short_date(date(2023, 10, 6)) == "Oct 06, 2023"
    assert format_long_date(date(2023, 10, 6)) == "October 6, 2023"
