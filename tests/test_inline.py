from devocrazia.render.blocks import (
    CodeSpan,
    Emphasis,
    Image,
    LineBreak,
    Link,
    Strikethrough,
    Strong,
    Text,
)
from devocrazia.render.inline import parse_inline


def test_plain_text():
    assert parse_inline("just words") == (Text("just words"),)


def test_emphasis_and_strong():
    assert parse_inline("*a* **b** _c_ __d__") == (
        Emphasis((Text("a"),)),
        Text(" "),
        Strong((Text("b"),)),
        Text(" "),
        Emphasis((Text("c"),)),
        Text(" "),
        Strong((Text("d"),)),
    )


def test_nested_strong_inside_emphasis():
    assert parse_inline("***both***") == (Emphasis((Strong((Text("both"),)),)),)


def test_intraword_underscore_is_literal():
    assert parse_inline("snake_case_name") == (Text("snake_case_name"),)


def test_unmatched_delimiters_stay_text():
    assert parse_inline("2 * 3 = 6") == (Text("2 * 3 = 6"),)
    assert parse_inline("**open") == (Text("**open"),)


def test_strikethrough():
    assert parse_inline("~~gone~~ kept") == (Strikethrough((Text("gone"),)), Text(" kept"))
    assert parse_inline("~~~three~~~") == (Text("~~~three~~~"),)


def test_code_span_is_literal():
    assert parse_inline("use `a *b* c`") == (Text("use "), CodeSpan("a *b* c"))
    assert parse_inline("`` a`b ``") == (CodeSpan("a`b"),)
    assert parse_inline("`open") == (Text("`open"),)


def test_backslash_escapes():
    assert parse_inline(r"\*not emphasis\*") == (Text("*not emphasis*"),)


def test_hard_breaks():
    assert parse_inline("one  \ntwo") == (Text("one"), LineBreak(), Text("two"))
    assert parse_inline("one\\\ntwo") == (Text("one"), LineBreak(), Text("two"))
    assert parse_inline("one\ntwo") == (Text("one\ntwo"),)


def test_inline_link_with_title():
    (link,) = parse_inline('[MDN](https://developer.mozilla.org "Docs")')
    assert link == Link(href="https://developer.mozilla.org", children=(Text("MDN"),), title="Docs")


def test_link_destination_with_parentheses():
    (link,) = parse_inline("[wiki](https://en.wikipedia.org/wiki/Foo_(bar))")
    assert link.href == "https://en.wikipedia.org/wiki/Foo_(bar)"


def test_link_text_keeps_formatting():
    (link,) = parse_inline("[**bold** link](/x)")
    assert link.children == (Strong((Text("bold"),)), Text(" link"))


def test_links_do_not_nest():
    nodes = parse_inline("[a [b](/inner) c](/outer)")
    outer = [n for n in nodes if isinstance(n, Link)]
    assert len(outer) == 1
    assert outer[0].href == "/outer"


def test_image():
    assert parse_inline('![alt *text*](/img.png "t")') == (Image(src="/img.png", alt="alt text", title="t"),)


def test_autolinks():
    assert parse_inline("<https://example.com/a>") == (
        Link(href="https://example.com/a", children=(Text("https://example.com/a"),)),
    )
    assert parse_inline("<me@example.com>") == (
        Link(href="mailto:me@example.com", children=(Text("me@example.com"),)),
    )
    assert parse_inline("a < b") == (Text("a < b"),)


def test_bracket_without_destination_is_text():
    assert parse_inline("[not a link]") == (Text("[not a link]"),)


def test_reference_link():
    refs = {"docs": ("https://example.com", None)}
    assert parse_inline("[Docs]", refs) == (Link(href="https://example.com", children=(Text("Docs"),)),)
