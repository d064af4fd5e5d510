from datetime import date

import pytest

from devocrazia.listing import sort_articles
from devocrazia.listing.sorting import title_collation_key

from .conftest import make_article


def test_recent_and_oldest_are_reverses(articles):
    recent = sort_articles(articles, "recent")
    oldest = sort_articles(articles, "oldest")
    assert [a.id for a in recent] == [5, 1, 2, 3, 4]
    assert recent == list(reversed(oldest))


def test_sort_returns_new_list(articles):
    original = list(articles)
    sort_articles(articles, "title")
    assert articles == original


def test_title_sort_is_idempotent(articles):
    once = sort_articles(articles, "title")
    assert sort_articles(once, "title") == once
    assert [a.title for a in once][:2] == ["A Guide to Modern CSS Layouts", "Getting Started with Docker"]


def test_title_sort_ignores_case_and_accents():
    items = [
        make_article(1, title="zebra"),
        make_article(2, title="Élan"),
        make_article(3, title="apple"),
    ]
    assert [a.title for a in sort_articles(items, "title")] == ["apple", "Élan", "zebra"]
    assert title_collation_key("Élan") == "elan"


def test_equal_dates_keep_input_order():
    same_day = date(2024, 1, 1)
    items = [make_article(i, date=same_day) for i in (3, 1, 2)]
    assert [a.id for a in sort_articles(items, "recent")] == [3, 1, 2]
    assert [a.id for a in sort_articles(items, "oldest")] == [3, 1, 2]


def test_unknown_sort_key_raises(articles):
    with pytest.raises(ValueError):
        sort_articles(articles, "popular")
