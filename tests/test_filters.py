from devocrazia.listing import (
    ALL,
    available_categories,
    available_tags,
    category_counts,
    filter_articles,
    has_active_filters,
)


def test_no_filters_returns_everything_in_order(articles):
    assert filter_articles(articles) == articles
    assert filter_articles(articles, query="", category=ALL, tag=ALL) == articles


def test_query_is_case_insensitive_over_title_description_and_tags(articles):
    assert [a.id for a in filter_articles(articles, query="docker")] == [2]
    assert [a.id for a in filter_articles(articles, query="HIERARCHY")] == [3]
    # "flex" only appears in a tag
    assert [a.id for a in filter_articles(articles, query="flex")] == [1]
    # Substring of titles and tags across several articles, input order kept
    assert [a.id for a in filter_articles(articles, query="optimiz")] == [4, 5]


def test_category_is_exact_and_case_sensitive(articles):
    assert [a.id for a in filter_articles(articles, category="CSS")] == [1]
    assert filter_articles(articles, category="css") == []


def test_tag_filter_is_membership(articles):
    assert [a.id for a in filter_articles(articles, tag="Grid")] == [1]
    assert filter_articles(articles, tag="Gri") == []


def test_predicates_combine(articles):
    assert [a.id for a in filter_articles(articles, query="optimizing", category="AI")] == [5]
    assert filter_articles(articles, query="docker", category="CSS") == []


def test_category_partition_covers_catalog_without_duplicates(articles):
    seen = []
    for cat in available_categories(articles):
        seen.extend(filter_articles(articles, category=cat))
    assert sorted(a.id for a in seen) == sorted(a.id for a in articles)
    assert len(seen) == len(set(a.id for a in seen))


def test_available_values_keep_first_seen_order(articles):
    assert available_categories(articles) == ["CSS", "DEVOPS", "UI/UX", "PERFORMANCE", "AI"]
    assert available_tags(articles)[:4] == ["CSS", "Flexbox", "Grid", "Docker"]


def test_category_counts(articles, twelve_articles):
    assert category_counts(articles)["CSS"] == 1
    assert category_counts(twelve_articles) == {"CSS": 12}


def test_has_active_filters():
    assert not has_active_filters()
    assert has_active_filters(query="x")
    assert has_active_filters(category="CSS")
    assert has_active_filters(tag="Grid")
