from datetime import date
from pathlib import Path

import pytest

from devocrazia.utils.catalog_loader import CatalogError, build_catalog, load_catalog
from devocrazia.utils.site_config import DEFAULT_CATALOG_PATH, DEFAULT_CONTENT_BASE


def _entry(**overrides):
    entry = {
        "id": 1,
        "slug": "hello-world",
        "category": "CSS",
        "title": "Hello",
        "description": "World",
        "date": "2023-10-26",
        "read_time": 5,
        "tags": ["CSS"],
    }
    entry.update(overrides)
    return entry


def test_bundled_catalog_loads():
    catalog = load_catalog(DEFAULT_CATALOG_PATH)
    assert len(catalog) == 5
    css = catalog.find_by_slug("a-guide-to-modern-css-layouts")
    assert css is not None
    assert css.category == "CSS"
    assert css.date == date(2023, 10, 26)
    assert css.tags == ("CSS", "Flexbox", "Grid")


def test_every_bundled_article_has_a_body():
    for article in load_catalog(DEFAULT_CATALOG_PATH):
        assert (Path(DEFAULT_CONTENT_BASE) / f"{article.slug}.md").is_file()


def test_build_catalog_coerces_fields():
    catalog = build_catalog([_entry()])
    article = catalog.find_by_slug("hello-world")
    assert article.date == date(2023, 10, 26)
    assert article.tags == ("CSS",)
    assert article.hero_image is None
    assert "hello-world" in catalog
    assert catalog.find_by_slug("missing") is None


@pytest.mark.parametrize(
    "entry",
    [
        _entry(slug="Not A Slug"),
        _entry(id="1"),
        _entry(id=True),
        _entry(read_time=0),
        _entry(date="26/10/2023"),
        _entry(tags="CSS"),
        {k: v for k, v in _entry().items() if k != "title"},
    ],
)
def test_invalid_entries_raise(entry):
    with pytest.raises(CatalogError):
        build_catalog([entry])


def test_duplicate_ids_and_slugs_are_rejected():
    with pytest.raises(CatalogError, match="Duplicate article id"):
        build_catalog([_entry(), _entry(slug="other")])
    with pytest.raises(CatalogError, match="Duplicate article slug"):
        build_catalog([_entry(), _entry(id=2)])


def test_load_catalog_errors(tmp_path):
    with pytest.raises(CatalogError, match="not found"):
        load_catalog(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("articles: [unclosed", encoding="utf-8")
    with pytest.raises(CatalogError, match="not valid YAML"):
        load_catalog(bad)

    not_list = tmp_path / "not_list.yaml"
    not_list.write_text("articles: {a: 1}\n", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(not_list)


def test_load_catalog_from_yaml(tmp_path):
    path = tmp_path / "articles.yaml"
    path.write_text(
        "articles:\n"
        "  - id: 7\n"
        "    slug: seven\n"
        "    category: AI\n"
        "    title: Seven\n"
        "    description: The seventh\n"
        "    date: 2024-02-29\n"
        "    read_time: 3\n",
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    assert [a.id for a in catalog] == [7]
    assert catalog.articles[0].date == date(2024, 2, 29)
