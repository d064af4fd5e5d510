from __future__ import annotations

from datetime import date, timedelta

import pytest

from devocrazia.models import Article, ArticleCatalog


def make_article(i: int, **overrides) -> Article:
    fields = dict(
        id=i,
        slug=f"article-{i}",
        category="CSS",
        category_color="bg-category-css",
        title=f"Article {i}",
        description=f"Description of article {i}",
        author_name="John Doe",
        date=date(2023, 1, 1) + timedelta(days=i),
        image=f"/images/article-{i}.png",
        read_time=5,
        tags=(),
    )
    fields.update(overrides)
    return Article(**fields)


@pytest.fixture
def articles():
    return [
        make_article(1, title="A Guide to Modern CSS Layouts", category="CSS", tags=("CSS", "Flexbox", "Grid"), date=date(2023, 10, 26)),
        make_article(2, title="Getting Started with Docker", category="DEVOPS", tags=("Docker", "DevOps"), date=date(2023, 10, 24)),
        make_article(3, title="UI/UX Design Principles", category="UI/UX", tags=("Design",), date=date(2023, 10, 22), description="Hierarchy and feedback"),
        make_article(4, title="Optimizing Web Performance", category="PERFORMANCE", tags=("Performance", "Web Dev"), date=date(2023, 10, 20)),
        make_article(5, title="Optimizing LLM Inputs", category="AI", tags=("AI", "Optimization"), date=date(2025, 11, 15)),
    ]


@pytest.fixture
def catalog(articles):
    return ArticleCatalog(articles)


@pytest.fixture
def twelve_articles():
    return ArticleCatalog(make_article(i) for i in range(1, 13))
