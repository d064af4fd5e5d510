from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Article:
    id: int
    slug: str
    category: str
    category_color: str
    title: str
    description: str
    author_name: str
    date: date
    image: str
    read_time: int
    tags: Tuple[str, ...] = field(default_factory=tuple)

    # Optional presentation assets
    hero_image: Optional[str] = None
    author_avatar: Optional[str] = None
