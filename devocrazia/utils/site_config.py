from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CATALOG_PATH = PACKAGE_DIR / "data" / "articles.yaml"
DEFAULT_CONTENT_BASE = str(PACKAGE_DIR / "content" / "articles")

DEFAULT_PAGE_SIZE = 5
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_COPY_RESET_SECONDS = 2.0


@dataclass(slots=True)
class SiteConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    content_base: str = DEFAULT_CONTENT_BASE
    catalog_path: str = str(DEFAULT_CATALOG_PATH)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    copy_reset_seconds: float = DEFAULT_COPY_RESET_SECONDS

    @classmethod
    def from_env(cls) -> "SiteConfig":
        return cls(
            page_size=int(os.getenv("DEVOCRAZIA_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            content_base=os.getenv("DEVOCRAZIA_CONTENT_BASE", DEFAULT_CONTENT_BASE),
            catalog_path=os.getenv("DEVOCRAZIA_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)),
            fetch_timeout=float(os.getenv("DEVOCRAZIA_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT))),
            copy_reset_seconds=float(
                os.getenv("DEVOCRAZIA_COPY_RESET_SECONDS", str(DEFAULT_COPY_RESET_SECONDS))
            ),
        )
