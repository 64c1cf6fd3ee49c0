"""Shared pytest fixtures for bookgen tests.

Fixtures are organized by category:
- Path fixtures: On-disk templates and corpus
- Configuration fixtures: Configs pointing at temporary output
- Model fixtures: In-memory books for renderer tests
"""

import shutil
from pathlib import Path
from typing import Any

import pytest

from bookgen.config import BookgenConfig, PathsConfig, RenderConfig, SiteConfig
from bookgen.models.book import Article, Book, Chapter
from bookgen.render.sink import RenderSink
from bookgen.render.stats import RenderStats
from bookgen.sitemap import SitemapCollector
from bookgen.templates.cache import TemplateCache
from tests.fixtures import BOOKS_DIR, FIXTURES_DIR, TEMPLATES_DIR

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def fixture_templates_dir() -> Path:
    """Return the path to the fixture templates."""
    return TEMPLATES_DIR


@pytest.fixture
def fixture_books_dir() -> Path:
    """Return the path to the fixture corpus."""
    return BOOKS_DIR


@pytest.fixture
def templates_dir(tmp_path: Path, fixture_templates_dir: Path) -> Path:
    """Writable copy of the fixture templates."""
    dest = tmp_path / "tmpl"
    shutil.copytree(fixture_templates_dir, dest)
    return dest


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Site output directory (not created)."""
    return tmp_path / "www"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config(templates_dir: Path, output_dir: Path, fixture_books_dir: Path) -> BookgenConfig:
    """Config rendering into a temporary directory without minification."""
    return BookgenConfig(
        site=SiteConfig(base_url="https://books.example.com", analytics="<!-- ga -->"),
        paths=PathsConfig(
            books=str(fixture_books_dir),
            templates=str(templates_dir),
            output=str(output_dir),
        ),
        render=RenderConfig(minify=False, concurrency=2),
    )


@pytest.fixture
def full_config_dict() -> dict[str, Any]:
    """Return a complete bookgen configuration with all options."""
    return {
        "site": {
            "base_url": "https://books.example.com",
            "github_url": "https://github.com/example/books",
            "github_text": "Source",
            "analytics": "<script>ga()</script>",
            "path_app_js": "/static/app.js",
            "path_main_css": "/static/main.css",
        },
        "paths": {
            "books": "content",
            "templates": "templates",
            "output": "public",
        },
        "render": {
            "minify": False,
            "concurrency": 4,
            "disabled_templates": ["index-grid.tmpl.html"],
        },
    }


# =============================================================================
# Render Fixtures
# =============================================================================


@pytest.fixture
def stats() -> RenderStats:
    return RenderStats()


@pytest.fixture
def sitemap() -> SitemapCollector:
    return SitemapCollector()


@pytest.fixture
def cache(templates_dir: Path) -> TemplateCache:
    return TemplateCache(templates_dir)


@pytest.fixture
def sink(cache: TemplateCache, stats: RenderStats) -> RenderSink:
    return RenderSink(cache, stats)


# =============================================================================
# Model Fixtures
# =============================================================================


def make_book(
    chapters: int = 3,
    articles: int = 2,
    slug: str = "go",
    images: list[Path] | None = None,
) -> Book:
    """Build an in-memory book with numbered chapters and articles."""
    return Book(
        title=slug.capitalize(),
        slug=slug,
        chapters=[
            Chapter(
                title=f"Chapter {c}",
                slug=f"chapter-{c}",
                articles=[
                    Article(
                        title=f"Article {c}.{a}",
                        slug=f"article-{a}",
                        body_html=f"<p>Body {c}.{a}</p>",
                    )
                    for a in range(1, articles + 1)
                ],
                images=list(images or []) if c == 1 else [],
            )
            for c in range(1, chapters + 1)
        ],
    )


@pytest.fixture
def book() -> Book:
    """A book with 3 chapters of 2 articles each."""
    return make_book()
