"""Corpus loading.

Each book lives in its own directory with a book.yaml description:

    title: "Go"
    slug: "go"                # optional, defaults to the directory name
    chapters:
      - title: "Maps"
        slug: "maps"
        images: ["img/map.png"]
        articles:
          - title: "Iterate keys"
            slug: "iterate-keys"
            file: "maps/iterate-keys.html"   # or inline `body:`

Article bodies are already-rendered HTML. Relative paths are resolved
against the book directory.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from bookgen.errors import CorpusError
from bookgen.models.book import Article, Book, Chapter

logger = logging.getLogger(__name__)

BOOK_FILE_NAME = "book.yaml"

# Chapter pages are written to <chapter>/index.html
RESERVED_ARTICLE_SLUG = "index"

_SLUG_INVALID_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Turn a title into a URL-safe slug."""
    slug = _SLUG_INVALID_RE.sub("-", text.lower()).strip("-")
    return slug or "untitled"


def _require_list(value: Any, what: str, path: Path) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise CorpusError(path, f"{what} must be a list")
    return value


def _load_article(data: Any, book_dir: Path, path: Path) -> Article:
    if not isinstance(data, dict) or "title" not in data:
        raise CorpusError(path, f"article entry needs a title: {data!r}")

    title = str(data["title"])
    if "file" in data:
        body_path = book_dir / data["file"]
        try:
            body = body_path.read_text(encoding="utf-8")
        except OSError as e:
            raise CorpusError(path, f"cannot read article body {body_path}: {e}") from e
    else:
        body = str(data.get("body", ""))

    return Article(title=title, slug=str(data.get("slug") or slugify(title)), body_html=body)


def _load_chapter(data: Any, book_dir: Path, path: Path) -> Chapter:
    if not isinstance(data, dict) or "title" not in data:
        raise CorpusError(path, f"chapter entry needs a title: {data!r}")

    title = str(data["title"])
    articles = [
        _load_article(a, book_dir, path)
        for a in _require_list(data.get("articles"), "articles", path)
    ]
    slugs = [a.slug for a in articles]
    if RESERVED_ARTICLE_SLUG in slugs:
        raise CorpusError(
            path, f"article slug '{RESERVED_ARTICLE_SLUG}' is reserved (chapter {title})"
        )
    duplicates = sorted({s for s in slugs if slugs.count(s) > 1})
    if duplicates:
        raise CorpusError(
            path, f"duplicate article slugs in chapter {title}: {', '.join(duplicates)}"
        )

    images = [
        book_dir / str(p) for p in _require_list(data.get("images"), "images", path)
    ]
    return Chapter(
        title=title,
        slug=str(data.get("slug") or slugify(title)),
        articles=articles,
        images=images,
    )


def load_book(book_dir: Path) -> Book:
    """Load one book from its directory.

    Args:
        book_dir: Directory containing book.yaml

    Returns:
        Book with chapters and articles attached

    Raises:
        CorpusError: If book.yaml is missing or malformed
    """
    path = book_dir / BOOK_FILE_NAME
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise CorpusError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise CorpusError(path, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise CorpusError(path, "top level must be a mapping")
    if "title" not in data:
        raise CorpusError(path, "missing book title")

    chapters = [
        _load_chapter(c, book_dir, path)
        for c in _require_list(data.get("chapters"), "chapters", path)
    ]

    slugs = [c.slug for c in chapters]
    duplicates = sorted({s for s in slugs if slugs.count(s) > 1})
    if duplicates:
        raise CorpusError(path, f"duplicate chapter slugs: {', '.join(duplicates)}")

    book = Book(
        title=str(data["title"]),
        slug=str(data.get("slug") or book_dir.name),
        chapters=chapters,
    )
    logger.debug(
        "Loaded book %s: %d chapters, %d articles",
        book.title,
        len(book.chapters),
        book.articles_count,
    )
    return book


def load_books(books_dir: Path) -> list[Book]:
    """Load every book directory under books_dir, sorted by directory name.

    Directories without a book.yaml are ignored.
    """
    if not books_dir.is_dir():
        raise CorpusError(books_dir, "books directory not found")

    books = [
        load_book(d)
        for d in sorted(books_dir.iterdir())
        if d.is_dir() and (d / BOOK_FILE_NAME).exists()
    ]
    logger.info("Loaded %d books from %s", len(books), books_dir)
    return books
