"""Test fixtures for bookgen.

This package provides on-disk fixtures for integration and end-to-end
testing.

Fixtures:
- templates: One minimal template per known template name
- books/go: 3 chapters x 2 articles, one chapter with an image
- books/python: 1 chapter x 1 article
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

TEMPLATES_DIR = FIXTURES_DIR / "templates"
BOOKS_DIR = FIXTURES_DIR / "books"
GO_BOOK_DIR = BOOKS_DIR / "go"


def get_book_dir(name: str) -> Path:
    """Get path to a sample book directory.

    Args:
        name: Name of the book directory

    Returns:
        Path to the book directory

    Raises:
        ValueError: If the book doesn't exist
    """
    book_dir = BOOKS_DIR / name
    if not book_dir.exists():
        raise ValueError(f"Sample book not found: {name}")
    return book_dir
