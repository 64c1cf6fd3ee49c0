"""bookgen data models.

This module exports the content tree rendered into the site:
- Book: root entity, owns ordered chapters
- Chapter: owns ordered articles and image references
- Article: a single page
"""

from bookgen.models.book import Article, Book, Chapter
from bookgen.models.loader import load_book, load_books

__all__ = [
    "Article",
    "Book",
    "Chapter",
    "load_book",
    "load_books",
]
