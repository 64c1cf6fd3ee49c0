"""Table of contents / search index for a book.

The index is a JavaScript file assigning an array of
[title, url, parent_index] rows to gBookToc. Chapters have parent -1;
articles point at the row of their chapter.
"""

import json
import logging
from pathlib import Path

from bookgen.errors import SearchIndexError
from bookgen.models.book import Book

logger = logging.getLogger(__name__)

TOC_SEARCH_FILE_NAME = "toc_search.js"


def toc_rows(book: Book) -> list[list[str | int]]:
    """Flatten a book into TOC rows, chapters followed by their articles."""
    rows: list[list[str | int]] = []
    for chapter in book.chapters:
        chapter_idx = len(rows)
        rows.append([chapter.title, chapter.url, -1])
        for article in chapter.articles:
            rows.append([article.title, article.url, chapter_idx])
    return rows


def build_toc_search(book: Book, output_dir: Path) -> Path:
    """Write the TOC / search index for a book.

    Args:
        book: Book to index
        output_dir: Site output directory

    Returns:
        Path to the written index file

    Raises:
        SearchIndexError: If the index cannot be written
    """
    path = book.dest_dir(output_dir) / TOC_SEARCH_FILE_NAME
    rows = toc_rows(book)
    content = "var gBookToc = " + json.dumps(rows, ensure_ascii=False) + ";\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise SearchIndexError(book.title, str(e)) from e

    logger.debug("Wrote %d TOC entries for %s to %s", len(rows), book.title, path)
    return path
