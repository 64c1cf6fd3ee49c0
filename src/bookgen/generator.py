"""Site generation (entity renderers and the book orchestrator).

Top-level pages and books are generated sequentially. Within a book the
chapters are rendered concurrently on a bounded thread pool; the book call
joins on every chapter before returning and reports all chapter failures
together.

Generation order for a book:
1. TOC / search index
2. Book directory and index page
3. Chapters (bounded fan-out), each writing its articles, its own page and
   its images
"""

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from markupsafe import Markup

from bookgen.config import BookgenConfig, SiteConfig
from bookgen.errors import BookGenerationError, ChapterFailure, OutputWriteError
from bookgen.models.book import Article, Book, Chapter
from bookgen.render.minify import Minifier
from bookgen.render.sink import RenderSink
from bookgen.render.stats import RenderStats
from bookgen.search import build_toc_search
from bookgen.sitemap import SitemapCollector
from bookgen.templates.cache import (
    TEMPLATE_ABOUT,
    TEMPLATE_ARTICLE,
    TEMPLATE_BOOK_INDEX,
    TEMPLATE_CHAPTER,
    TEMPLATE_FEEDBACK,
    TEMPLATE_INDEX,
    TEMPLATE_INDEX_GRID,
    TemplateCache,
)
from bookgen.utils.files import copy_file, format_bytes
from bookgen.utils.logging import get_logger

logger = get_logger(__name__)

SITEMAP_FILE_NAME = "sitemap.xml"

TocBuilder = Callable[[Book, Path], Path]
FileCopier = Callable[[Path, Path], None]


@dataclass
class SiteChrome:
    """Values every page template receives."""

    github_url: str
    github_text: str
    analytics: Markup
    path_app_js: str
    path_main_css: str

    @classmethod
    def from_config(cls, site: SiteConfig) -> "SiteChrome":
        return cls(
            github_url=site.github_url,
            github_text=site.github_text,
            analytics=Markup(site.analytics),
            path_app_js=site.path_app_js,
            path_main_css=site.path_main_css,
        )


@dataclass
class BuildReport:
    """Summary of a completed site build.

    Attributes:
        books: Number of books generated
        chapters: Number of chapters generated
        articles: Number of articles generated
        sitemap_urls: Number of canonical URLs recorded
        stats: Render statistics snapshot
        elapsed: Wall time in seconds
    """

    books: int = 0
    chapters: int = 0
    articles: int = 0
    sitemap_urls: int = 0
    stats: dict[str, Any] = field(default_factory=dict)
    elapsed: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "books": self.books,
            "chapters": self.chapters,
            "articles": self.articles,
            "sitemap_urls": self.sitemap_urls,
            "stats": self.stats,
            "elapsed": round(self.elapsed, 3),
        }


class SiteGenerator:
    """Renders the site's pages through a RenderSink.

    Usage:
        generator = SiteGenerator(config, sink, sitemap)
        generator.gen_index(books)
        for book in books:
            generator.gen_book(book)
    """

    def __init__(
        self,
        config: BookgenConfig,
        sink: RenderSink,
        sitemap: SitemapCollector,
        toc_builder: TocBuilder = build_toc_search,
        copier: FileCopier = copy_file,
    ) -> None:
        """Initialize the generator.

        Args:
            config: bookgen configuration
            sink: Render sink shared by all pages of the run
            sitemap: Sitemap collector shared by all pages of the run
            toc_builder: Builds a book's TOC / search index
            copier: Copies a file (dst, src)
        """
        self.config = config
        self.sink = sink
        self.sitemap = sitemap
        self.toc_builder = toc_builder
        self.copier = copier
        self.chrome = SiteChrome.from_config(config.site)

    @property
    def output_dir(self) -> Path:
        return self.config.output_dir

    @property
    def concurrency(self) -> int:
        return self.config.render.concurrency

    def _canonical(self, url: str) -> str:
        return self.config.site.base_url.rstrip("/") + url

    # =========================================================================
    # Top-level pages
    # =========================================================================

    def gen_index(self, books: list[Book]) -> None:
        data = {
            "books": books,
            "github_text": self.chrome.github_text,
            "github_url": self.chrome.github_url,
            "analytics": self.chrome.analytics,
            "path_app_js": self.chrome.path_app_js,
            "path_main_css": self.chrome.path_main_css,
        }
        self.sink.write(TEMPLATE_INDEX, data, self.output_dir / "index.html")

    def gen_index_grid(self, books: list[Book]) -> None:
        data = {
            "books": books,
            "analytics": self.chrome.analytics,
            "path_app_js": self.chrome.path_app_js,
            "path_main_css": self.chrome.path_main_css,
        }
        self.sink.write(TEMPLATE_INDEX_GRID, data, self.output_dir / "index-grid.html")

    def _chrome_only(self) -> dict[str, Any]:
        return {
            "analytics": self.chrome.analytics,
            "path_app_js": self.chrome.path_app_js,
            "path_main_css": self.chrome.path_main_css,
        }

    def gen_feedback(self) -> None:
        logger.info("Writing feedback.html")
        self.sink.write(TEMPLATE_FEEDBACK, self._chrome_only(), self.output_dir / "feedback.html")

    def gen_about(self) -> None:
        logger.info("Writing about.html")
        self.sink.write(TEMPLATE_ABOUT, self._chrome_only(), self.output_dir / "about.html")

    # =========================================================================
    # Entity pages
    # =========================================================================

    def gen_article(self, article: Article, chapter_no: int) -> None:
        """Render one article page.

        Args:
            article: Article to render
            chapter_no: 1-based number of the owning chapter
        """
        canonical = self._canonical(article.url)
        self.sitemap.add(canonical)

        data = {
            "article": article,
            "current_chapter_no": chapter_no,
            "canonical_url": canonical,
            "analytics": self.chrome.analytics,
            "path_main_css": self.chrome.path_main_css,
        }
        self.sink.write_silent(TEMPLATE_ARTICLE, data, article.dest_file_path(self.output_dir))

    def gen_chapter(self, chapter: Chapter, chapter_no: int) -> None:
        """Render a chapter: its articles, its page, then its images.

        Args:
            chapter: Chapter to render
            chapter_no: 1-based chapter number
        """
        canonical = self._canonical(chapter.url)
        self.sitemap.add(canonical)

        for article in chapter.articles:
            self.gen_article(article, chapter_no)

        data = {
            "chapter": chapter,
            "current_chapter_no": chapter_no,
            "canonical_url": canonical,
            "analytics": self.chrome.analytics,
            "path_main_css": self.chrome.path_main_css,
        }
        self.sink.write_silent(TEMPLATE_CHAPTER, data, chapter.dest_file_path(self.output_dir))

        for image_path in chapter.images:
            dst = chapter.dest_image_path(self.output_dir, image_path.name)
            self.copier(dst, image_path)

        logger.debug(
            "Generated chapter %d %s (%d articles, %d images)",
            chapter_no,
            chapter.title,
            len(chapter.articles),
            len(chapter.images),
        )

    def gen_book(self, book: Book) -> None:
        """Generate a whole book.

        Raises:
            SearchIndexError: If the TOC / search index cannot be built
            OutputWriteError: If the book directory cannot be created
            BookGenerationError: If any chapter failed
        """
        logger.info("Started generating book %s", book.title)
        time_start = time.monotonic()

        self.toc_builder(book, self.output_dir)

        book_dir = book.dest_dir(self.output_dir)
        try:
            book_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(book_dir, str(e)) from e

        canonical = self._canonical(book.url)
        data = {
            "book": book,
            "canonical_url": canonical,
            "analytics": self.chrome.analytics,
            "path_main_css": self.chrome.path_main_css,
        }
        self.sink.write_silent(TEMPLATE_BOOK_INDEX, data, book.dest_file_path(self.output_dir))

        self.sitemap.add(canonical)

        self.gen_chapters(book)

        elapsed = time.monotonic() - time_start
        logger.structured(
            logging.INFO,
            f"Generated {book.title}, {len(book.chapters)} chapters, "
            f"{book.articles_count} articles in {elapsed:.2f}s",
            book=book.slug,
            chapters=len(book.chapters),
            articles=book.articles_count,
            elapsed=round(elapsed, 3),
        )

    def gen_chapters(self, book: Book) -> None:
        """Render all chapters of a book with at most `concurrency` at once.

        Returns only after every chapter render has finished.

        Raises:
            BookGenerationError: If one or more chapters failed
        """
        failures: list[ChapterFailure] = []

        with ThreadPoolExecutor(
            max_workers=self.concurrency,
            thread_name_prefix=f"chapter-{book.slug}",
        ) as executor:
            futures = {
                executor.submit(self.gen_chapter, chapter, no): (no, chapter)
                for no, chapter in enumerate(book.chapters, start=1)
            }
            for future in as_completed(futures):
                no, chapter = futures[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error("Chapter %d (%s) failed: %s", no, chapter.title, e)
                    failures.append(ChapterFailure(no, chapter.title, e))

        if failures:
            failures.sort(key=lambda f: f.chapter_no)
            raise BookGenerationError(book.title, failures)


def build_site(
    config: BookgenConfig,
    books: list[Book],
    minifier: Minifier | None = None,
) -> BuildReport:
    """Generate the complete site.

    Args:
        config: bookgen configuration
        books: Books to generate, in site order
        minifier: Minifier override (defaults to HtmlMinifier)

    Returns:
        BuildReport for the run

    Raises:
        GenerationError: On the first fatal condition
    """
    time_start = time.monotonic()
    output_dir = config.output_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(output_dir, str(e)) from e

    stats = RenderStats()
    sitemap = SitemapCollector()
    cache = TemplateCache(config.templates_dir, disabled=config.render.disabled_templates)
    cache.preload()

    sink = RenderSink(cache, stats, minify=config.render.minify, minifier=minifier)
    generator = SiteGenerator(config, sink, sitemap)

    generator.gen_index(books)
    generator.gen_index_grid(books)
    generator.gen_about()
    generator.gen_feedback()

    for book in books:
        generator.gen_book(book)

    sitemap.write(output_dir / SITEMAP_FILE_NAME)

    report = BuildReport(
        books=len(books),
        chapters=sum(len(b.chapters) for b in books),
        articles=sum(b.articles_count for b in books),
        sitemap_urls=len(sitemap),
        stats=stats.snapshot(),
        elapsed=time.monotonic() - time_start,
    )

    logger.structured(
        logging.INFO,
        f"Generated {report.books} books, {report.chapters} chapters, "
        f"{report.articles} articles ({report.stats['files_written']} files, "
        f"{format_bytes(report.stats['bytes_written'])}) in {report.elapsed:.2f}s",
        **report.to_dict(),
    )
    if config.render.minify and stats.html_bytes:
        logger.info(
            "Minified HTML: %s -> %s (saved %s)",
            format_bytes(stats.html_bytes),
            format_bytes(stats.html_bytes_minified),
            format_bytes(stats.saved_bytes),
        )

    return report
