"""Book, chapter and article entities.

A Book exclusively owns its Chapters; a Chapter exclusively owns its
Articles and image references. URLs and output paths are computed from an
entity's position in that tree, never stored.
"""

from dataclasses import dataclass, field
from pathlib import Path

from markupsafe import Markup

# URL prefix under which all books are published
BOOKS_URL_PREFIX = "/essential"


def dest_path_for_url(output_dir: Path, url: str) -> Path:
    """Map a site-relative URL to a file under the output directory.

    URLs ending in "/" map to the index.html inside that directory.
    """
    relative = url.lstrip("/")
    if not relative or url.endswith("/"):
        return output_dir / relative / "index.html"
    return output_dir / relative


def canonical_url(site_base_url: str, url: str) -> str:
    """Join the public site base URL with a site-relative URL."""
    return site_base_url.rstrip("/") + url


@dataclass
class Article:
    """A single article page.

    Attributes:
        title: Article title
        slug: File name base, unique within its chapter
        body_html: Rendered HTML body
        no: 1-based position within the chapter
    """

    title: str
    slug: str
    body_html: str = ""
    no: int = 0
    chapter: "Chapter | None" = field(default=None, repr=False, compare=False)

    @property
    def body(self) -> Markup:
        """Body HTML marked safe for template output."""
        return Markup(self.body_html)

    @property
    def url(self) -> str:
        """Site-relative URL."""
        if self.chapter is None:
            raise ValueError(f"Article {self.slug} is not attached to a chapter")
        return f"{self.chapter.url}{self.slug}.html"

    def canonical_url(self, site_base_url: str) -> str:
        """Permanent public URL."""
        return canonical_url(site_base_url, self.url)

    def dest_file_path(self, output_dir: Path) -> Path:
        """Output file for this article."""
        return dest_path_for_url(output_dir, self.url)


@dataclass
class Chapter:
    """A chapter: ordered articles plus the images they reference.

    Attributes:
        title: Chapter title
        slug: Directory name, unique within its book
        no: 1-based position within the book
        articles: Ordered articles
        images: Source image files copied next to the chapter page
    """

    title: str
    slug: str
    no: int = 0
    articles: list[Article] = field(default_factory=list)
    images: list[Path] = field(default_factory=list)
    book: "Book | None" = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        for i, article in enumerate(self.articles, start=1):
            article.chapter = self
            if not article.no:
                article.no = i

    @property
    def url(self) -> str:
        """Site-relative URL."""
        if self.book is None:
            raise ValueError(f"Chapter {self.slug} is not attached to a book")
        return f"{self.book.url}{self.slug}/"

    def canonical_url(self, site_base_url: str) -> str:
        """Permanent public URL."""
        return canonical_url(site_base_url, self.url)

    def dest_dir(self, output_dir: Path) -> Path:
        """Directory holding the chapter page, its articles and images."""
        return dest_path_for_url(output_dir, self.url).parent

    def dest_file_path(self, output_dir: Path) -> Path:
        """Output file for the chapter page."""
        return dest_path_for_url(output_dir, self.url)

    def dest_image_path(self, output_dir: Path, image_name: str) -> Path:
        """Output file for one of the chapter's images."""
        return self.dest_dir(output_dir) / image_name


@dataclass
class Book:
    """A book: the root of the content tree.

    Attributes:
        title: Book title
        slug: Directory name, unique within the site
        chapters: Ordered chapters
    """

    title: str
    slug: str
    chapters: list[Chapter] = field(default_factory=list)

    def __post_init__(self) -> None:
        for i, chapter in enumerate(self.chapters, start=1):
            chapter.book = self
            if not chapter.no:
                chapter.no = i

    @property
    def url(self) -> str:
        """Site-relative URL."""
        return f"{BOOKS_URL_PREFIX}/{self.slug}/"

    def canonical_url(self, site_base_url: str) -> str:
        """Permanent public URL."""
        return canonical_url(site_base_url, self.url)

    def dest_dir(self, output_dir: Path) -> Path:
        """Directory holding every generated file of the book."""
        return dest_path_for_url(output_dir, self.url).parent

    def dest_file_path(self, output_dir: Path) -> Path:
        """Output file for the book index page."""
        return dest_path_for_url(output_dir, self.url)

    @property
    def articles_count(self) -> int:
        """Total number of articles across all chapters."""
        return sum(len(chapter.articles) for chapter in self.chapters)
