"""Generation errors.

Every condition that makes the generated site untrustworthy is raised as a
GenerationError subclass. Workers never exit the process; the CLI is the only
place that turns these into an exit code.
"""

from dataclasses import dataclass
from pathlib import Path


class GenerationError(Exception):
    """Base class for all fatal generation errors."""

    pass


class UnknownTemplateError(GenerationError):
    """Raised when a template name is outside the known set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown template: '{name}'")


class TemplateLoadError(GenerationError):
    """Raised when a template file cannot be read or parsed."""

    def __init__(self, name: str, path: Path, message: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Failed to load template {name} from {path}: {message}")


class TemplateRenderError(GenerationError):
    """Raised when executing a template against its data fails."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Template rendering failed: {name} - {message}")


class OutputWriteError(GenerationError):
    """Raised when an output file or directory cannot be created."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Failed to write {path}: {message}")


class ImageCopyError(GenerationError):
    """Raised when a chapter image cannot be copied."""

    def __init__(self, src: Path, dst: Path, message: str) -> None:
        self.src = src
        self.dst = dst
        super().__init__(f"Failed to copy image {src} -> {dst}: {message}")


class SearchIndexError(GenerationError):
    """Raised when the table of contents / search index cannot be built."""

    def __init__(self, book_title: str, message: str) -> None:
        self.book_title = book_title
        super().__init__(f"Failed to build search index for {book_title}: {message}")


class CorpusError(GenerationError):
    """Raised when a book description is missing or malformed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid book description {path}: {message}")


@dataclass
class ChapterFailure:
    """A chapter render that failed inside the concurrent fan-out.

    Attributes:
        chapter_no: 1-based chapter position
        chapter_title: Chapter title
        error: The exception raised by the render
    """

    chapter_no: int
    chapter_title: str
    error: BaseException

    def __str__(self) -> str:
        return f"chapter {self.chapter_no} ({self.chapter_title}): {self.error}"


class BookGenerationError(GenerationError):
    """Raised after the chapter join when one or more chapters failed."""

    def __init__(self, book_title: str, failures: list[ChapterFailure]) -> None:
        self.book_title = book_title
        self.failures = failures
        details = "; ".join(str(f) for f in failures)
        super().__init__(
            f"Book generation failed: {book_title} "
            f"({len(failures)} chapter(s) failed) - {details}"
        )
