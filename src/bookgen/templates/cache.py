"""Template cache.

Templates come from a fixed set of names known at startup. Each name is
loaded from the templates directory at most once and memoized until the
whole cache is unloaded.
"""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)

from bookgen.errors import TemplateLoadError, UnknownTemplateError

logger = logging.getLogger(__name__)

TEMPLATE_INDEX = "index.tmpl.html"
TEMPLATE_INDEX_GRID = "index-grid.tmpl.html"
TEMPLATE_BOOK_INDEX = "book_index.tmpl.html"
TEMPLATE_CHAPTER = "chapter.tmpl.html"
TEMPLATE_ARTICLE = "article.tmpl.html"
TEMPLATE_ABOUT = "about.tmpl.html"
TEMPLATE_FEEDBACK = "feedback.tmpl.html"

TEMPLATE_NAMES: tuple[str, ...] = (
    TEMPLATE_INDEX,
    TEMPLATE_INDEX_GRID,
    TEMPLATE_BOOK_INDEX,
    TEMPLATE_CHAPTER,
    TEMPLATE_ARTICLE,
    TEMPLATE_ABOUT,
    TEMPLATE_FEEDBACK,
)


class TemplateCache:
    """Lazily loads and memoizes the known templates.

    A disabled template resolves to None, which callers treat as "skip this
    page". Templates use StrictUndefined, so a variable or attribute missing
    from the data binding fails the render instead of printing nothing. Population of the cache is guarded by a lock, but callers should
    still preload() before rendering concurrently.

    Usage:
        cache = TemplateCache(Path("tmpl"))
        cache.preload()
        template = cache.get("article.tmpl.html")
    """

    def __init__(
        self,
        templates_dir: Path,
        disabled: Iterable[str] = (),
    ) -> None:
        """Initialize the template cache.

        Args:
            templates_dir: Directory holding the template files
            disabled: Template names that should resolve to None

        Raises:
            UnknownTemplateError: If a disabled name is not a known template
        """
        self.templates_dir = templates_dir
        self.disabled = frozenset(disabled)
        for name in self.disabled:
            if name not in TEMPLATE_NAMES:
                raise UnknownTemplateError(name)

        self._templates: dict[str, Template] = {}
        self._lock = threading.Lock()

        # cache_size=0: this class is the only template cache
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            cache_size=0,
            keep_trailing_newline=True,
        )

    def template_path(self, name: str) -> Path:
        """Return the on-disk path of a template."""
        return self.templates_dir / name

    def get(self, name: str) -> Template | None:
        """Return the template for a name, loading it on first use.

        Args:
            name: Template name from TEMPLATE_NAMES

        Returns:
            Parsed template, or None if the template is disabled

        Raises:
            UnknownTemplateError: If the name is not a known template
            TemplateLoadError: If the template cannot be read or parsed
        """
        if name not in TEMPLATE_NAMES:
            raise UnknownTemplateError(name)
        if name in self.disabled:
            return None

        template = self._templates.get(name)
        if template is not None:
            return template

        with self._lock:
            template = self._templates.get(name)
            if template is None:
                template = self._load(name)
                self._templates[name] = template
        return template

    def _load(self, name: str) -> Template:
        path = self.template_path(name)
        logger.debug("Loading template %s", path)
        try:
            return self._env.get_template(name)
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(name, path, str(e)) from e

    def preload(self) -> int:
        """Load every enabled template.

        Returns:
            Number of templates loaded
        """
        count = 0
        for name in TEMPLATE_NAMES:
            if self.get(name) is not None:
                count += 1
        logger.debug("Preloaded %d templates from %s", count, self.templates_dir)
        return count

    def is_loaded(self, name: str) -> bool:
        """Return True if the template is currently cached."""
        return name in self._templates

    def unload(self) -> None:
        """Drop every cached template; the next get() reloads from disk."""
        with self._lock:
            self._templates = {}
        logger.debug("Unloaded templates")
