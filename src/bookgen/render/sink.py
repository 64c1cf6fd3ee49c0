"""Render sink: template + data binding -> file on disk.

Each call writes exactly one file, or none when the template is disabled.
"""

import logging
from pathlib import Path
from typing import Any

from bookgen.errors import OutputWriteError, TemplateRenderError
from bookgen.render.minify import HtmlMinifier, Minifier
from bookgen.render.stats import RenderStats
from bookgen.templates.cache import TemplateCache

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html"


class RenderSink:
    """Executes templates and writes the result to the output tree.

    Usage:
        sink = RenderSink(cache, stats, minify=True)
        sink.write_silent("article.tmpl.html", {"article": article}, path)
    """

    def __init__(
        self,
        cache: TemplateCache,
        stats: RenderStats,
        minify: bool = False,
        minifier: Minifier | None = None,
    ) -> None:
        """Initialize the render sink.

        Args:
            cache: Template cache to resolve names against
            stats: Counters for this generation run
            minify: Whether to minify rendered HTML
            minifier: Minifier to use (defaults to HtmlMinifier)
        """
        self.cache = cache
        self.stats = stats
        self.minify = minify
        self.minifier: Minifier = minifier or HtmlMinifier()

    def write_silent(self, name: str, data: dict[str, Any], path: Path) -> bool:
        """Render a template to a file, skipping disabled templates.

        Args:
            name: Template name
            data: Template data binding
            path: Destination file

        Returns:
            True if a file was written, False if the template is disabled

        Raises:
            UnknownTemplateError: If the template name is unknown
            TemplateLoadError: If the template cannot be loaded
            TemplateRenderError: If template execution fails
            OutputWriteError: If the file cannot be written
        """
        template = self.cache.get(name)
        if template is None:
            logger.debug("Template %s disabled, skipping %s", name, path)
            return False

        try:
            content = template.render(**data).encode("utf-8")
        except Exception as e:
            raise TemplateRenderError(name, str(e)) from e

        if self.minify:
            content = self._minify(content, path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise OutputWriteError(path, str(e)) from e

        self.stats.record_write(len(content))
        return True

    def write(self, name: str, data: dict[str, Any], path: Path) -> bool:
        """Render a top-level page; same contract as write_silent()."""
        return self.write_silent(name, data, path)

    def _minify(self, content: bytes, path: Path) -> bytes:
        try:
            minified = self.minifier.minify(HTML_CONTENT_TYPE, content)
        except Exception as e:
            logger.warning("Minification failed for %s, keeping original: %s", path, e)
            return content

        self.stats.record_minified(len(content), len(minified))
        return minified
