"""Sitemap URL collection.

Chapter and article renders run concurrently, so every mutation goes
through a lock.
"""

import logging
import threading
from pathlib import Path
from xml.sax.saxutils import escape

from bookgen.errors import OutputWriteError

logger = logging.getLogger(__name__)

SITEMAP_XMLNS = "http://www.sitemaps.org/schemas/sitemap/0.9"


class SitemapCollector:
    """Append-only, thread-safe collection of canonical URLs."""

    def __init__(self) -> None:
        self._urls: list[str] = []
        self._lock = threading.Lock()

    def add(self, url: str) -> None:
        """Record a canonical URL."""
        with self._lock:
            self._urls.append(url)

    @property
    def urls(self) -> list[str]:
        """Copy of the URLs recorded so far, in insertion order."""
        with self._lock:
            return list(self._urls)

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def to_xml(self) -> str:
        """Render a sitemap urlset with sorted, de-duplicated URLs."""
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_XMLNS}">',
        ]
        for url in sorted(set(self.urls)):
            lines.append(f"  <url><loc>{escape(url)}</loc></url>")
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"

    def write(self, path: Path) -> Path:
        """Write sitemap.xml.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_xml(), encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(path, str(e)) from e
        logger.info("Wrote sitemap with %d URLs to %s", len(set(self.urls)), path)
        return path
