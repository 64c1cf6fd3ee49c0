"""Render statistics shared by every render of one generation run."""

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RenderStats:
    """Thread-safe byte counters for a generation run.

    Attributes:
        html_bytes: HTML bytes before minification (successful minifications only)
        html_bytes_minified: HTML bytes after minification
        files_written: Number of files written
        bytes_written: Total bytes written to disk
    """

    html_bytes: int = 0
    html_bytes_minified: int = 0
    files_written: int = 0
    bytes_written: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_minified(self, raw_size: int, minified_size: int) -> None:
        """Add one successful minification to the counters."""
        with self._lock:
            self.html_bytes += raw_size
            self.html_bytes_minified += minified_size

    def record_write(self, size: int) -> None:
        """Add one written file to the counters."""
        with self._lock:
            self.files_written += 1
            self.bytes_written += size

    @property
    def saved_bytes(self) -> int:
        """Bytes saved by minification."""
        with self._lock:
            return self.html_bytes - self.html_bytes_minified

    def snapshot(self) -> dict[str, Any]:
        """Return a consistent copy of the counters."""
        with self._lock:
            return {
                "html_bytes": self.html_bytes,
                "html_bytes_minified": self.html_bytes_minified,
                "files_written": self.files_written,
                "bytes_written": self.bytes_written,
            }
