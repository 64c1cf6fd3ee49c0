"""bookgen rendering.

- sink: template execution, optional minification and file writes
- stats: thread-safe byte counters for one generation run
- minify: minifier protocol and the htmlmin-backed default
"""

from bookgen.render.minify import HtmlMinifier, Minifier, MinifyError
from bookgen.render.sink import RenderSink
from bookgen.render.stats import RenderStats

__all__ = [
    "HtmlMinifier",
    "Minifier",
    "MinifyError",
    "RenderSink",
    "RenderStats",
]
