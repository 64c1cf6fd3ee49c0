"""HTML minification.

Minification is best effort: a minifier raises on failure and the render
sink falls back to the unminified bytes.
"""

from typing import Protocol


class Minifier(Protocol):
    """Transforms content of a given type into a smaller equivalent."""

    def minify(self, content_type: str, data: bytes) -> bytes:
        """Return minified bytes or raise on failure."""
        ...


class MinifyError(Exception):
    """Raised when content cannot be minified."""

    pass


class HtmlMinifier:
    """Minifier backed by htmlmin.

    Preserves <pre> blocks since articles embed code samples.
    """

    content_types = frozenset({"text/html"})

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def minify(self, content_type: str, data: bytes) -> bytes:
        """Minify HTML bytes.

        Args:
            content_type: MIME type of the content
            data: Raw bytes

        Returns:
            Minified bytes

        Raises:
            MinifyError: If the content type is unsupported
        """
        if content_type not in self.content_types:
            raise MinifyError(f"Unsupported content type: {content_type}")

        import htmlmin

        html = data.decode(self.encoding)
        minified = htmlmin.minify(
            html,
            remove_comments=True,
            remove_empty_space=True,
            reduce_boolean_attributes=True,
            keep_pre=True,
        )
        return minified.encode(self.encoding)
