"""bookgen template loading.

This module provides the Jinja2-backed cache for the fixed set of site
templates. Every template is parsed once per run and shared by all renders.
"""

from bookgen.templates.cache import TEMPLATE_NAMES, TemplateCache

__all__ = ["TEMPLATE_NAMES", "TemplateCache"]
