"""bookgen - Static site generator for structured book corpora.

bookgen renders a corpus of books, chapters and articles into a static
website: it loads HTML templates, binds per-entity data, writes output files,
copies chapter images, optionally minifies HTML and reports bytes written.

Core principles:
- All-or-nothing: a run either produces the complete site or fails loudly
- Bounded concurrency: chapters of a book render in parallel, up to a limit
- Deterministic paths: every page's location is a pure function of its entity
"""

__version__ = "0.1.0"
__author__ = "bookgen Contributors"
