"""bookgen configuration system.

Configuration is YAML-based with a few CLI overrides (--output, --minify,
--concurrency). Supports environment variable substitution (${VAR}) in
config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.bookgen/config.yaml
3. ./bookgen.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from bookgen.templates.cache import TEMPLATE_NAMES

# =============================================================================
# Configuration Dataclasses
# =============================================================================


def default_concurrency() -> int:
    """Chapters rendered in parallel per book when not configured."""
    return os.cpu_count() or 1


@dataclass
class SiteConfig:
    """Site chrome shared by every page.

    Attributes:
        base_url: Public base URL used for canonical URLs
        github_url: Link to the source repository
        github_text: Label for the GitHub link
        analytics: Raw HTML analytics snippet (inserted unescaped)
        path_app_js: URL of the site JavaScript bundle
        path_main_css: URL of the main stylesheet
    """

    base_url: str = "https://www.programming-books.io"
    github_url: str = "https://github.com/essentialbooks/books"
    github_text: str = "GitHub"
    analytics: str = ""
    path_app_js: str = "/s/app.js"
    path_main_css: str = "/s/main.css"

    def __post_init__(self) -> None:
        """Validate site configuration."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"Site base_url must be an http(s) URL (got {self.base_url!r})")


@dataclass
class PathsConfig:
    """Filesystem locations.

    Attributes:
        books: Directory of book directories (each with book.yaml)
        templates: Directory holding the site templates
        output: Directory the site is generated into
    """

    books: str = "books"
    templates: str = "tmpl"
    output: str = "www"


@dataclass
class RenderConfig:
    """Rendering settings.

    Attributes:
        minify: Minify generated HTML
        concurrency: Maximum chapters rendered at once within a book
        disabled_templates: Template names whose pages are skipped
    """

    minify: bool = True
    concurrency: int = field(default_factory=default_concurrency)
    disabled_templates: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if not isinstance(self.minify, bool):
            raise ValueError(f"Render minify must be true or false (got {self.minify!r})")

        if self.concurrency < 1:
            raise ValueError(f"Render concurrency must be at least 1 (got {self.concurrency})")

        unknown = [n for n in self.disabled_templates if n not in TEMPLATE_NAMES]
        if unknown:
            raise ValueError(
                f"Unknown disabled templates: {unknown}. Valid: {list(TEMPLATE_NAMES)}"
            )


@dataclass
class BookgenConfig:
    """Top-level bookgen configuration.

    Attributes:
        site: Site chrome
        paths: Input and output locations
        render: Rendering settings
    """

    site: SiteConfig = field(default_factory=SiteConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    @property
    def books_dir(self) -> Path:
        return Path(self.paths.books)

    @property
    def templates_dir(self) -> Path:
        return Path(self.paths.templates)

    @property
    def output_dir(self) -> Path:
        return Path(self.paths.output)


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${SITE_ANALYTICS} -> value of SITE_ANALYTICS

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.bookgen/config.yaml
    2. ./bookgen.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".bookgen" / "config.yaml",
        start_path / "bookgen.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> BookgenConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        BookgenConfig instance
    """
    data = substitute_env_vars(data)

    config = BookgenConfig()

    if "site" in data:
        site_data = data["site"] or {}
        defaults = config.site
        config.site = SiteConfig(
            base_url=site_data.get("base_url", defaults.base_url),
            github_url=site_data.get("github_url", defaults.github_url),
            github_text=site_data.get("github_text", defaults.github_text),
            analytics=site_data.get("analytics", defaults.analytics),
            path_app_js=site_data.get("path_app_js", defaults.path_app_js),
            path_main_css=site_data.get("path_main_css", defaults.path_main_css),
        )

    if "paths" in data:
        paths_data = data["paths"] or {}
        config.paths = PathsConfig(
            books=paths_data.get("books", config.paths.books),
            templates=paths_data.get("templates", config.paths.templates),
            output=paths_data.get("output", config.paths.output),
        )

    if "render" in data:
        render_data = data["render"] or {}
        config.render = RenderConfig(
            minify=render_data.get("minify", config.render.minify),
            concurrency=int(render_data.get("concurrency", config.render.concurrency)),
            disabled_templates=list(render_data.get("disabled_templates") or []),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> BookgenConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        BookgenConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = BookgenConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# bookgen Configuration

# Site chrome shared by every page
site:
  base_url: "https://www.programming-books.io"
  github_url: "https://github.com/essentialbooks/books"
  github_text: "GitHub"
  # analytics: "${SITE_ANALYTICS}"  # Raw HTML snippet, inserted unescaped
  path_app_js: "/s/app.js"
  path_main_css: "/s/main.css"

# Input and output locations
paths:
  books: "books"       # One directory per book, each with book.yaml
  templates: "tmpl"    # index.tmpl.html, chapter.tmpl.html, ...
  output: "www"

# Rendering
render:
  minify: true
  # concurrency: 8      # Chapters rendered at once per book (default: CPU count)
  disabled_templates: []  # e.g. ["index-grid.tmpl.html"]
'''
