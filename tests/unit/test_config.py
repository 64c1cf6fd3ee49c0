"""Unit tests for configuration system."""

from pathlib import Path
from typing import Any

import pytest
import yaml

from bookgen.config import (
    RenderConfig,
    SiteConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_from_dict,
    substitute_env_vars,
)


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitute_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env var in string."""
        monkeypatch.setenv("TEST_VAR", "test_value")

        result = substitute_env_vars("prefix_${TEST_VAR}_suffix")

        assert result == "prefix_test_value_suffix"

    def test_substitute_in_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in nested dictionaries."""
        monkeypatch.setenv("SITE_ANALYTICS", "<script>ga()</script>")

        data = {"site": {"analytics": "${SITE_ANALYTICS}"}, "other": "value"}
        result = substitute_env_vars(data)

        assert result["site"]["analytics"] == "<script>ga()</script>"
        assert result["other"] == "value"

    def test_substitute_in_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in list."""
        monkeypatch.setenv("ITEM", "value")

        assert substitute_env_vars(["static", "${ITEM}"]) == ["static", "value"]

    def test_missing_env_var_raises(self) -> None:
        """Test that missing env var raises ValueError."""
        with pytest.raises(ValueError, match="Environment variable not set"):
            substitute_env_vars("${NONEXISTENT_BOOKGEN_VAR}")

    def test_passthrough_non_string(self) -> None:
        """Test that non-string values pass through unchanged."""
        assert substitute_env_vars(123) == 123
        assert substitute_env_vars(True) is True
        assert substitute_env_vars(None) is None


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_find_bookgen_dir_config(self, tmp_path: Path) -> None:
        """Test finding .bookgen/config.yaml."""
        config_dir = tmp_path / ".bookgen"
        config_dir.mkdir()
        config_file = config_dir / "config.yaml"
        config_file.write_text("paths:\n  output: site")

        assert find_config_file(tmp_path) == config_file

    def test_find_root_config(self, tmp_path: Path) -> None:
        """Test finding bookgen.yaml at root."""
        config_file = tmp_path / "bookgen.yaml"
        config_file.write_text("paths:\n  output: site")

        assert find_config_file(tmp_path) == config_file

    def test_prefer_bookgen_dir_over_root(self, tmp_path: Path) -> None:
        """Test .bookgen/config.yaml is preferred over bookgen.yaml."""
        config_dir = tmp_path / ".bookgen"
        config_dir.mkdir()
        preferred = config_dir / "config.yaml"
        preferred.write_text("# preferred")
        (tmp_path / "bookgen.yaml").write_text("# fallback")

        assert find_config_file(tmp_path) == preferred

    def test_no_config_returns_none(self, tmp_path: Path) -> None:
        """Test returns None when no config found."""
        assert find_config_file(tmp_path) is None


class TestLoadConfigFromDict:
    """Tests for loading config from dictionary."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = load_config_from_dict({})

        assert config.site.base_url == "https://www.programming-books.io"
        assert config.site.path_main_css == "/s/main.css"
        assert config.paths.templates == "tmpl"
        assert config.paths.output == "www"
        assert config.render.minify is True
        assert config.render.concurrency >= 1
        assert config.render.disabled_templates == []

    def test_full_config(self, full_config_dict: dict[str, Any]) -> None:
        """Test every section is read."""
        config = load_config_from_dict(full_config_dict)

        assert config.site.github_text == "Source"
        assert config.site.analytics == "<script>ga()</script>"
        assert config.site.path_app_js == "/static/app.js"
        assert config.books_dir == Path("content")
        assert config.templates_dir == Path("templates")
        assert config.output_dir == Path("public")
        assert config.render.minify is False
        assert config.render.concurrency == 4
        assert config.render.disabled_templates == ["index-grid.tmpl.html"]

    def test_partial_site_keeps_defaults(self) -> None:
        config = load_config_from_dict({"site": {"base_url": "https://example.org"}})

        assert config.site.base_url == "https://example.org"
        assert config.site.github_text == "GitHub"

    def test_empty_sections(self) -> None:
        config = load_config_from_dict({"site": None, "paths": None, "render": None})

        assert config.paths.output == "www"


class TestValidation:
    """Tests for configuration validation."""

    def test_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="concurrency must be at least 1"):
            RenderConfig(concurrency=0)

    def test_unknown_disabled_template(self) -> None:
        with pytest.raises(ValueError, match="Unknown disabled templates"):
            RenderConfig(disabled_templates=["missing.tmpl.html"])

    def test_minify_must_be_bool(self) -> None:
        with pytest.raises(ValueError, match="minify must be true or false"):
            RenderConfig(minify="false")  # type: ignore[arg-type]

    def test_quoted_minify_in_yaml_rejected(self) -> None:
        """Test that a quoted "false" is not read as a truthy string."""
        data = yaml.safe_load('render:\n  minify: "false"\n')

        with pytest.raises(ValueError, match="minify"):
            load_config_from_dict(data)

    def test_unquoted_minify_in_yaml(self) -> None:
        data = yaml.safe_load("render:\n  minify: false\n")

        assert load_config_from_dict(data).render.minify is False

    def test_base_url_must_be_http(self) -> None:
        with pytest.raises(ValueError, match="base_url"):
            SiteConfig(base_url="ftp://example.org")


class TestLoadConfig:
    """Tests for loading config files."""

    def test_explicit_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("render:\n  concurrency: 3\n")

        config = load_config(config_file)

        assert config.render.concurrency == 3
        assert config.config_path == config_file

    def test_no_discovery(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "bookgen.yaml").write_text("render:\n  concurrency: 3\n")

        config = load_config(auto_discover=False)

        assert config.config_path is None

    def test_default_config_round_trips(self) -> None:
        """Test that the generated default config loads cleanly."""
        data = yaml.safe_load(create_default_config())

        config = load_config_from_dict(data)

        assert config.paths.books == "books"
        assert config.render.minify is True
