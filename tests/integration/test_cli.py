"""Integration tests for bookgen CLI commands.

These tests run the full generate workflow against the fixture corpus.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from bookgen import __version__
from bookgen.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory so no config is discovered."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


def _generate_args(books: Path, templates: Path, output: Path, *extra: str) -> list[str]:
    return [
        "generate",
        "--books", str(books),
        "--templates", str(templates),
        "--output", str(output),
        "--no-minify",
        *extra,
    ]


class TestGenerate:
    """Integration tests for `bookgen generate`."""

    def test_generate_site(
        self,
        fixture_books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        """Test that generate renders every page of the fixture corpus."""
        result = runner.invoke(app, _generate_args(fixture_books_dir, templates_dir, output_dir))

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert "Generated 2 books, 4 chapters, 7 articles" in result.output

        for name in ("index.html", "index-grid.html", "about.html", "feedback.html"):
            assert (output_dir / name).exists()

        go_dir = output_dir / "essential" / "go"
        assert (go_dir / "index.html").exists()
        assert (go_dir / "toc_search.js").exists()
        assert (go_dir / "maps" / "index.html").exists()
        assert "<pre>for k := range m {" in (go_dir / "maps" / "iterate-keys.html").read_text()
        assert (go_dir / "maps" / "gopher.png").read_bytes() == (
            fixture_books_dir / "go" / "img" / "gopher.png"
        ).read_bytes()
        assert (output_dir / "essential" / "python" / "index.html").exists()
        assert (output_dir / "sitemap.xml").exists()

    def test_generate_json_report(
        self,
        fixture_books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        result = runner.invoke(
            app,
            ["--quiet", *_generate_args(fixture_books_dir, templates_dir, output_dir, "--json")],
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        report = json.loads(result.output[result.output.index("{") :])
        assert report["books"] == 2
        assert report["chapters"] == 4
        assert report["articles"] == 7
        assert report["sitemap_urls"] == 13
        assert report["stats"]["files_written"] == 17

    def test_generate_with_concurrency(
        self,
        fixture_books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        result = runner.invoke(
            app,
            _generate_args(fixture_books_dir, templates_dir, output_dir, "--concurrency", "1"),
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert (output_dir / "essential" / "go" / "strings" / "index.html").exists()

    def test_generate_broken_template_fails(
        self,
        fixture_books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        """Test that a template that does not parse stops the run."""
        (templates_dir / "article.tmpl.html").write_text("{% if %}")

        result = runner.invoke(app, _generate_args(fixture_books_dir, templates_dir, output_dir))

        assert result.exit_code == 1
        assert not (output_dir / "index.html").exists()

    def test_generate_invalid_corpus_fails(
        self,
        tmp_path: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        books = tmp_path / "books"
        (books / "broken").mkdir(parents=True)
        (books / "broken" / "book.yaml").write_text("chapters: []\n")

        result = runner.invoke(app, _generate_args(books, templates_dir, output_dir))

        assert result.exit_code == 1
        assert "missing book title" in result.output

    def test_generate_uses_config_file(
        self,
        isolated_cwd: Path,
        fixture_books_dir: Path,
        templates_dir: Path,
        tmp_path: Path,
    ) -> None:
        """Test that paths are read from bookgen.yaml when not overridden."""
        output = tmp_path / "public"
        (isolated_cwd / "bookgen.yaml").write_text(
            "paths:\n"
            f"  books: {fixture_books_dir}\n"
            f"  templates: {templates_dir}\n"
            f"  output: {output}\n"
            "render:\n"
            "  minify: false\n"
            "  disabled_templates: [index-grid.tmpl.html]\n"
        )

        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert (output / "index.html").exists()
        assert not (output / "index-grid.html").exists()


class TestCheck:
    """Integration tests for `bookgen check`."""

    def test_check_passes(
        self,
        isolated_cwd: Path,
        fixture_books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
    ) -> None:
        config_file = isolated_cwd / "bookgen.yaml"
        config_file.write_text(
            "paths:\n"
            f"  books: {fixture_books_dir}\n"
            f"  templates: {templates_dir}\n"
            f"  output: {output_dir}\n"
            "render:\n"
            "  minify: false\n"
        )

        result = runner.invoke(app, ["check", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output[result.output.index("{") :])
        assert data["success"] is True

    def test_check_missing_dirs_fails(self) -> None:
        """Test that default paths are missing in an empty directory."""
        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "Preflight check FAILED" in result.output


class TestInit:
    """Integration tests for `bookgen init`."""

    def test_init_creates_config(self, isolated_cwd: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (isolated_cwd / ".bookgen" / "config.yaml").exists()

    def test_init_refuses_overwrite(self, isolated_cwd: Path) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1

    def test_init_force(self, isolated_cwd: Path) -> None:
        runner.invoke(app, ["init"])
        (isolated_cwd / ".bookgen" / "config.yaml").write_text("# edited\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert "site:" in (isolated_cwd / ".bookgen" / "config.yaml").read_text()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"bookgen {__version__}" in result.output
