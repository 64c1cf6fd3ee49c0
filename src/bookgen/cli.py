"""bookgen CLI interface.

Commands:
- generate: Render the corpus into a static site
- check: Validate templates and directories before a run
- init: Initialize bookgen configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from bookgen import __version__
from bookgen.config import BookgenConfig, create_default_config, load_config
from bookgen.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="bookgen",
    help="Static site generator for structured book corpora",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: BookgenConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bookgen {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """bookgen - Static site generator for structured book corpora."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _current_config() -> BookgenConfig:
    return _config if _config is not None else BookgenConfig()


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Validate templates and directories.

    Exit codes:
        0: All checks passed
        1: One or more required checks failed
        2: Only optional checks failed (warnings)
    """
    from bookgen.utils.preflight import PreflightChecker

    config = _current_config()
    result = PreflightChecker().check_all(
        books_dir=config.books_dir,
        templates_dir=config.templates_dir,
        output_dir=config.output_dir,
        disabled_templates=config.render.disabled_templates,
        minify=config.render.minify,
    )

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("\n🔍 Preflight Check Results\n")

        for check_result in result.checks:
            status = "✅" if check_result.available else "❌"
            version_str = f" ({check_result.version})" if check_result.version else ""
            required_str = " [required]" if check_result.required else " [optional]"

            typer.echo(f"  {status} {check_result.name}{version_str}{required_str}")
            if not check_result.available:
                typer.echo(f"     └─ {check_result.message}")

        typer.echo()

    if result.errors:
        if not json_output:
            typer.echo("❌ Preflight check FAILED")
            for error in result.errors:
                typer.echo(f"   • {error}")
        raise typer.Exit(1)
    elif result.warnings:
        if not json_output:
            typer.echo("⚠️  Preflight check passed with WARNINGS")
            for warning in result.warnings:
                typer.echo(f"   • {warning}")
        raise typer.Exit(2)
    else:
        if not json_output:
            typer.echo("✅ All preflight checks passed")
        raise typer.Exit(0)


# =============================================================================
# generate command
# =============================================================================


@app.command()
def generate(
    books: Annotated[
        Path | None,
        typer.Option(
            "--books",
            "-b",
            help="Books directory (overrides config)",
        ),
    ] = None,
    templates: Annotated[
        Path | None,
        typer.Option(
            "--templates",
            "-t",
            help="Templates directory (overrides config)",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (overrides config)",
        ),
    ] = None,
    minify: Annotated[
        bool | None,
        typer.Option(
            "--minify/--no-minify",
            help="Minify generated HTML (overrides config)",
        ),
    ] = None,
    concurrency: Annotated[
        int | None,
        typer.Option(
            "--concurrency",
            "-j",
            min=1,
            help="Chapters rendered at once per book (overrides config)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the build report as JSON",
        ),
    ] = False,
) -> None:
    """Generate the static site.

    Exit codes:
        0: Site generated successfully
        1: Error during generation (the output must not be published)
    """
    from bookgen.errors import GenerationError
    from bookgen.generator import build_site
    from bookgen.models.loader import load_books
    from bookgen.utils.files import format_bytes
    from bookgen.utils.preflight import PreflightChecker

    config = _current_config()

    # Apply CLI overrides to config
    if books is not None:
        config.paths.books = str(books)
    if templates is not None:
        config.paths.templates = str(templates)
    if output is not None:
        config.paths.output = str(output)
    if minify is not None:
        config.render.minify = minify
    if concurrency is not None:
        config.render.concurrency = concurrency

    _logger.info(f"Output: {config.output_dir} (minify: {config.render.minify})")

    _logger.info("Running preflight checks...")
    preflight_result = PreflightChecker().check_all(
        books_dir=config.books_dir,
        templates_dir=config.templates_dir,
        output_dir=config.output_dir,
        disabled_templates=config.render.disabled_templates,
        minify=config.render.minify,
    )

    if not preflight_result.success:
        _logger.error("Preflight checks failed:")
        for error in preflight_result.errors:
            _logger.error(f"  {error}")
        raise typer.Exit(1)

    for warning in preflight_result.warnings:
        _logger.warning(f"  {warning}")

    try:
        corpus = load_books(config.books_dir)
        report = build_site(config, corpus)
    except GenerationError as e:
        _logger.error(f"Generation failed: {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        typer.echo(
            f"\n📚 Generated {report.books} books, {report.chapters} chapters, "
            f"{report.articles} articles into {config.output_dir}"
        )
        typer.echo(
            f"   {report.stats['files_written']} files, "
            f"{format_bytes(report.stats['bytes_written'])} in {report.elapsed:.2f}s"
        )


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize bookgen configuration.

    Creates .bookgen/config.yaml with default settings.
    """
    config_dir = Path(".bookgen")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config())
    _logger.info(f"Created config: {config_file}")

    typer.echo("\n✅ bookgen configuration initialized")
    typer.echo(f"   Config: {config_file}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()
