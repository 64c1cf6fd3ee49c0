"""Preflight validation.

Everything a run depends on is validated before the first file is written:
the templates must all parse, the corpus directory must exist and the
output location must be writable. A failed required check aborts the run
instead of producing a partial site.
"""

import importlib.util
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bookgen.errors import GenerationError
from bookgen.templates.cache import TEMPLATE_NAMES, TemplateCache


@dataclass
class PreflightCheck:
    """Result of a single check.

    Attributes:
        name: Check name (template name, directory role, library)
        available: Whether the check passed
        version: Library version if applicable
        required: Whether the run needs this check to pass
        path: Path the check looked at
        message: Status message (human-readable context)
    """

    name: str
    available: bool
    version: str | None = None
    required: bool = True
    path: str | None = None
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required checks passed
        checks: Individual check results
        errors: Error messages for failed required checks
        warnings: Warning messages for failed optional checks
    """

    success: bool = True
    checks: list[PreflightCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: PreflightCheck) -> None:
        """Add a check result."""
        self.checks.append(check)

        if not check.available:
            if check.required:
                self.success = False
                self.errors.append(f"Required check failed: {check.name} - {check.message}")
            else:
                self.warnings.append(f"Optional check failed: {check.name} - {check.message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "available": c.available,
                    "version": c.version,
                    "required": c.required,
                    "path": c.path,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


class PreflightChecker:
    """Validates the environment before generation.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all(books_dir, templates_dir, output_dir)
        if not result.success:
            raise typer.Exit(1)
    """

    def check_templates(
        self,
        templates_dir: Path,
        disabled: list[str] | None = None,
    ) -> list[PreflightCheck]:
        """Check that every enabled template loads and parses.

        Args:
            templates_dir: Templates directory
            disabled: Template names that will be skipped

        Returns:
            One check per known template
        """
        disabled = disabled or []
        cache = TemplateCache(templates_dir, disabled=disabled)
        checks: list[PreflightCheck] = []

        for name in TEMPLATE_NAMES:
            path = str(cache.template_path(name))
            if name in disabled:
                checks.append(
                    PreflightCheck(
                        name=name,
                        available=True,
                        required=False,
                        path=path,
                        message="Disabled (pages skipped)",
                    )
                )
                continue
            try:
                cache.get(name)
            except GenerationError as e:
                checks.append(
                    PreflightCheck(name=name, available=False, path=path, message=str(e))
                )
            else:
                checks.append(
                    PreflightCheck(name=name, available=True, path=path, message="Template")
                )

        return checks

    def check_directory(self, name: str, path: Path) -> PreflightCheck:
        """Check that an input directory exists."""
        if path.is_dir():
            return PreflightCheck(name=name, available=True, path=str(path), message="Directory")
        return PreflightCheck(
            name=name,
            available=False,
            path=str(path),
            message=f"Directory not found: {path}",
        )

    def check_output_dir(self, path: Path) -> PreflightCheck:
        """Check that the output directory exists or can be created."""
        # Nearest existing ancestor decides whether we can create the tree
        existing = path
        while not existing.exists() and existing != existing.parent:
            existing = existing.parent

        if existing.is_dir() and os.access(existing, os.W_OK):
            return PreflightCheck(
                name="output", available=True, path=str(path), message="Writable"
            )
        return PreflightCheck(
            name="output",
            available=False,
            path=str(path),
            message=f"Not writable: {existing}",
        )

    def check_htmlmin(self, required: bool = False) -> PreflightCheck:
        """Check if htmlmin is importable.

        Minification failures fall back to unminified output, so this is
        optional unless the caller says otherwise.
        """
        spec = importlib.util.find_spec("htmlmin")
        if spec is None:
            return PreflightCheck(
                name="htmlmin",
                available=False,
                required=required,
                message="Install with: pip install htmlmin",
            )

        version = None
        try:
            import htmlmin

            version = getattr(htmlmin, "__version__", None)
        except ImportError as e:
            return PreflightCheck(
                name="htmlmin",
                available=False,
                required=required,
                path=spec.origin,
                message=f"Import failed: {e}",
            )

        return PreflightCheck(
            name="htmlmin",
            available=True,
            version=version,
            required=required,
            path=spec.origin,
            message="HTML minifier (Python package)",
        )

    def check_all(
        self,
        books_dir: Path,
        templates_dir: Path,
        output_dir: Path,
        disabled_templates: list[str] | None = None,
        minify: bool = True,
    ) -> PreflightResult:
        """Run all preflight checks.

        Args:
            books_dir: Corpus directory
            templates_dir: Templates directory
            output_dir: Site output directory
            disabled_templates: Template names that will be skipped
            minify: Whether minification is enabled

        Returns:
            PreflightResult with all check results
        """
        result = PreflightResult()

        result.add_check(self.check_directory("books", books_dir))

        templates_check = self.check_directory("templates", templates_dir)
        result.add_check(templates_check)
        if templates_check.available:
            for check in self.check_templates(templates_dir, disabled_templates):
                result.add_check(check)

        result.add_check(self.check_output_dir(output_dir))

        if minify:
            result.add_check(self.check_htmlmin(required=False))

        return result
