"""Entry point for running bookgen as a module.

Usage:
    python -m bookgen [command] [options]

Example:
    python -m bookgen generate --output www
    python -m bookgen check
"""

from bookgen.cli import app

if __name__ == "__main__":
    app()
