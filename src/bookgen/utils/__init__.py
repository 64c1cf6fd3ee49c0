"""bookgen utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Environment checks run before generation
- files: File copy and size formatting helpers
"""

from bookgen.utils.logging import get_logger, setup_logging
from bookgen.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
