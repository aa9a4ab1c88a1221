"""includereplace exceptions."""

from typing import List
from dataclasses import dataclass


@dataclass
class ValidationError:
    """Single configuration validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class IncludeReplaceError(Exception):
    """Base class for errors that abort a run."""

    exit_code = 1


class ConfigValidationError(IncludeReplaceError):
    """Raised when configuration validation fails.

    This exception is raised by the loader when validation errors occur,
    allowing the CLI to catch it and map to appropriate exit codes.
    """

    exit_code = 2

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error at '{error.path}': {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


class IncludeSyntaxError(IncludeReplaceError):
    """Raised when an include directive carries a malformed JSON variables literal."""

    exit_code = 2

    def __init__(self, directive: str, reason: str):
        self.directive = directive
        self.reason = reason
        super().__init__(f"Invalid variables in {directive}: {reason}")


class IncludeDepthError(IncludeReplaceError):
    """Raised when includes nest deeper than the configured maximum."""

    def __init__(self, path: str, max_depth: int):
        self.path = path
        self.max_depth = max_depth
        super().__init__(
            f"Include depth exceeded {max_depth} while including {path} "
            f"(circular include?)"
        )
