"""Include files and replace variables in text documents."""

from .config import Configuration, FileMapping
from .includes import DirectiveExpander
from .runner import IncludeReplaceRunner, RunResult
from .variables import VariableResolver

__all__ = [
    "Configuration",
    "FileMapping",
    "DirectiveExpander",
    "IncludeReplaceRunner",
    "RunResult",
    "VariableResolver",
]
