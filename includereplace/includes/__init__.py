"""Include directive parsing and expansion."""

from .directive import IncludeDirective, compile_include_pattern
from .expander import DirectiveExpander, compute_docroot

__all__ = [
    "IncludeDirective",
    "compile_include_pattern",
    "DirectiveExpander",
    "compute_docroot",
]
