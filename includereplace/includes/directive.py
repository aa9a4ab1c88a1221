"""
Include directive grammar.

    <prefix>include("path/or/*.glob"[, {"json": "object"}])<suffix>
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Pattern

from includereplace.exceptions import IncludeSyntaxError


def compile_include_pattern(prefix: str = '@@', suffix: str = '') -> Pattern[str]:
    """
    Compile the include directive pattern for a prefix/suffix pair.

    Groups: 1 = path, 3 = JSON object literal (optional).
    """
    return re.compile(
        re.escape(prefix)
        + r'include\(\s*["\'](.*?)["\'](,\s*({[\s\S]*?})){0,1}\s*\)'
        + re.escape(suffix)
    )


@dataclass
class IncludeDirective:
    """A parsed include directive occurrence."""
    text: str
    start: int
    end: int
    path: str
    local_vars: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_match(cls, match: 're.Match[str]') -> 'IncludeDirective':
        """
        Build a directive from a pattern match.

        Raises:
            IncludeSyntaxError: If the variables literal is not a JSON object
        """
        literal = match.group(3)
        local_vars: Dict[str, Any] = {}
        if literal:
            try:
                local_vars = json.loads(literal)
            except json.JSONDecodeError as e:
                raise IncludeSyntaxError(match.group(0), str(e)) from e
            if not isinstance(local_vars, dict):
                raise IncludeSyntaxError(match.group(0), "variables must be a JSON object")

        return cls(
            text=match.group(0),
            start=match.start(),
            end=match.end(),
            path=match.group(1),
            local_vars=local_vars,
        )


def find_first(pattern: Pattern[str], text: str) -> Optional[IncludeDirective]:
    """Return the first directive in ``text``, or None."""
    match = pattern.search(text)
    if not match:
        return None
    return IncludeDirective.from_match(match)
