"""
Variable normalization and placeholder patterns.
Placeholders are ``<prefix><name><suffix>`` tokens, e.g. ``@@title``.
"""

import json
import re
from string import Template
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple


class BracedTemplate(Template):
    """Template that only recognizes the braced ${name} form.

    Bare $name and $$ are ordinary text, so shell and JavaScript snippets
    in variable values come through unchanged.
    """
    pattern = r"""
    (?P<escaped>(?!))|
    \$\{(?P<braced>[_a-z][_a-z0-9]*)\}|
    (?P<named>(?!))|
    (?P<invalid>(?!))
    """


class VariableResolver:
    """
    Normalizes variable mappings and owns the compiled placeholder patterns.

    One resolver serves one run:
    - globals are normalized once by ``set_globals`` and reused for every document
    - locals are normalized per include directive via ``normalize``
    - compiled patterns are memoized per name
    """

    def __init__(self, prefix: str = '@@', suffix: str = '', expand_values: bool = True):
        """
        Initialize the resolver.

        Args:
            prefix: Text that opens a placeholder
            suffix: Text that closes a placeholder
            expand_values: Whether string values get ${name} expansion
        """
        self.prefix = prefix
        self.suffix = suffix
        self.expand_values = expand_values
        self.globals: Dict[str, str] = {}
        self._patterns: Dict[str, Pattern[str]] = {}

    def set_globals(self, mapping: Mapping[str, Any]) -> Dict[str, str]:
        """
        Normalize the run's global variables.

        String values are kept exactly as written; other values become JSON text.

        Args:
            mapping: Raw global variables

        Returns:
            The normalized globals, also kept on the resolver
        """
        resolved: Dict[str, str] = {}
        for name, value in mapping.items():
            resolved[name] = value if isinstance(value, str) else self.to_text(value)
        self.globals = resolved
        return resolved

    def normalize(
        self,
        mapping: Optional[Mapping[str, Any]],
        context: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        """
        Normalize a variable mapping to text values.

        Args:
            mapping: Raw variables (strings, numbers, objects, ...)
            context: Values available to ${name} expansion; defaults to the globals

        Returns:
            Ordered mapping of name to textual value
        """
        if not mapping:
            return {}
        if context is None:
            context = self.globals
        return {name: self._normalize_value(value, context) for name, value in mapping.items()}

    def _normalize_value(self, value: Any, context: Mapping[str, str]) -> str:
        if isinstance(value, str):
            if self.expand_values:
                return self.expand_value(value, context)
            return value
        return self.to_text(value)

    @staticmethod
    def expand_value(value: str, context: Mapping[str, str]) -> str:
        """
        Expand ${name} references in a string value.

        Unknown names, bare $name and $$ are left as they are.
        """
        return BracedTemplate(value).safe_substitute(context)

    @staticmethod
    def to_text(value: Any) -> str:
        """
        Serialize a non-string value to compact JSON text.

        Examples: {"a":1}, [1,2], true, 3, null
        """
        try:
            return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
        except (TypeError, ValueError):
            # Dates and other YAML scalars JSON can't encode
            return str(value)

    def pattern_for(self, name: str) -> Pattern[str]:
        """Return the compiled placeholder pattern for a variable name."""
        pattern = self._patterns.get(name)
        if pattern is None:
            pattern = re.compile(
                re.escape(self.prefix) + re.escape(name) + re.escape(self.suffix)
            )
            self._patterns[name] = pattern
        return pattern

    def patterns(self, normalized: Mapping[str, str]) -> List[Tuple[str, Pattern[str], str]]:
        """
        Build the ordered (name, pattern, value) triples for a normalized mapping.

        Args:
            normalized: Output of ``normalize`` or ``set_globals``

        Returns:
            Triples in the mapping's order
        """
        return [(name, self.pattern_for(name), value) for name, value in normalized.items()]

    def replace_all(self, text: str, normalized: Mapping[str, str]) -> str:
        """
        Replace every placeholder of each variable with its value.

        Values are inserted literally; each pattern is applied in one pass.
        """
        for _, pattern, value in self.patterns(normalized):
            text = pattern.sub(lambda _match, value=value: value, text)
        return text
