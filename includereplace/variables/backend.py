"""Mustache rendering for the templating pass."""

from typing import Any, Mapping

import pystache


# Entity table used by mustache.js
HTML_ENTITIES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#39;',
    '/': '&#x2F;',
    '`': '&#x60;',
    '=': '&#x3D;',
}


def escape_html(text: str) -> str:
    """Escape ``text`` the way mustache.js does."""
    return ''.join(HTML_ENTITIES.get(char, char) for char in text)


def _identity(text: str) -> str:
    return text


class JsonStyleRenderer(pystache.Renderer):
    """Renderer that prints scalars the way JavaScript would.

    true/false instead of True/False, nothing for None, 2 for 2.0.
    """

    def str_coerce(self, val):
        if val is None:
            return ''
        if isinstance(val, bool):
            return 'true' if val else 'false'
        if isinstance(val, float) and val.is_integer():
            return str(int(val))
        return str(val)


class MustacheBackend:
    """Renders Mustache syntax against a variable mapping.

    Escaping is chosen per backend instance and handed to each renderer, so
    no global escape function is ever replaced.
    """

    def __init__(self, always_unescaped: bool = False):
        self.always_unescaped = always_unescaped

    def render(self, text: str, variables: Mapping[str, Any]) -> str:
        """
        Render ``text`` with ``variables``.

        Args:
            text: Document text that may contain {{name}}, {{#section}}, ...
            variables: Mapping visible to the template

        Returns:
            Rendered text; missing names render as empty strings
        """
        escape = _identity if self.always_unescaped else escape_html
        renderer = JsonStyleRenderer(escape=escape, missing_tags='ignore')
        return renderer.render(text, dict(variables))
