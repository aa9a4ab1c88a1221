"""
Variable handling: normalization, placeholder patterns and Mustache rendering.
"""

from .resolver import VariableResolver
from .backend import MustacheBackend

__all__ = ['VariableResolver', 'MustacheBackend']
