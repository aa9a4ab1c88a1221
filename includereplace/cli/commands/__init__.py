"""CLI command handlers."""

from .run import run_config
from .render import render_file

__all__ = ['run_config', 'render_file']
