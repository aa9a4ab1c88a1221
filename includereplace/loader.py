"""Configuration loader and validation for includereplace YAML files."""

import importlib
import re
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import yaml

from includereplace.config import Configuration, FileMapping
from includereplace.exceptions import ConfigValidationError, ValidationError


logger = logging.getLogger(__name__)


class PreservingLoader(yaml.SafeLoader):
    """YAML loader that keeps words like 'on', 'off', 'yes', 'no' as strings.

    Global variable values are document text, so `lang: no` must stay 'no'.
    """
    pass


PreservingLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:bool']
    for first, resolvers in PreservingLoader.yaml_implicit_resolvers.items()
}
# Plain true/false are still booleans
PreservingLoader.add_implicit_resolver(
    'tag:yaml.org,2002:bool',
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF')
)


class ConfigLoader:
    """Loads and validates an includereplace configuration file."""

    STRING_OPTIONS = ('prefix', 'suffix', 'includes_dir', 'docroot', 'encoding')
    BOOL_OPTIONS = ('use_mustache', 'always_unescaped', 'expand_values')

    # camelCase spellings accepted for the snake_case options
    ALIASES = {
        'includesDir': 'includes_dir',
        'useMustache': 'use_mustache',
        'useTemplatingBackend': 'use_mustache',
        'alwaysUnescaped': 'always_unescaped',
        'processIncludeContents': 'process_include_contents',
        'expandValues': 'expand_values',
        'maxDepth': 'max_depth',
    }

    KNOWN_OPTIONS = set(STRING_OPTIONS) | set(BOOL_OPTIONS) | {
        'globals', 'max_depth', 'process_include_contents', 'files'
    }

    def __init__(self):
        """Initialize loader."""
        self.errors: List[ValidationError] = []

    def load(self, config_path: Path) -> Configuration:
        """Load and validate a YAML configuration file."""
        self.errors = []
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.load(f, Loader=PreservingLoader)
        except (OSError, yaml.YAMLError) as e:
            self._add_error(f"Failed to load configuration: {e}")
            self._raise_validation_errors()

        if data is None:
            data = {}
        return self.from_dict(data)

    def from_dict(self, data: Any) -> Configuration:
        """Validate an already-parsed options mapping and build a Configuration."""
        self.errors = []
        if not isinstance(data, dict):
            self._add_error("Configuration must be a YAML object/dictionary")
            self._raise_validation_errors()

        options: Dict[str, Any] = {}
        for key, value in data.items():
            name = self.ALIASES.get(key, key)
            if name not in self.KNOWN_OPTIONS:
                logger.debug(f"Ignoring unrecognized option '{key}'")
                continue
            options[name] = value

        for name in self.STRING_OPTIONS:
            if name in options and not isinstance(options[name], str):
                self._add_error(f"must be a string, got {type(options[name]).__name__}", name)
        if options.get('prefix') == '':
            self._add_error("must not be empty", 'prefix')

        for name in self.BOOL_OPTIONS:
            if name in options and not isinstance(options[name], bool):
                self._add_error(f"must be a boolean, got {type(options[name]).__name__}", name)

        if 'globals' in options:
            if options['globals'] is None:
                options['globals'] = {}
            elif not isinstance(options['globals'], dict):
                self._add_error("must be a mapping of variable names to values", 'globals')
            else:
                for key in options['globals']:
                    if not isinstance(key, str):
                        self._add_error(f"variable name {key!r} must be a string", 'globals')

        if 'max_depth' in options:
            depth = options['max_depth']
            if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
                self._add_error("must be a positive integer", 'max_depth')

        if options.get('process_include_contents') is not None:
            options['process_include_contents'] = self._resolve_hook(options['process_include_contents'])

        if 'files' in options:
            options['files'] = self._validate_files(options['files'])

        if self.errors:
            self._raise_validation_errors()

        return Configuration(**options)

    def _validate_files(self, files: Any) -> List[FileMapping]:
        """Validate the files section."""
        if files is None:
            return []
        if not isinstance(files, list):
            self._add_error("must be a list of {src, dest} mappings", 'files')
            return []

        mappings = []
        for i, entry in enumerate(files):
            path = f"files[{i}]"
            if not isinstance(entry, dict):
                self._add_error("must be a dictionary", path)
                continue

            src = entry.get('src')
            if isinstance(src, str):
                src = [src]
            if not src or not isinstance(src, list) or not all(isinstance(s, str) for s in src):
                self._add_error("'src' must be a glob pattern or a list of glob patterns", path)
                continue

            dest = entry.get('dest')
            if not isinstance(dest, str) or not dest:
                self._add_error("'dest' must be a non-empty string", path)
                continue

            cwd = entry.get('cwd')
            if cwd is not None and not isinstance(cwd, str):
                self._add_error("'cwd' must be a string", path)
                continue

            mappings.append(FileMapping(src=src, dest=dest, cwd=cwd or None))

        return mappings

    def _resolve_hook(self, target: Any) -> Optional[Callable]:
        """Import a 'module:attribute' hook reference."""
        if callable(target):
            return target
        if not isinstance(target, str) or ':' not in target:
            self._add_error("must be an import string like 'package.module:function'",
                            'process_include_contents')
            return None

        module_name, _, attr = target.partition(':')
        try:
            hook = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as e:
            self._add_error(f"cannot import {target}: {e}", 'process_include_contents')
            return None

        if not callable(hook):
            self._add_error(f"{target} is not callable", 'process_include_contents')
            return None
        return hook

    def _add_error(self, message: str, path: str = ""):
        """Record a validation error."""
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_validation_errors(self):
        """Raise all collected validation errors."""
        raise ConfigValidationError(self.errors)
