"""
Two-pass document expansion: placeholder substitution, then include splicing.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from includereplace.config import Configuration
from includereplace.exceptions import IncludeDepthError
from includereplace.fs import FileSystem
from includereplace.includes.directive import IncludeDirective, compile_include_pattern, find_first
from includereplace.variables import MustacheBackend, VariableResolver


logger = logging.getLogger(__name__)


def compute_docroot(file_path: str, docroot: str) -> str:
    """
    Relative path from ``file_path``'s directory to ``docroot``.

    Uses forward slashes and ends with ``/`` unless the two are the same
    directory, in which case it is empty.
    """
    file_dir = os.path.dirname(os.path.abspath(file_path))
    relative = os.path.relpath(os.path.abspath(docroot), file_dir).replace('\\', '/')
    if relative == '.':
        return ''
    return relative + '/'


class DirectiveExpander:
    """
    Expands placeholders and include directives in document text.

    ``substitute`` resolves Mustache, local and global placeholders without
    touching the file system. ``expand_includes`` finds include directives,
    expands the files they name and splices the result back, re-scanning the
    document after every splice.
    """

    def __init__(self, config: Configuration, fs: Optional[FileSystem] = None):
        """
        Initialize the expander for one run.

        Args:
            config: Run configuration
            fs: File-system collaborator (defaults to the local disk)
        """
        self.config = config
        self.fs = fs or FileSystem()
        self.resolver = VariableResolver(
            prefix=config.prefix,
            suffix=config.suffix,
            expand_values=config.expand_values
        )
        self.resolver.set_globals(config.globals)
        self.backend = MustacheBackend(always_unescaped=config.always_unescaped)
        self.include_pattern = compile_include_pattern(config.prefix, config.suffix)
        self.warnings: List[str] = []

    def substitute(self, text: str, local_vars: Optional[Mapping[str, Any]] = None) -> str:
        """
        Resolve placeholders in ``text``.

        Order: Mustache (locals only), then local placeholders, then global
        placeholders. A local therefore shadows a global with the same name.

        Args:
            text: Document text
            local_vars: Raw local variables for this document scope

        Returns:
            Text with placeholders replaced
        """
        local_vars = local_vars or {}

        if self.config.use_mustache:
            text = self.backend.render(text, local_vars)

        text = self.resolver.replace_all(text, self.resolver.normalize(local_vars))
        text = self.resolver.replace_all(text, self.resolver.globals)
        return text

    def expand_includes(self, text: str, working_dir: str, depth: int = 0) -> str:
        """
        Replace every include directive in ``text`` with its expanded content.

        Args:
            text: Document text (already substituted)
            working_dir: Directory of the file ``text`` came from
            depth: Current include nesting depth

        Returns:
            Text with no include directives left

        Raises:
            IncludeSyntaxError: If a directive's variables are not valid JSON
            IncludeDepthError: If includes nest deeper than ``max_depth``
        """
        directive = find_first(self.include_pattern, text)

        while directive:
            include_path = self.resolve_path(directive.path, working_dir)

            local_vars: Dict[str, Any] = dict(directive.local_vars)
            # An explicit docroot (even null) wins over the computed one
            if 'docroot' not in local_vars:
                local_vars['docroot'] = compute_docroot(include_path, self.config.docroot)

            if self.fs.exists(include_path):
                logger.debug(f"Including {include_path}")
            logger.debug(f"Locals {local_vars}")

            contents = self._include_contents(include_path, local_vars, depth + 1)
            text = text[:directive.start] + contents + text[directive.end:]

            directive = find_first(self.include_pattern, text)

        return text

    def resolve_path(self, include_path: str, working_dir: str) -> str:
        """
        Resolve an include path to an absolute path (or glob).

        Relative paths are taken from ``includes_dir`` when configured, else
        from ``working_dir``.
        """
        if not os.path.isabs(include_path):
            base = self.config.includes_dir or working_dir
            return os.path.abspath(os.path.join(base, include_path))

        if self.config.includes_dir:
            self._warn(
                f"includes_dir works only with relative paths. "
                f"Could not apply includes_dir to {include_path}",
                level=logging.ERROR
            )
        return os.path.abspath(include_path)

    def _include_contents(self, include_path: str, local_vars: Dict[str, Any], depth: int) -> str:
        if depth > self.config.max_depth:
            raise IncludeDepthError(include_path, self.config.max_depth)

        files = self.fs.expand_glob(include_path, files_only=True)
        if not files:
            self._warn(f"Include file(s) not found: {include_path}")

        contents = ''
        for index, file_path in enumerate(files):
            contents += self.fs.read(file_path, self.config.encoding)
            # One newline between files, none after the last
            if index != len(files) - 1:
                contents += '\n'

            # The whole buffer is processed again for every appended file
            contents = self.substitute(contents, local_vars)
            contents = self.expand_includes(contents, os.path.dirname(file_path), depth)

            hook = self.config.process_include_contents
            if hook is not None:
                contents = hook(contents, local_vars, file_path)

        return contents

    def expand_document(self, text: str, file_path: str) -> str:
        """
        Fully expand a top-level document read from ``file_path``.

        The document gets its own ``docroot`` local before includes are resolved.
        """
        local_vars = {'docroot': compute_docroot(file_path, self.config.docroot)}
        logger.debug(f"Locals {local_vars}")

        text = self.substitute(text, local_vars)
        return self.expand_includes(text, os.path.dirname(file_path))

    def _warn(self, message: str, level: int = logging.WARNING) -> None:
        logger.log(level, message)
        self.warnings.append(message)
