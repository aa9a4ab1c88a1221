"""Run driver: expands every configured source file and writes the result."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from includereplace.config import Configuration, FileMapping
from includereplace.fs import FileSystem
from includereplace.includes import DirectiveExpander


logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a run."""
    processed: List[Tuple[str, str]] = field(default_factory=list)  # (src, dest)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the run finished without warnings."""
        return len(self.warnings) == 0


def is_directory_dest(dest: str) -> bool:
    """A destination ending with a path separator names a directory."""
    return dest.endswith('/') or dest.endswith(os.sep)


class IncludeReplaceRunner:
    """Processes the file mappings of a configuration.

    Documents are processed one at a time. A fatal error stops the run at
    the failing document; outputs already written are left in place and the
    failing document is not written.
    """

    def __init__(self, config: Configuration, fs: Optional[FileSystem] = None):
        self.config = config
        self.fs = fs or FileSystem()
        self.expander = DirectiveExpander(config, self.fs)
        self.result = RunResult()

    def run(self) -> RunResult:
        """Process every file mapping in order."""
        logger.debug(f"Options {self.config}")

        self.result = RunResult()
        first_include_warning = len(self.expander.warnings)

        for mapping in self.config.files:
            self._process_mapping(mapping)

        self.result.warnings.extend(self.expander.warnings[first_include_warning:])
        return self.result

    def _process_mapping(self, mapping: FileMapping) -> None:
        # Warn if source files aren't found
        for pattern in mapping.src:
            if pattern.startswith('!'):
                continue
            if not self.fs.expand_glob(pattern, cwd=mapping.cwd):
                self._warn(f"Source file(s) not found: {pattern}")

        for src in self.fs.expand(mapping.src, cwd=mapping.cwd):
            src_path = os.path.join(mapping.cwd, src) if mapping.cwd else src

            if not self.fs.is_file(src_path):
                self._warn(f"Ignoring non file matching glob: {src_path}")
                continue

            self.process_file(src_path, self.destination_for(src, mapping.dest))

    def destination_for(self, src: str, dest: str) -> str:
        """
        Compute where a source file is written.

        Args:
            src: Source path as matched (relative to the mapping's cwd if any)
            dest: Configured destination

        Returns:
            ``dest`` itself, or ``src`` joined below it when ``dest`` is a directory
        """
        if not is_directory_dest(dest):
            return dest
        _, relative = os.path.splitdrive(src)
        return os.path.join(dest, relative.lstrip('/\\'))

    def process_file(self, src: str, dest: str) -> str:
        """
        Expand one source file and write it to ``dest``.

        Returns:
            The expanded text
        """
        logger.info(f"Processing {src}")

        contents = self.fs.read(src, self.config.encoding)
        contents = self.expander.expand_document(contents, src)

        logger.debug(f"Saving to {dest}")
        self.fs.write(dest, contents, self.config.encoding)
        self.result.processed.append((src, dest))

        logger.info(f"Processed {src}")
        return contents

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.result.warnings.append(message)
