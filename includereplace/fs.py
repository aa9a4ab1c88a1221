"""File-system access: glob expansion, reads and writes."""

import glob
import os
from pathlib import Path
from typing import Iterable, List, Optional


class FileSystem:
    """Reads, writes and expands glob patterns.

    Patterns follow POSIX glob semantics with ``**`` matching any number of
    directories. Matches come back sorted for deterministic ordering.
    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def read(self, path: str, encoding: str = 'utf-8') -> str:
        # newline='' keeps line endings exactly as they are on disk
        with open(path, 'r', encoding=encoding, newline='') as f:
            return f.read()

    def write(self, path: str, text: str, encoding: str = 'utf-8') -> None:
        """Write ``text`` to ``path``, creating parent directories."""
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(dest, 'w', encoding=encoding, newline='') as f:
            f.write(text)

    def expand_glob(
        self,
        pattern: str,
        cwd: Optional[str] = None,
        files_only: bool = False
    ) -> List[str]:
        """
        Expand one glob pattern.

        Args:
            pattern: Glob pattern, absolute or relative to ``cwd``
            cwd: Base directory for relative patterns (matches stay relative to it)
            files_only: Drop directories from the result

        Returns:
            Sorted list of matched paths
        """
        matches = glob.glob(pattern, root_dir=cwd, recursive=True)
        if files_only:
            base = cwd or ''
            matches = [m for m in matches if os.path.isfile(os.path.join(base, m))]
        return sorted(matches)

    def expand(self, patterns: Iterable[str], cwd: Optional[str] = None) -> List[str]:
        """
        Expand several patterns into one ordered, de-duplicated list.

        Patterns starting with ``!`` remove their matches from what was
        collected so far.
        """
        result: List[str] = []
        for pattern in patterns:
            if pattern.startswith('!'):
                excluded = set(self.expand_glob(pattern[1:], cwd=cwd))
                result = [m for m in result if m not in excluded]
                continue
            for match in self.expand_glob(pattern, cwd=cwd):
                if match not in result:
                    result.append(match)
        return result
