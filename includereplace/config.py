"""Run configuration."""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional


# (text, local_vars, file_path) -> text
ProcessIncludeContents = Callable[[str, Dict[str, Any], str], str]


@dataclass(frozen=True)
class FileMapping:
    """Source globs and the destination they are written to.

    A ``dest`` ending with a path separator is a directory; each source is
    written below it under its own (cwd-relative) path.
    """
    src: List[str]
    dest: str
    cwd: Optional[str] = None


@dataclass(frozen=True)
class Configuration:
    """Process-wide options for a single run."""
    prefix: str = "@@"
    suffix: str = ""
    globals: Dict[str, Any] = field(default_factory=dict)
    includes_dir: str = ""
    docroot: str = "."
    encoding: str = "utf-8"
    use_mustache: bool = True
    always_unescaped: bool = False
    process_include_contents: Optional[ProcessIncludeContents] = None
    expand_values: bool = True
    max_depth: int = 100
    files: List[FileMapping] = field(default_factory=list)

    def with_globals(self, extra: Dict[str, Any]) -> "Configuration":
        """Return a copy whose globals are overlaid with ``extra``."""
        merged = dict(self.globals)
        merged.update(extra)
        return replace(self, globals=merged)
