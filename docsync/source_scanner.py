"""Source tree discovery for the reference pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import SOURCE_EXTENSION
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".gradle",
    "node_modules",
    "build",
    "target",
    "out",
}

logger = get_logger("scanner")


@dataclass(frozen=True)
class ExcludePattern:
    """One ``exclude_paths`` entry from .docsync.yml.

    A trailing ``/`` limits the pattern to directories. A pattern holding a
    ``/`` is matched against the path relative to the source root; a bare
    name is matched against every path segment.
    """

    glob: str
    directories_only: bool = False

    @classmethod
    def parse(cls, raw: str) -> Optional["ExcludePattern"]:
        text = raw.strip()
        directories_only = text.endswith("/")
        text = text.strip("/")
        if not text:
            return None
        return cls(glob=text, directories_only=directories_only)

    def excludes(self, rel_path: str, is_dir: bool) -> bool:
        if self.directories_only and not is_dir:
            return False
        if "/" in self.glob:
            return fnmatchcase(rel_path, self.glob)
        return any(fnmatchcase(segment, self.glob) for segment in rel_path.split("/"))


class SourceScanner:
    """Enumerates source files under a root directory."""

    def __init__(
        self,
        extension: str = SOURCE_EXTENSION,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.extension = extension
        self._excludes: List[ExcludePattern] = []
        for raw in exclude_paths:
            pattern = ExcludePattern.parse(raw)
            if pattern is not None:
                self._excludes.append(pattern)

    def scan(self, root: Path | str) -> List[Path]:
        """Return absolute paths of matching files, sorted.

        A missing root yields an empty list so callers report zero pages
        instead of failing; a root that is a regular file is rejected.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            logger.warning("Source root not found: %s", root_path)
            return []
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source root is not a directory: {root_path}")

        files = sorted(self._iter_files(root_path))
        logger.debug("Discovered %d %s files under %s", len(files), self.extension, root_path)
        return files

    def _excluded(self, rel_path: str, is_dir: bool) -> bool:
        return any(pattern.excludes(rel_path, is_dir) for pattern in self._excludes)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._excluded(rel_path, True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in filenames:
                if not filename.endswith(self.extension):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._excluded(rel_path, False):
                    continue
                yield current_dir / filename


__all__ = ["ExcludePattern", "SourceScanner"]
