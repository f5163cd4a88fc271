"""
Filesystem helpers: project discovery, Java file walking, lossy reads.

Filesystem errors propagate to the caller; nothing here skips an unreadable
directory silently.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import AbstractSet, Iterable, List

# Build output and VCS metadata usually found next to Java sources.
BUILD_DIRS = frozenset(
    {
        ".git",
        "target",
        "build",
        ".gradle",
        "node_modules",
        "__MACOSX",
        "__pycache__",
    }
)


def _raise(err: OSError) -> None:
    raise err


def list_project_dirs(root: Path) -> List[Path]:
    """Immediate subdirectories of ``root``, sorted by name."""
    root = Path(root)
    with os.scandir(root) as it:
        dirs = [Path(entry.path) for entry in it if entry.is_dir(follow_symlinks=False)]
    return sorted(dirs, key=lambda p: p.name)


def iter_java_files(project_root: Path, ignore: AbstractSet[str] = frozenset()) -> Iterable[Path]:
    project_root = Path(project_root)
    if not project_root.is_dir():
        raise NotADirectoryError(f"Not a directory: {project_root}")

    for root, dirs, files in os.walk(project_root, onerror=_raise):
        # Prune in-place; sort for a stable walk order
        dirs[:] = sorted(d for d in dirs if d not in ignore)
        for fn in sorted(files):
            if Path(fn).suffix == ".java":
                yield Path(root) / fn


def read_source_text(path: Path) -> str:
    # Source corpora contain stray non-UTF-8 bytes; replace them instead of failing.
    return Path(path).read_bytes().decode("utf-8", errors="replace")
