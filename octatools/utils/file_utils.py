"""File and path utility functions."""

from __future__ import annotations

import os
from pathlib import Path


def canonical_path(path: Path) -> Path:
    """Resolve symlinks; fall back to an absolute path if resolution fails."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return Path(os.path.abspath(path))


def is_within(path: Path, base: Path) -> bool:
    """True if ``path`` equals ``base`` or lies below it."""
    return path == base or base in path.parents


def list_subdirs(path: Path) -> list[Path]:
    """Child directories of ``path``, sorted by name. Unreadable -> []."""
    try:
        entries = list(path.iterdir())
    except OSError:
        return []
    dirs = []
    for entry in entries:
        try:
            if entry.is_dir():
                dirs.append(entry)
        except OSError:
            continue
    return sorted(dirs, key=lambda p: p.name)
