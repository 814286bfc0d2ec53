"""Directory classification: Set, Project, system path.

Pure predicates over the filesystem. Nothing here raises for unreadable
directories; they simply do not match.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from octatools.core.constants import (
    AUDIO_EXTENSIONS,
    AUDIO_POOL_NAME,
    AUDIO_POOL_SEARCH_DEPTH,
    SYSTEM_PATH_PREFIXES,
    WORK_FILE_EXTENSION,
)
from octatools.utils.file_utils import list_subdirs


def platform_family(platform: str | None = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"


def system_prefixes(platform: str | None = None) -> list[str]:
    """OS directories excluded from scans on this platform."""
    return SYSTEM_PATH_PREFIXES[platform_family(platform)]


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(path))


def is_system_path(path: Path, prefixes: list[str] | None = None) -> bool:
    """True if ``path`` is, or lies below, one of the system prefixes."""
    if prefixes is None:
        prefixes = system_prefixes()
    candidate = _normalize(str(path))
    for prefix in prefixes:
        prefix = _normalize(prefix)
        if candidate == prefix or candidate.startswith(prefix.rstrip(os.sep) + os.sep):
            return True
    return False


def is_audio_pool_name(name: str) -> bool:
    return name.upper() == AUDIO_POOL_NAME


def find_audio_pool(path: Path) -> Path | None:
    """The audio-pool subdirectory of ``path`` (name matched case-insensitively)."""
    for child in list_subdirs(path):
        if is_audio_pool_name(child.name):
            return child
    return None


def is_audio_file(name: str) -> bool:
    return Path(name).suffix.lower() in AUDIO_EXTENSIONS


def is_project(path: Path) -> bool:
    """True if the directory holds at least one sequencer work file."""
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                if os.path.splitext(entry.name)[1].lower() == WORK_FILE_EXTENSION:
                    return True
    except OSError:
        return False
    return False


def is_set(path: Path, prefixes: list[str] | None = None) -> bool:
    """True if ``path`` has an audio pool and at least one Project child.

    An audio pool alone is not enough, and Project children without an
    audio pool make standalone Projects, not a Set.
    """
    if is_system_path(path, prefixes):
        return False
    if find_audio_pool(path) is None:
        return False
    return any(
        is_project(child)
        for child in list_subdirs(path)
        if not is_audio_pool_name(child.name)
    )


def _has_audio_file(directory: Path, depth: int) -> bool:
    try:
        entries = list(directory.iterdir())
    except OSError:
        return False
    subdirs = []
    for entry in entries:
        try:
            if entry.is_file() and is_audio_file(entry.name):
                return True
            if entry.is_dir():
                subdirs.append(entry)
        except OSError:
            continue
    if depth <= 1:
        return False
    return any(_has_audio_file(sub, depth - 1) for sub in subdirs)


def has_valid_audio_pool(set_path: Path) -> bool:
    """True if the Set's audio pool holds an audio file in itself or one
    level of subfolders."""
    pool = find_audio_pool(set_path)
    if pool is None:
        return False
    return _has_audio_file(pool, AUDIO_POOL_SEARCH_DEPTH)
