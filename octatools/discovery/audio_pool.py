"""Set membership and audio pool lookups for a single project."""

from __future__ import annotations

from pathlib import Path

from octatools.core.constants import PROJECT_FILE_NAMES
from octatools.core.models import AudioPoolStatus
from octatools.discovery.classifier import find_audio_pool
from octatools.utils.file_utils import canonical_path, list_subdirs


def _has_project_file(directory: Path) -> bool:
    return any((directory / name).is_file() for name in PROJECT_FILE_NAMES)


def is_project_in_set(project_path: Path) -> bool:
    """True if the project's parent folder has an audio pool or holds
    at least one other project."""
    parent = canonical_path(Path(project_path)).parent
    if find_audio_pool(parent) is not None:
        return True

    project_count = 0
    for child in list_subdirs(parent):
        if _has_project_file(child):
            project_count += 1
            if project_count >= 2:
                return True
    return False


def are_projects_in_same_set(project_a: Path, project_b: Path) -> bool:
    return canonical_path(Path(project_a)).parent == canonical_path(Path(project_b)).parent


def get_audio_pool_status(project_path: Path) -> AudioPoolStatus:
    """Audio pool of the Set the project lives in, if there is one."""
    set_path = canonical_path(Path(project_path)).parent
    pool = find_audio_pool(set_path)
    return AudioPoolStatus(exists=pool is not None, path=pool, set_path=set_path)
