"""Tests for Set membership and audio pool status of a project."""

from octatools.discovery.audio_pool import (
    are_projects_in_same_set,
    get_audio_pool_status,
    is_project_in_set,
)
from octatools.utils.file_utils import canonical_path


def test_project_in_set_with_pool(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE")
    assert is_project_in_set(octa_set / "PROJECT1")


def test_project_in_set_with_siblings(tmp_path, octa_tree):
    octa_tree["project"](tmp_path / "lib", "A")
    octa_tree["project"](tmp_path / "lib", "B")
    assert is_project_in_set(tmp_path / "lib" / "A")


def test_lone_project_not_in_set(tmp_path, octa_tree):
    project = octa_tree["project"](tmp_path / "lib", "A")
    assert not is_project_in_set(project)


def test_are_projects_in_same_set(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE", projects=("A", "B"))
    other = octa_tree["project"](tmp_path / "elsewhere", "C")
    assert are_projects_in_same_set(octa_set / "A", octa_set / "B")
    assert not are_projects_in_same_set(octa_set / "A", other)


def test_audio_pool_status(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE")
    status = get_audio_pool_status(octa_set / "PROJECT1")
    assert status.exists
    assert status.path == canonical_path(octa_set) / "AUDIO"
    assert status.set_path == canonical_path(octa_set)


def test_audio_pool_status_missing(tmp_path, octa_tree):
    project = octa_tree["project"](tmp_path, "A")
    status = get_audio_pool_status(project)
    assert not status.exists
    assert status.path is None
