"""Tests for Set/Project/system-path classification."""

from pathlib import Path

from octatools.discovery.classifier import (
    find_audio_pool,
    has_valid_audio_pool,
    is_audio_file,
    is_project,
    is_set,
    is_system_path,
    platform_family,
    system_prefixes,
)


def test_platform_family():
    assert platform_family("win32") == "win32"
    assert platform_family("darwin") == "darwin"
    assert platform_family("linux") == "linux"
    assert platform_family("freebsd13") == "linux"


def test_system_prefixes_per_platform():
    assert "/proc" in system_prefixes("linux")
    assert "/System" in system_prefixes("darwin")
    assert "C:\\Windows" in system_prefixes("win32")


def test_is_system_path_matches_components():
    prefixes = ["/proc", "/usr"]
    assert is_system_path(Path("/proc"), prefixes)
    assert is_system_path(Path("/usr/share/sounds"), prefixes)
    assert not is_system_path(Path("/usr2/data"), prefixes)
    assert not is_system_path(Path("/home/me/Octatrack"), prefixes)


def test_is_project(tmp_path):
    project = tmp_path / "P1"
    project.mkdir()
    assert not is_project(project)
    (project / "project.work").write_text("")
    assert is_project(project)


def test_is_project_any_work_file(tmp_path):
    """A bank work file alone marks a Project, matched case-insensitively."""
    (tmp_path / "BANK01.WORK").write_bytes(b"")
    assert is_project(tmp_path)


def test_is_project_missing_dir(tmp_path):
    assert not is_project(tmp_path / "nope")


def test_is_set(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE")
    assert is_set(octa_set, prefixes=[])


def test_is_set_lowercase_pool(tmp_path, octa_tree):
    octa_set = tmp_path / "LIVE"
    (octa_set / "audio").mkdir(parents=True)
    octa_tree["project"](octa_set, "P1")
    assert find_audio_pool(octa_set).name == "audio"
    assert is_set(octa_set, prefixes=[])


def test_audio_pool_alone_is_not_a_set(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "EMPTY", projects=())
    assert not is_set(octa_set, prefixes=[])


def test_projects_without_pool_are_not_a_set(tmp_path, octa_tree):
    octa_tree["project"](tmp_path / "LOOSE", "P1")
    octa_tree["project"](tmp_path / "LOOSE", "P2")
    assert not is_set(tmp_path / "LOOSE", prefixes=[])


def test_is_set_rejects_system_path(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE")
    assert not is_set(octa_set, prefixes=[str(tmp_path)])


def test_is_audio_file():
    assert is_audio_file("kick.wav")
    assert is_audio_file("Pad.AIF")
    assert not is_audio_file("notes.txt")


def test_valid_audio_pool(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE", samples=("drums/kick.wav",))
    assert has_valid_audio_pool(octa_set)


def test_audio_pool_without_samples(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE", samples=("readme.txt",))
    assert not has_valid_audio_pool(octa_set)


def test_audio_pool_sample_too_deep(tmp_path, octa_tree):
    octa_set = octa_tree["set"](tmp_path, "LIVE", samples=("a/b/kick.wav",))
    assert not has_valid_audio_pool(octa_set)


def test_no_audio_pool(tmp_path):
    assert not has_valid_audio_pool(tmp_path)
