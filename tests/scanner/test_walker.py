"""Tests for directory traversal and classification."""

import os

import pytest

from bldd.models import ArchitectureTag
from bldd.scanner import DirectoryWalker, ExecutableClassifier

IS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0


def _walker(probe, **kwargs):
    return DirectoryWalker(ExecutableClassifier(probe), **kwargs)


def _entry(arch=ArchitectureTag.X86_64):
    return (arch, [])


class TestClassifier:
    """Tests for ExecutableClassifier."""

    def test_accepts_executable_elf(self, tmp_path, make_executable, fake_probe):
        path = make_executable(tmp_path / "tool")
        assert ExecutableClassifier(fake_probe({path: _entry()})).classify(path)

    def test_rejects_non_executable(self, tmp_path, make_executable, fake_probe):
        path = make_executable(tmp_path / "data", mode=0o644)
        if IS_ROOT and os.access(path, os.X_OK):
            pytest.skip("root may execute any file")
        assert not ExecutableClassifier(fake_probe({path: _entry()})).classify(path)

    def test_rejects_failed_elf_probe(self, tmp_path, make_executable, fake_probe):
        path = make_executable(tmp_path / "script")
        assert not ExecutableClassifier(fake_probe({})).classify(path)

    def test_rejects_symlink_to_executable(self, tmp_path, make_executable, fake_probe):
        target = make_executable(tmp_path / "tool")
        link = tmp_path / "link"
        link.symlink_to(target)
        probe = fake_probe({target: _entry(), str(link): _entry()})
        assert not ExecutableClassifier(probe).classify(str(link))

    def test_rejects_missing_file(self, tmp_path, fake_probe):
        assert not ExecutableClassifier(fake_probe({})).classify(str(tmp_path / "gone"))


class TestDirectoryWalker:
    """Tests for DirectoryWalker."""

    def test_recursive_depth_first_in_name_order(self, tmp_path, make_executable, fake_probe):
        paths = [
            make_executable(tmp_path / "b"),
            make_executable(tmp_path / "a" / "z"),
            make_executable(tmp_path / "a" / "sub" / "y"),
            make_executable(tmp_path / "c"),
        ]
        probe = fake_probe({p: _entry() for p in paths})

        found = list(_walker(probe).walk(str(tmp_path)))

        assert found == [
            str(tmp_path / "a" / "sub" / "y"),
            str(tmp_path / "a" / "z"),
            str(tmp_path / "b"),
            str(tmp_path / "c"),
        ]

    def test_only_candidates_yielded(self, tmp_path, make_executable, fake_probe):
        elf = make_executable(tmp_path / "elf")
        make_executable(tmp_path / "not-elf")
        (tmp_path / "readme").write_text("hello")

        found = list(_walker(fake_probe({elf: _entry()})).walk(str(tmp_path)))
        assert found == [elf]

    def test_relative_root_gives_absolute_paths(self, tmp_path, make_executable, fake_probe, monkeypatch):
        path = make_executable(tmp_path / "bin" / "tool")
        monkeypatch.chdir(tmp_path)

        found = list(_walker(fake_probe({path: _entry()})).walk("bin"))
        assert found == [path]
        assert os.path.isabs(found[0])

    def test_symlink_to_ancestor_not_followed(self, tmp_path, make_executable, fake_probe):
        root = tmp_path / "root"
        tool = make_executable(root / "sub" / "tool")
        (root / "sub" / "loop").symlink_to(root, target_is_directory=True)
        probe = fake_probe({tool: _entry(), str(root / "sub" / "loop" / "sub" / "tool"): _entry()})

        walker = _walker(probe)
        found = list(walker.walk(str(root)))

        assert found == [tool]
        assert walker.stats.directories_visited == 2

    def test_symlinked_directory_subtree_excluded(self, tmp_path, make_executable, fake_probe):
        outside = make_executable(tmp_path / "outside" / "tool")
        root = tmp_path / "root"
        root.mkdir()
        (root / "linked").symlink_to(tmp_path / "outside", target_is_directory=True)

        found = list(_walker(fake_probe({outside: _entry()})).walk(str(root)))
        assert found == []

    @pytest.mark.skipif(IS_ROOT, reason="permission bits are not enforced for root")
    def test_unreadable_subdirectory_skipped(self, tmp_path, make_executable, fake_probe):
        visible = make_executable(tmp_path / "open" / "tool")
        hidden = make_executable(tmp_path / "locked" / "tool")
        locked = tmp_path / "locked"
        os.chmod(locked, 0)
        try:
            walker = _walker(fake_probe({visible: _entry(), hidden: _entry()}))
            found = list(walker.walk(str(tmp_path)))
        finally:
            os.chmod(locked, 0o755)

        assert found == [visible]
        assert walker.stats.directories_skipped == 1

    def test_empty_directory(self, tmp_path, fake_probe):
        walker = _walker(fake_probe({}))
        assert list(walker.walk(str(tmp_path))) == []
        assert walker.stats.directories_visited == 1
