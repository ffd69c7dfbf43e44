"""
Unit tests for filesystem utilities.
"""

import os
import sys
import zipfile

import pytest

from setup_bindiff.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)
from setup_bindiff.core.filesystem import (
    atomic_write,
    copy_tree,
    directory_size,
    ensure_directory,
    extract_zip,
    find_executable,
    make_executable,
    move_file,
    safe_rmtree,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")


def _make_zip(path, members):
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return path


class TestExtractZip:
    """Tests for zip extraction."""

    def test_extract(self, tmp_path):
        archive = _make_zip(
            tmp_path / "BinDiff-Linux.zip",
            {
                "BinDiff-Linux/bindiff": "bin",
                "BinDiff-Linux/tools/binexport2dump": "dump",
            },
        )

        result = extract_zip(archive, tmp_path / "out")

        assert result == tmp_path / "out"
        assert (result / "BinDiff-Linux" / "bindiff").read_text() == "bin"
        assert (result / "BinDiff-Linux" / "tools" / "binexport2dump").exists()

    def test_progress_callback(self, tmp_path):
        archive = _make_zip(tmp_path / "a.zip", {"a": "1", "b": "2"})
        progress = []

        extract_zip(archive, tmp_path / "out", lambda c, t: progress.append((c, t)))

        assert progress == [(1, 2), (2, 2)]

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            extract_zip(tmp_path / "missing.zip", tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"not a zip file")

        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_zip(archive, tmp_path / "out")

    def test_directory_traversal_blocked(self, tmp_path):
        """Test members escaping the destination are rejected before extraction."""
        archive = _make_zip(
            tmp_path / "evil.zip", {"ok.txt": "fine", "../escape.txt": "bad"}
        )

        with pytest.raises(InsecureArchiveError, match="directory traversal"):
            extract_zip(archive, tmp_path / "out")

        assert not (tmp_path / "escape.txt").exists()
        assert not (tmp_path / "out" / "ok.txt").exists()


class TestMoveFile:
    """Tests for move_file."""

    def test_move_into_directory(self, tmp_path):
        source = tmp_path / "bindiff"
        source.write_text("binary")
        dest_dir = ensure_directory(tmp_path / "bin")

        result = move_file(source, dest_dir)

        assert result == dest_dir / "bindiff"
        assert result.read_text() == "binary"
        assert not source.exists()

    def test_replaces_existing(self, tmp_path):
        dest_dir = ensure_directory(tmp_path / "bin")
        (dest_dir / "bindiff").write_text("old")
        source = tmp_path / "bindiff"
        source.write_text("new")

        move_file(source, dest_dir)

        assert (dest_dir / "bindiff").read_text() == "new"

    def test_missing_source(self, tmp_path):
        with pytest.raises(FilesystemError, match="Source does not exist"):
            move_file(tmp_path / "nope", tmp_path)


class TestMakeExecutable:
    """Tests for make_executable."""

    @posix_only
    def test_sets_execute_bits(self, tmp_path):
        path = tmp_path / "bindiff"
        path.write_text("#!/bin/sh\n")
        path.chmod(0o644)

        make_executable(path)

        assert os.access(path, os.X_OK)
        assert path.stat().st_mode & 0o777 == 0o755

    def test_missing_file(self, tmp_path):
        with pytest.raises(FilesystemError, match="Failed to mark"):
            make_executable(tmp_path / "missing")


class TestFindExecutable:
    """Tests for find_executable."""

    @posix_only
    def test_found_on_search_path(self, tmp_path):
        ida_dir = tmp_path / "ida"
        ida_dir.mkdir()
        ida = ida_dir / "ida"
        ida.write_text("#!/bin/sh\n")
        ida.chmod(0o755)

        search_path = os.pathsep.join([str(tmp_path / "empty"), str(ida_dir)])

        assert find_executable("ida", search_path) == ida

    @posix_only
    def test_not_executable_is_skipped(self, tmp_path):
        (tmp_path / "ida").write_text("data")
        (tmp_path / "ida").chmod(0o644)

        assert find_executable("ida", str(tmp_path)) is None

    def test_not_found(self, tmp_path):
        assert find_executable("ida", str(tmp_path)) is None

    def test_empty_search_path(self):
        assert find_executable("ida", "") is None

    def test_extensions(self, tmp_path):
        ida = tmp_path / "ida.exe"
        ida.write_text("MZ")
        ida.chmod(0o755)

        assert find_executable("ida", str(tmp_path), extensions=["", ".exe"]) == ida


class TestSafeFileOperations:
    """Tests for atomic_write, copy_tree, safe_rmtree and directory_size."""

    def test_atomic_write_text(self, tmp_path):
        target = tmp_path / "sub" / "registry.json"

        atomic_write(target, '{"version": 1}')

        assert target.read_text() == '{"version": 1}'
        assert list(target.parent.glob("*.tmp")) == []

    def test_atomic_write_bytes(self, tmp_path):
        target = tmp_path / "data.bin"
        atomic_write(target, b"\x00\x01")
        assert target.read_bytes() == b"\x00\x01"

    def test_copy_tree(self, tmp_path):
        source = tmp_path / "src"
        (source / "bin").mkdir(parents=True)
        (source / "bin" / "bindiff").write_text("x")

        copy_tree(source, tmp_path / "dst")

        assert (tmp_path / "dst" / "bin" / "bindiff").read_text() == "x"

    def test_copy_tree_requires_directory(self, tmp_path):
        with pytest.raises(FilesystemError, match="not a directory"):
            copy_tree(tmp_path / "missing", tmp_path / "dst")

    def test_safe_rmtree_prefix(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(outside, require_prefix=tmp_path / "cache")

        assert outside.exists()

    def test_safe_rmtree_removes(self, tmp_path):
        target = tmp_path / "cache" / "entry"
        (target / "bin").mkdir(parents=True)

        safe_rmtree(target, require_prefix=tmp_path / "cache")

        assert not target.exists()

    def test_safe_rmtree_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_directory_size(self, tmp_path):
        (tmp_path / "a").write_bytes(b"1234")
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "b").write_bytes(b"56")

        assert directory_size(tmp_path) == 6
