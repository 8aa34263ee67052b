"""
Tests for plain file operations.

Tests focus on behavior and contracts:
- Missing targets raise NotFoundError
- Creating an existing file raises AlreadyExistsError
- Content written is content read
- Platform launchers are chosen by platform (mocked, nothing is opened)
"""

import gzip
import os
import subprocess
from unittest.mock import patch

import pytest

from bundlefs import fileops
from bundlefs.errors import AlreadyExistsError, NotFoundError, ResourceError


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("sample content", encoding="utf-8")
    return path


class TestReadWrite:
    """Test whole-file reads and writes."""

    def test_has_file(self, sample, tmp_path):
        assert fileops.has_file(sample)
        assert not fileops.has_file(tmp_path / "missing.txt")

    def test_read_file(self, sample):
        assert fileops.read_file(sample) == "sample content"

    def test_read_file_bytes(self, sample):
        assert fileops.read_file_bytes(sample) == b"sample content"

    def test_read_missing(self, tmp_path):
        with pytest.raises(NotFoundError):
            fileops.read_file(tmp_path / "missing.txt")

    def test_write_replaces_content(self, sample):
        returned = fileops.write_file(sample, "new content")

        assert returned == "new content"
        assert sample.read_text(encoding="utf-8") == "new content"

    def test_write_keeps_newlines_exactly(self, sample):
        fileops.write_file(sample, "a\nb\r\nc")
        assert sample.read_bytes() == b"a\nb\r\nc"

    def test_write_requires_existing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            fileops.write_file(tmp_path / "missing.txt", "x")
        assert not (tmp_path / "missing.txt").exists()


class TestCreateDelete:
    """Test creating and deleting files and folders."""

    def test_create_empty_file(self, tmp_path):
        path = tmp_path / "new.txt"

        assert fileops.create_file(path) == str(path)
        assert path.read_text() == ""

    def test_create_with_content(self, tmp_path):
        path = tmp_path / "new.txt"
        fileops.create_file(path, "initial")

        assert fileops.read_file(path) == "initial"

    def test_create_existing_raises(self, sample):
        with pytest.raises(AlreadyExistsError):
            fileops.create_file(sample)
        assert sample.read_text(encoding="utf-8") == "sample content"

    def test_create_in_missing_folder_raises(self, tmp_path):
        with pytest.raises(ResourceError) as exc_info:
            fileops.create_file(tmp_path / "nope" / "new.txt")
        assert not isinstance(exc_info.value, AlreadyExistsError)

    def test_delete(self, sample):
        fileops.delete_file(sample)
        assert not sample.exists()

    def test_delete_missing_raises(self, tmp_path):
        with pytest.raises(NotFoundError):
            fileops.delete_file(tmp_path / "missing.txt")

    def test_create_folder_with_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"

        assert fileops.create_folder(target) == str(target)
        assert target.is_dir()

    def test_create_existing_folder_is_fine(self, tmp_path):
        fileops.create_folder(tmp_path)
        assert tmp_path.is_dir()


class TestCompress:
    """Test gzip-and-delete."""

    def test_compresses_and_removes_source(self, sample, tmp_path):
        target = tmp_path / "sample.txt.gz"
        fileops.compress_file(sample, target)

        assert not sample.exists()
        with gzip.open(target, "rb") as f:
            assert f.read() == b"sample content"

    def test_missing_source(self, tmp_path):
        with pytest.raises(NotFoundError):
            fileops.compress_file(tmp_path / "missing.txt", tmp_path / "out.gz")

    def test_unwritable_target_keeps_source(self, sample, tmp_path):
        with pytest.raises(ResourceError):
            fileops.compress_file(sample, tmp_path / "no-such-dir" / "out.gz")
        assert sample.exists()


class TestLastModified:
    """Test modification time lookup."""

    def test_returns_milliseconds(self, sample):
        os.utime(sample, (1_600_000_000, 1_600_000_000.5))
        assert fileops.last_modified(sample) == 1_600_000_000_500

    def test_missing(self, tmp_path):
        with pytest.raises(NotFoundError):
            fileops.last_modified(tmp_path / "missing.txt")


class TestOpenFile:
    """Test opening files with the default application."""

    def test_linux_uses_xdg_open(self, sample):
        with patch.object(fileops.sys, "platform", "linux"), \
             patch.object(fileops.subprocess, "run") as run:
            fileops.open_file(sample)

        run.assert_called_once_with(["xdg-open", str(sample)], check=True)

    def test_macos_uses_open(self, sample):
        with patch.object(fileops.sys, "platform", "darwin"), \
             patch.object(fileops.subprocess, "run") as run:
            fileops.open_file(sample)

        run.assert_called_once_with(["open", str(sample)], check=True)

    def test_windows_uses_startfile(self, sample):
        with patch.object(fileops.sys, "platform", "win32"), \
             patch.object(fileops.os, "startfile", create=True) as startfile:
            fileops.open_file(sample)

        startfile.assert_called_once_with(str(sample))

    def test_launcher_failure_is_wrapped(self, sample):
        error = subprocess.CalledProcessError(1, ["xdg-open"])
        with patch.object(fileops.sys, "platform", "linux"), \
             patch.object(fileops.subprocess, "run", side_effect=error):
            with pytest.raises(ResourceError) as exc_info:
                fileops.open_file(sample)

        assert exc_info.value.cause is error

    def test_missing_launcher_is_wrapped(self, sample):
        with patch.object(fileops.sys, "platform", "linux"), \
             patch.object(fileops.subprocess, "run", side_effect=FileNotFoundError("xdg-open")):
            with pytest.raises(ResourceError):
                fileops.open_file(sample)

    def test_missing_file(self, tmp_path):
        with patch.object(fileops.subprocess, "run") as run:
            with pytest.raises(NotFoundError):
                fileops.open_file(tmp_path / "missing.pdf")
        run.assert_not_called()
