# ============================================================================
# SCOPED TEMP RESOURCE TESTS
# ============================================================================
# STATUS: Tests - Owner-only temp files/directories
# PURPOSE: Verify permissions, uniqueness, and guaranteed deletion
# CREATED: 03 MAR 2026
# ============================================================================
"""
Scoped Temp Resource Tests

Tests acquire/release, context-manager cleanup on exceptions, ExitStack
ordering, and that release never raises.

Run with:
    pytest tests/test_tempfiles.py -v
"""

import stat
from contextlib import ExitStack
from unittest.mock import patch

import pytest

from infrastructure.tempfiles import (
    ScopedTempDir,
    ScopedTempFile,
    TempKind,
    acquire,
    release,
)


def _mode(path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestScopedTempFile:

    def test_created_owner_only(self, tmp_path):
        handle = acquire(TempKind.FILE, "workflow-options-", dir=tmp_path)
        try:
            assert handle.path.is_file()
            assert _mode(handle.path) == 0o600
            assert handle.path.name.startswith("workflow-options-")
            assert handle.path.name.endswith("-wfgw")
        finally:
            release(handle)

    def test_names_unique_per_acquire(self, tmp_path):
        a = acquire(TempKind.FILE, "workflow-source-", dir=tmp_path)
        b = acquire(TempKind.FILE, "workflow-source-", dir=tmp_path)
        try:
            assert a.path != b.path
        finally:
            release(a)
            release(b)

    def test_release_deletes(self, tmp_path):
        handle = ScopedTempFile("workflow-labels-", dir=tmp_path)
        handle.write_text('{"a": "b"}')
        release(handle)
        assert not handle.path.exists()
        assert handle.released

    def test_double_release_is_noop(self, tmp_path):
        handle = ScopedTempFile("workflow-labels-", dir=tmp_path)
        release(handle)
        release(handle)
        assert not handle.path.exists()

    def test_release_after_external_delete(self, tmp_path):
        handle = ScopedTempFile("workflow-labels-", dir=tmp_path)
        handle.path.unlink()
        release(handle)
        assert handle.released

    def test_release_failure_is_logged_not_raised(self, tmp_path, caplog):
        handle = ScopedTempFile("workflow-labels-", dir=tmp_path)
        with patch.object(ScopedTempFile, "_delete", side_effect=PermissionError("denied")):
            release(handle)
        assert "Failed to delete temp resource" in caplog.text
        handle.path.unlink()


class TestScopedTempDir:

    def test_created_owner_only(self, tmp_path):
        with acquire(TempKind.DIRECTORY, "workflow-deps-", dir=tmp_path) as handle:
            assert handle.path.is_dir()
            assert _mode(handle.path) == 0o700

    def test_recursive_delete(self, tmp_path):
        handle = ScopedTempDir("workflow-deps-", dir=tmp_path)
        nested = handle.path / "lib" / "tasks"
        nested.mkdir(parents=True)
        (nested / "align.wdl").write_text("task align {}")
        release(handle)
        assert not handle.path.exists()


class TestScopedCleanup:

    def test_context_manager_releases_on_exception(self, tmp_path):
        with pytest.raises(RuntimeError):
            with acquire(TempKind.FILE, "workflow-inputs-", dir=tmp_path) as handle:
                path = handle.path
                raise RuntimeError("boom")
        assert not path.exists()

    def test_exit_stack_releases_all_in_reverse_order(self, tmp_path):
        deleted = []
        original_file_delete = ScopedTempFile._delete
        original_dir_delete = ScopedTempDir._delete

        def track_file(self):
            deleted.append(self.path)
            original_file_delete(self)

        def track_dir(self):
            deleted.append(self.path)
            original_dir_delete(self)

        with patch.object(ScopedTempFile, "_delete", track_file), \
                patch.object(ScopedTempDir, "_delete", track_dir):
            with pytest.raises(ValueError):
                with ExitStack() as stack:
                    first = stack.enter_context(acquire(TempKind.FILE, "a-", dir=tmp_path))
                    second = stack.enter_context(acquire(TempKind.DIRECTORY, "b-", dir=tmp_path))
                    third = stack.enter_context(acquire(TempKind.FILE, "c-", dir=tmp_path))
                    raise ValueError("early exit")

        assert deleted == [third.path, second.path, first.path]
        assert list(tmp_path.iterdir()) == []
