# ============================================================================
# SCOPED TEMPORARY RESOURCES
# ============================================================================
# STATUS: Infrastructure - Owner-only temp files and directories
# PURPOSE: Back each submission bundle document with a self-deleting resource
# CREATED: 03 MAR 2026
# ============================================================================
"""
Scoped Temporary Resources

Temp files and directories that:
- are created owner-only (0600 files, 0700 directories)
- get a unique random name per acquisition, so concurrent requests never share one
- are deleted on release, which never raises (failures are logged)

Usage:
    from contextlib import ExitStack
    from infrastructure.tempfiles import TempKind, acquire

    with ExitStack() as stack:
        options = stack.enter_context(acquire(TempKind.FILE, "workflow-options-"))
        staging = stack.enter_context(acquire(TempKind.DIRECTORY, "workflow-deps-"))
        ...
    # both deleted here, staging first
"""

import logging
import os
import shutil
import stat
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = "-wfgw"
FILE_MODE = stat.S_IRUSR | stat.S_IWUSR
DIRECTORY_MODE = stat.S_IRWXU


class TempKind(str, Enum):
    """What kind of temporary resource to acquire."""
    FILE = "file"
    DIRECTORY = "directory"


class _ScopedTempResource:
    """Common release/context-manager behaviour."""

    def __init__(self, path: Path):
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Delete the resource. Safe to call more than once; never raises."""
        if self._released:
            return
        self._released = True
        try:
            self._delete()
            logger.debug(f"Deleted temp resource: {self.path}")
        except FileNotFoundError:
            pass
        except Exception as e:
            logger.warning(f"Failed to delete temp resource {self.path}: {e}")

    def _delete(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class ScopedTempFile(_ScopedTempResource):
    """An empty owner-only temp file, deleted on release."""

    def __init__(
        self,
        prefix: str,
        suffix: str = DEFAULT_SUFFIX,
        dir: Optional[Union[str, Path]] = None,
    ):
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=dir)
        os.close(fd)
        os.chmod(name, FILE_MODE)
        super().__init__(Path(name))

    def _delete(self) -> None:
        self.path.unlink()

    def write_text(self, content: str) -> Path:
        self.path.write_text(content, encoding="utf-8")
        return self.path


class ScopedTempDir(_ScopedTempResource):
    """An owner-only temp directory, deleted recursively on release."""

    def __init__(
        self,
        prefix: str,
        suffix: str = DEFAULT_SUFFIX,
        dir: Optional[Union[str, Path]] = None,
    ):
        name = tempfile.mkdtemp(prefix=prefix, suffix=suffix, dir=dir)
        os.chmod(name, DIRECTORY_MODE)
        super().__init__(Path(name))

    def _delete(self) -> None:
        shutil.rmtree(self.path)


def acquire(
    kind: TempKind,
    prefix: str,
    dir: Optional[Union[str, Path]] = None,
) -> _ScopedTempResource:
    """Acquire a scoped temp file or directory."""
    if kind == TempKind.FILE:
        return ScopedTempFile(prefix, dir=dir)
    return ScopedTempDir(prefix, dir=dir)


def release(handle: _ScopedTempResource) -> None:
    """Release a handle returned by acquire()."""
    handle.release()


__all__ = [
    "TempKind",
    "ScopedTempFile",
    "ScopedTempDir",
    "acquire",
    "release",
]
