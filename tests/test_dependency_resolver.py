# ============================================================================
# DEPENDENCY RESOLVER TESTS
# ============================================================================
# STATUS: Tests - Import detection and sibling staging
# PURPOSE: Verify storage is only touched when imports exist
# CREATED: 03 MAR 2026
# ============================================================================
"""
Dependency Resolver Tests

BlobRepository is a MagicMock; its download_all writes small files into the
staging directory so archiving can be checked against real ZIP contents.

Run with:
    pytest tests/test_dependency_resolver.py -v
"""

import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.errors import DependencyResolutionError
from core.models import StorageLocator
from infrastructure.storage import BlobStorageError
from services.dependency_resolver import (
    archive_dependencies,
    download_dependencies_if_exist,
    has_import_declarations,
)


LOCATOR = StorageLocator.from_uri("gs://bucket/pipelines/germline/main.wdl")


def _write_source(tmp_path: Path, text: str) -> Path:
    source = tmp_path / "main.wdl"
    source.write_text(text)
    return source


def _make_storage(names):
    """Mock storage whose download_all materializes each name under the destination."""
    storage = MagicMock()
    storage.list_blob_names.return_value = list(names)

    def download_all(container, blob_names, destination_dir, strip_prefix=""):
        written = []
        for name in blob_names:
            local = Path(destination_dir) / name[len(strip_prefix):]
            local.parent.mkdir(parents=True, exist_ok=True)
            local.write_text(f"# {name}\n")
            written.append(local)
        return written

    storage.download_all.side_effect = download_all
    return storage


# ============================================================================
# IMPORT DETECTION
# ============================================================================

class TestImportDetection:

    @pytest.mark.parametrize("line", [
        'import "tasks/align.wdl"',
        "import 'tasks/align.wdl' as align",
        '    import "lib.wdl" as lib',
        '\timport "lib.wdl"',
    ])
    def test_import_lines_detected(self, tmp_path, line):
        source = _write_source(tmp_path, f"version 1.0\n{line}\nworkflow w {{}}\n")
        assert has_import_declarations(source) is True

    @pytest.mark.parametrize("line", [
        "# import \"commented.wdl\"",
        "importer \"x.wdl\"",
        "import lib.wdl",
        "String s = 'import \"x.wdl\"'",
    ])
    def test_non_import_lines_ignored(self, tmp_path, line):
        source = _write_source(tmp_path, f"version 1.0\n{line}\nworkflow w {{}}\n")
        assert has_import_declarations(source) is False


# ============================================================================
# STAGING
# ============================================================================

class TestDownloadDependencies:

    def test_no_imports_no_storage_calls(self, tmp_path):
        source = _write_source(tmp_path, "version 1.0\nworkflow w {}\n")
        staging = tmp_path / "staging"
        staging.mkdir()
        storage = MagicMock()

        assert download_dependencies_if_exist(storage, source, LOCATOR, staging) is False
        storage.list_blob_names.assert_not_called()
        storage.download_all.assert_not_called()
        storage.download_to_file.assert_not_called()
        assert list(staging.iterdir()) == []

    def test_imports_fetch_same_extension_siblings(self, tmp_path):
        source = _write_source(tmp_path, 'version 1.0\nimport "tasks/align.wdl"\n')
        staging = tmp_path / "staging"
        staging.mkdir()
        storage = _make_storage([
            "pipelines/germline/main.wdl",
            "pipelines/germline/tasks/align.wdl",
        ])

        assert download_dependencies_if_exist(storage, source, LOCATOR, staging) is True

        storage.list_blob_names.assert_called_once_with(
            "bucket", prefix="pipelines/germline/", suffix=".wdl"
        )
        storage.download_all.assert_called_once()
        assert storage.download_all.call_args.kwargs["strip_prefix"] == "pipelines/germline/"
        assert (staging / "tasks" / "align.wdl").is_file()
        assert (staging / "main.wdl").is_file()

    def test_list_failure_raises_resolution_error(self, tmp_path):
        source = _write_source(tmp_path, 'import "lib.wdl"\n')
        storage = MagicMock()
        storage.list_blob_names.side_effect = BlobStorageError("listing denied", "bucket")

        with pytest.raises(DependencyResolutionError) as exc_info:
            download_dependencies_if_exist(storage, source, LOCATOR, tmp_path)
        assert "listing denied" in exc_info.value.message
        assert exc_info.value.status_code == 500

    def test_download_failure_raises_resolution_error(self, tmp_path):
        source = _write_source(tmp_path, 'import "lib.wdl"\n')
        storage = MagicMock()
        storage.list_blob_names.return_value = ["pipelines/germline/lib.wdl"]
        storage.download_all.side_effect = BlobStorageError("read failed", "bucket")

        with pytest.raises(DependencyResolutionError):
            download_dependencies_if_exist(storage, source, LOCATOR, tmp_path)

    def test_root_level_document_lists_whole_container(self, tmp_path):
        source = _write_source(tmp_path, 'import "lib.wdl"\n')
        storage = _make_storage(["lib.wdl"])
        locator = StorageLocator.from_uri("gs://bucket/main.wdl")

        assert download_dependencies_if_exist(storage, source, locator, tmp_path / "s") is True
        storage.list_blob_names.assert_called_once_with("bucket", prefix="", suffix=".wdl")


# ============================================================================
# ARCHIVING
# ============================================================================

class TestArchiveDependencies:

    def test_archive_paths_relative_to_staging(self, tmp_path):
        staging = tmp_path / "staging"
        (staging / "tasks").mkdir(parents=True)
        (staging / "main.wdl").write_text("workflow w {}")
        (staging / "tasks" / "align.wdl").write_text("task align {}")

        archive = archive_dependencies(staging, tmp_path / "deps.zip")

        with zipfile.ZipFile(archive) as zf:
            assert sorted(zf.namelist()) == ["main.wdl", "tasks/align.wdl"]
            assert zf.read("tasks/align.wdl") == b"task align {}"
