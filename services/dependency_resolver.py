# ============================================================================
# DEPENDENCY RESOLVER
# ============================================================================
# STATUS: Service - Stage imported workflow documents for submission
# PURPOSE: Detect imports in a source document and fetch its sibling files
# CREATED: 03 MAR 2026
# ============================================================================
"""
Dependency Resolver

A workflow source document may import other documents by relative path.
The engine cannot read our object storage, so those documents have to ride
along with the submission as a ZIP archive.

Resolution is deliberately coarse: import targets are NOT parsed. If the
main document has at least one import line, every object under the main
document's storage directory with the same extension is downloaded,
subdirectories included, keeping paths relative to that directory.

Consequences of the over-fetch:
- unrelated siblings are shipped too (harmless to the engine, costs bandwidth)
- imports reaching outside the parent directory (../lib.wdl) are not fetched
  and fail at the engine

Usage:
    if download_dependencies_if_exist(repo, source.path, locator, staging.path):
        archive_dependencies(staging.path, archive.path)
"""

import logging
import re
import zipfile
from pathlib import Path
from typing import Union

from core.errors import DependencyResolutionError
from core.models import StorageLocator
from infrastructure.storage import BlobRepository, BlobStorageError

logger = logging.getLogger(__name__)

# import "x.wdl" / import 'x.wdl' [as alias], optionally indented
IMPORT_PATTERN = re.compile(r"""^\s*import\s+(?:"[^"]*"|'[^']*')""")


def has_import_declarations(source_path: Union[str, Path]) -> bool:
    """True if any line of the document is an import declaration."""
    with open(source_path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            if IMPORT_PATTERN.match(line):
                return True
    return False


def download_dependencies_if_exist(
    storage: BlobRepository,
    source_path: Union[str, Path],
    locator: StorageLocator,
    staging_dir: Union[str, Path],
) -> bool:
    """
    Stage the main document's sibling files if it declares any imports.

    Args:
        storage: Storage adapter for the locator's account
        source_path: Local copy of the main document
        locator: Where the main document lives in storage
        staging_dir: Existing directory to download into

    Returns:
        False without touching storage when the document has no imports,
        True once every sibling has been downloaded.

    Raises:
        DependencyResolutionError: listing or downloading failed
    """
    if not has_import_declarations(source_path):
        logger.debug(f"No imports in {locator.uri}, skipping dependency staging")
        return False

    prefix = locator.parent_prefix
    try:
        names = storage.list_blob_names(
            locator.container,
            prefix=prefix,
            suffix=locator.extension or None,
        )
        staged = storage.download_all(
            locator.container,
            names,
            staging_dir,
            strip_prefix=prefix,
        )
    except BlobStorageError as e:
        raise DependencyResolutionError(
            f"Error staging dependencies of {locator.uri}: {e}"
        ) from e

    logger.info(
        f"Staged {len(staged)} dependency candidates from "
        f"{locator.scheme}://{locator.container}/{prefix}"
    )
    return True


def archive_dependencies(
    staging_dir: Union[str, Path],
    archive_path: Union[str, Path],
) -> Path:
    """
    Write every file under staging_dir into a ZIP at archive_path.

    Entry names are relative to staging_dir so the engine resolves imports
    the same way they resolve next to the main document.
    """
    staging = Path(staging_dir)
    archive = Path(archive_path)
    count = 0

    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for file_path in sorted(staging.rglob("*")):
            if file_path.is_file():
                zf.write(file_path, arcname=file_path.relative_to(staging).as_posix())
                count += 1

    logger.debug(f"Archived {count} files into {archive}")
    return archive


__all__ = [
    "IMPORT_PATTERN",
    "has_import_declarations",
    "download_dependencies_if_exist",
    "archive_dependencies",
]
