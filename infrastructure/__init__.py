# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Storage, temp resources, identity
# PURPOSE: Local-disk and Azure operations behind the workflow services
# CREATED: 03 MAR 2026
# ============================================================================
"""
Infrastructure module for the workflow gateway.

Provides:
- BlobRepository: Azure Blob Storage downloads and listings
- ScopedTempFile / ScopedTempDir: self-deleting owner-only temp resources
- ServiceIdentity: the gateway's own bearer token

Usage:
    from infrastructure import BlobRepository, TempKind, acquire

    repo = BlobRepository(account_name=config.storage_account)
    with acquire(TempKind.FILE, "workflow-source-") as source:
        repo.download_to_file("workflows", "main.wdl", source.path)
"""

from infrastructure.storage import (
    BlobRepository,
    BlobStorageError,
)
from infrastructure.tempfiles import (
    TempKind,
    ScopedTempFile,
    ScopedTempDir,
    acquire,
    release,
)
from infrastructure.auth import ServiceIdentity

__all__ = [
    # Blob Storage
    'BlobRepository',
    'BlobStorageError',
    # Temp resources
    'TempKind',
    'ScopedTempFile',
    'ScopedTempDir',
    'acquire',
    'release',
    # Identity
    'ServiceIdentity',
]
