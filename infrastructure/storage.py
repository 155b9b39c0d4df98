# ============================================================================
# BLOB STORAGE INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - Azure Blob Storage operations
# PURPOSE: Stage workflow sources and their sibling files onto local disk
# CREATED: 03 MAR 2026
# ============================================================================
"""
Blob Storage Infrastructure

Provides BlobRepository for Azure Blob Storage operations:
- download_to_file: Stream a blob to a local file (no memory spike)
- list_blob_names: List blobs under a prefix, optionally filtered by suffix
- download_all: Download many blobs into a directory, keeping relative paths

Uses DefaultAzureCredential for authentication (works with Managed Identity).
Container clients are cached per repository instance.

Failures raise BlobStorageError so callers can map them to their own
error kinds.
"""

import os
import time
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


class BlobStorageError(Exception):
    """A storage read, list, or download failed."""

    def __init__(self, message: str, container: str = "", blob_path: str = ""):
        super().__init__(message)
        self.container = container
        self.blob_path = blob_path


# ============================================================================
# BLOB REPOSITORY
# ============================================================================

class BlobRepository:
    """
    Azure Blob Storage repository with streaming downloads.

    One instance per storage account, constructed from configuration.

    Usage:
        repo = BlobRepository(account_name="wfgwsources")

        repo.download_to_file(
            container="workflows",
            blob_path="pipelines/main.wdl",
            local_path="/tmp/workflow-source-abc-wfgw",
        )
    """

    def __init__(self, account_name: str, credential: Any = None):
        """Initialize blob repository for storage account."""
        if not account_name:
            raise ValueError("BlobRepository requires an explicit account_name.")

        self.account_name = account_name

        # Container client cache with thread-safe access
        self._container_clients: Dict[str, Any] = {}
        self._container_clients_lock = threading.Lock()

        # Lazy initialization of Azure clients
        self._blob_service = None
        self._credential = credential

        logger.info(f"BlobRepository initialized for account: {self.account_name}")

    # ========================================================================
    # AZURE CLIENT INITIALIZATION
    # ========================================================================

    def _get_credential(self):
        """Get Azure credential (lazy initialization)."""
        if self._credential is None:
            client_id = os.environ.get("AZURE_CLIENT_ID")
            if client_id:
                from azure.identity import ManagedIdentityCredential
                self._credential = ManagedIdentityCredential(client_id=client_id)
                logger.debug("ManagedIdentityCredential initialized with client_id")
            else:
                from azure.identity import DefaultAzureCredential
                self._credential = DefaultAzureCredential()
                logger.debug("DefaultAzureCredential initialized")
        return self._credential

    def _get_blob_service(self):
        """Get BlobServiceClient (lazy initialization)."""
        if self._blob_service is None:
            from azure.storage.blob import BlobServiceClient
            account_url = f"https://{self.account_name}.blob.core.windows.net"
            self._blob_service = BlobServiceClient(
                account_url=account_url,
                credential=self._get_credential(),
            )
            logger.debug(f"BlobServiceClient initialized for {account_url}")
        return self._blob_service

    def _get_container_client(self, container: str):
        """
        Get or create cached container client.

        Thread-safe with double-checked locking pattern.
        """
        if container in self._container_clients:
            return self._container_clients[container]

        with self._container_clients_lock:
            if container in self._container_clients:
                return self._container_clients[container]

            container_client = self._get_blob_service().get_container_client(container)
            self._container_clients[container] = container_client
            logger.debug(f"Created container client for: {container}")
            return container_client

    # ========================================================================
    # DOWNLOADS
    # ========================================================================

    def download_to_file(
        self,
        container: str,
        blob_path: str,
        local_path: Union[str, Path],
    ) -> Dict[str, Any]:
        """
        Stream a blob to a local file without loading it into memory.

        The destination is overwritten. On failure the partial file is
        removed and BlobStorageError is raised.

        Returns:
            Dict with bytes_transferred, duration_seconds, source_uri, local_path
        """
        local_path_obj = Path(local_path)
        source_uri = f"blob://{container}/{blob_path}"

        local_path_obj.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"DOWNLOAD_TO_FILE {source_uri} -> {local_path_obj}")

        start_time = time.time()
        bytes_transferred = 0

        try:
            blob_client = self._get_container_client(container).get_blob_client(blob_path)
            download_stream = blob_client.download_blob()

            with open(local_path_obj, "wb") as f:
                for chunk in download_stream.chunks():
                    f.write(chunk)
                    bytes_transferred += len(chunk)

        except Exception as e:
            logger.error(f"DOWNLOAD_TO_FILE failed for {source_uri}: {e}")

            if local_path_obj.exists():
                try:
                    local_path_obj.unlink()
                except Exception as cleanup_error:
                    logger.warning(f"Failed to clean up partial file: {cleanup_error}")

            raise BlobStorageError(
                f"Error reading storage object {source_uri}: {e}",
                container=container,
                blob_path=blob_path,
            ) from e

        duration = time.time() - start_time
        logger.debug(f"   Transferred {bytes_transferred} bytes in {duration:.2f}s")

        return {
            "bytes_transferred": bytes_transferred,
            "duration_seconds": round(duration, 2),
            "source_uri": source_uri,
            "local_path": str(local_path_obj),
        }

    def list_blob_names(
        self,
        container: str,
        prefix: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> List[str]:
        """
        List blob names under a prefix, optionally keeping only names ending
        with suffix. Raises BlobStorageError on failure.
        """
        logger.info(f"Listing blobs in {container} with prefix: {prefix!r}")
        try:
            container_client = self._get_container_client(container)
            names = [
                blob.name
                for blob in container_client.list_blobs(name_starts_with=prefix or None)
            ]
        except Exception as e:
            logger.error(f"Failed to list blobs in {container}/{prefix}: {e}")
            raise BlobStorageError(
                f"Error listing storage objects under {container}/{prefix or ''}: {e}",
                container=container,
                blob_path=prefix or "",
            ) from e

        if suffix:
            names = [name for name in names if name.endswith(suffix)]
        return names

    def download_all(
        self,
        container: str,
        blob_names: Iterable[str],
        destination_dir: Union[str, Path],
        strip_prefix: str = "",
    ) -> List[Path]:
        """
        Download blobs into destination_dir.

        Each blob lands at destination_dir / (name without strip_prefix), so
        the directory layout under strip_prefix is preserved.
        """
        destination = Path(destination_dir)
        written: List[Path] = []

        for blob_name in blob_names:
            relative = blob_name[len(strip_prefix):] if blob_name.startswith(strip_prefix) else blob_name
            local_file = destination / relative
            # Blob names are caller-controlled; keep writes inside destination
            if destination.resolve() not in local_file.resolve().parents:
                raise BlobStorageError(
                    f"Refusing to stage {blob_name} outside of {destination}",
                    container=container,
                    blob_path=blob_name,
                )
            self.download_to_file(container, blob_name, local_file)
            written.append(local_file)

        logger.info(f"Downloaded {len(written)} blobs from {container} into {destination}")
        return written


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "BlobRepository",
    "BlobStorageError",
]
