"""
Azure Blob Storage utilities — download sources and upload flipped images.

Flow:
  1. The orchestrator asks for the source blob to be written into its
     per-invocation scratch directory.
  2. The flipped file is uploaded under the derived name in the same
     container, overwriting any previous result.
  3. The uploaded blob's URL is recorded on the task and returned.
"""
from __future__ import annotations

import logging
from pathlib import Path

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from imageflip.config import Settings
from imageflip.exceptions import (
    BlobStorageError,
    SourceImageNotFound,
    StorageAccessDenied,
    StorageCredentialsMissing,
)

logger = logging.getLogger(__name__)

_service_client: BlobServiceClient | None = None


def get_blob_service_client(settings: Settings) -> BlobServiceClient:
    """Return (and lazily create) the module-level async BlobServiceClient."""
    global _service_client
    if _service_client is None:
        if not settings.storage_connection_string:
            raise StorageCredentialsMissing("AzureWebJobsStorage")
        _service_client = BlobServiceClient.from_connection_string(
            settings.storage_connection_string,
        )
    return _service_client


async def close_storage() -> None:
    """Close the BlobServiceClient. Called at shutdown."""
    global _service_client
    if _service_client is not None:
        await _service_client.close()
        _service_client = None
        logger.info("Blob service client closed")


class BlobStore:
    """Get/put blobs by name within a single container."""

    def __init__(self, container: ContainerClient) -> None:
        self._container = container

    @classmethod
    def from_settings(cls, settings: Settings) -> BlobStore:
        service = get_blob_service_client(settings)
        return cls(service.get_container_client(settings.blob_container))

    def url_for(self, blob_name: str) -> str:
        return self._container.get_blob_client(blob_name).url

    async def download_to_path(self, blob_name: str, path: str | Path) -> Path:
        """Write the blob's content to *path*."""
        path = Path(path)
        blob = self._container.get_blob_client(blob_name)
        try:
            downloader = await blob.download_blob()
            with path.open("wb") as fh:
                await downloader.readinto(fh)
        except ResourceNotFoundError:
            raise SourceImageNotFound(blob_name)
        except ClientAuthenticationError:
            raise StorageAccessDenied()
        except HttpResponseError as exc:
            raise _translate(exc)
        except AzureError as exc:
            logger.error("Blob download failed for %s: %s", blob_name, exc)
            raise BlobStorageError()
        logger.info("Downloaded blob %s (%d bytes)", blob_name, path.stat().st_size)
        return path

    async def upload_from_path(
        self,
        blob_name: str,
        path: str | Path,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload the file at *path* as *blob_name*; return the blob URL."""
        blob = self._container.get_blob_client(blob_name)
        try:
            with Path(path).open("rb") as fh:
                await blob.upload_blob(
                    fh,
                    overwrite=True,
                    content_settings=ContentSettings(content_type=content_type),
                )
        except ClientAuthenticationError:
            raise StorageAccessDenied()
        except HttpResponseError as exc:
            raise _translate(exc)
        except AzureError as exc:
            logger.error("Blob upload failed for %s: %s", blob_name, exc)
            raise BlobStorageError()
        logger.info("Uploaded blob %s", blob_name)
        return blob.url


def _translate(exc: HttpResponseError) -> Exception:
    if exc.status_code in (401, 403):
        return StorageAccessDenied()
    logger.error("Blob storage request failed (%s): %s", exc.status_code, exc)
    return BlobStorageError()
