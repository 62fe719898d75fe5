"""Azure Blob Storage backed store for receipt images."""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Final

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from kosthub.config import get_settings

logger = logging.getLogger(__name__)

RECEIPT_PREFIX: Final[str] = "payment-receipts"
RECEIPT_CONTENT_TYPES: Final[dict[str, str]] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


@lru_cache
def _get_container_client() -> ContainerClient:
    settings = get_settings()
    if not settings.azure_storage_connection_string:
        msg = "Azure storage connection string is not configured"
        raise RuntimeError(msg)
    if not settings.azure_storage_container_name:
        msg = "Azure storage container name is not configured"
        raise RuntimeError(msg)

    service_client = BlobServiceClient.from_connection_string(
        settings.azure_storage_connection_string
    )
    try:
        service_client.create_container(settings.azure_storage_container_name)
    except ResourceExistsError:
        pass
    return service_client.get_container_client(settings.azure_storage_container_name)


def receipt_extension(file_name: str) -> str:
    """Return the lower-cased extension of ``file_name`` (``""`` when absent)."""

    return PurePosixPath(file_name).suffix.lower()


def content_type_for(blob_path: str) -> str:
    return RECEIPT_CONTENT_TYPES.get(receipt_extension(blob_path), "application/octet-stream")


def build_receipt_path(file_name: str) -> str:
    """Return a collision-free blob path keeping the original extension."""

    return f"{RECEIPT_PREFIX}/receipt-{uuid.uuid4().hex}{receipt_extension(file_name)}"


def store_receipt(blob_path: str, data: bytes) -> None:
    """Upload ``data`` to ``blob_path``, overwriting any previous content."""

    blob_client = _get_container_client().get_blob_client(blob_path)
    blob_client.upload_blob(
        data,
        overwrite=True,
        content_settings=ContentSettings(content_type=content_type_for(blob_path)),
    )
    logger.info("Receipt stored at %s (%s bytes)", blob_path, len(data))


def load_receipt(blob_path: str) -> bytes:
    """Return the stored content at ``blob_path``."""

    blob_client = _get_container_client().get_blob_client(blob_path)
    try:
        stream = blob_client.download_blob()
    except ResourceNotFoundError as exc:
        raise FileNotFoundError(blob_path) from exc
    return stream.readall()


def delete_receipt(blob_path: str) -> None:
    """Delete the blob at ``blob_path``; a missing blob is not an error."""

    blob_client = _get_container_client().get_blob_client(blob_path)
    try:
        blob_client.delete_blob()
    except ResourceNotFoundError:
        return


__all__ = [
    "RECEIPT_CONTENT_TYPES",
    "build_receipt_path",
    "content_type_for",
    "delete_receipt",
    "load_receipt",
    "receipt_extension",
    "store_receipt",
]
