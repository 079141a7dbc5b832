"""Project file writers for the local filesystem and Azure Blob Storage."""

from __future__ import annotations

import contextlib
import logging
import ntpath
import os
from typing import TYPE_CHECKING

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

if TYPE_CHECKING:
    from vlisp_project.config import AppConfig

logger = logging.getLogger(__name__)


class LocalProjectStore:
    """Writes project files to the local filesystem.

    This is the writer for callers that run outside Azure, such as an editor
    integration that saves next to the sources. The HTTP app uses
    BlobProjectStore instead.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def replace(self, path: str, text: str) -> int:
        """Replace the file at ``path`` with ``text``.

        The old file is removed first. Text is written as-is, so CRLF line
        endings survive on every platform.

        Args:
            path: Target file path.
            text: Complete file content.

        Returns:
            Number of bytes written.
        """
        data = text.encode(self._encoding)
        if os.path.exists(path):
            os.remove(path)
        with open(path, "wb") as fh:
            fh.write(data)
        logger.info("[replace] wrote project file; path:%s;bytes:%d", path, len(data))
        return len(data)


class BlobProjectStore:
    """Writes project files as blobs, one per project file name."""

    def __init__(
        self,
        storage_connection_string: str,
        container: str,
        encoding: str = "utf-8",
    ) -> None:
        """Initialise the blob store.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container holding project files.
            encoding: Encoding used for the stored text.
        """
        self._blob_service = BlobServiceClient.from_connection_string(storage_connection_string)
        self._container = container
        self._encoding = encoding

    @staticmethod
    def blob_name(path: str) -> str:
        """Map a Windows project file path to a blob name (drive dropped, ``/`` separated)."""
        _, tail = ntpath.splitdrive(ntpath.normpath(path))
        return tail.replace("\\", "/").lstrip("/")

    def replace(self, path: str, text: str) -> int:
        """Upload ``text`` as the blob for ``path``, overwriting any previous version.

        Creates the container if it does not exist.

        Returns:
            Number of bytes uploaded.
        """
        data = text.encode(self._encoding)
        blob_name = self.blob_name(path)
        container_client = self._blob_service.get_container_client(self._container)
        with contextlib.suppress(Exception):
            container_client.create_container()

        blob_client = container_client.get_blob_client(blob_name)
        blob_client.upload_blob(data, overwrite=True)
        logger.info("[replace] uploaded project file; blob:%s;bytes:%d", blob_name, len(data))
        return len(data)

    def read(self, path: str) -> str | None:
        """Download the stored text for ``path``, or None if nothing was saved."""
        blob_name = self.blob_name(path)
        try:
            container_client = self._blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(blob_name)
            data = blob_client.download_blob().readall()
            return data.decode(self._encoding)
        except ResourceNotFoundError:
            logger.info("[read] project file not found; blob:%s", blob_name)
            return None


def blob_project_store_from_config(config: AppConfig) -> BlobProjectStore:
    """Construct a BlobProjectStore from application configuration."""
    return BlobProjectStore(
        storage_connection_string=config.storage_connection_string,
        container=config.project_container,
        encoding=config.file_encoding,
    )
