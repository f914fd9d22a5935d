"""
Azure Blob Storage client for PDF persistence.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID
import logging

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from backoffice.core.config import settings
from backoffice.core.exceptions import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class UploadResult:
    url: str
    blob_name: str


def timesheet_blob_path(client_id: UUID, month: str) -> str:
    """Blob path for a timesheet PDF, e.g. ``timesheets/<client>/2024-01.pdf``."""
    return f"timesheets/{client_id}/{month}.pdf"


def invoice_blob_path(client_id: UUID, invoice_number: str) -> str:
    """Blob path for an invoice PDF, e.g. ``invoices/<client>/1001.pdf``."""
    return f"invoices/{client_id}/{invoice_number}.pdf"


class AzureBlobClient:
    """
    Azure Blob Storage client wrapper.
    Opens a short-lived async service client per operation.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        container_name: Optional[str] = None,
    ):
        """
        Initialize Azure Blob Storage client.

        Args:
            connection_string: Storage account connection string (defaults to config)
            container_name: Container holding the PDFs (defaults to config)
        """
        self.connection_string = connection_string or settings.AZURE_STORAGE_CONNECTION_STRING
        self.container_name = container_name or settings.AZURE_STORAGE_CONTAINER

    def _service(self) -> BlobServiceClient:
        if not self.connection_string:
            raise ConfigurationError("AZURE_STORAGE_CONNECTION_STRING environment variable is not set")
        if not self.container_name:
            raise ConfigurationError("AZURE_STORAGE_CONTAINER environment variable is not set")
        try:
            return BlobServiceClient.from_connection_string(self.connection_string)
        except ValueError as e:
            raise ConfigurationError(f"AZURE_STORAGE_CONNECTION_STRING is malformed: {e}")

    async def upload_pdf(self, data: bytes, blob_path: str) -> UploadResult:
        """
        Upload a PDF, replacing any blob already stored at the path.

        Returns:
            URL and name of the uploaded blob
        """
        try:
            async with self._service() as service:
                blob = service.get_blob_client(self.container_name, blob_path)
                await blob.upload_blob(
                    data,
                    overwrite=True,
                    content_settings=ContentSettings(content_type=PDF_CONTENT_TYPE),
                )
                url = blob.url
        except AzureError as e:
            raise UpstreamServiceError(f"Blob upload failed for {blob_path}: {e}")

        logger.info("Uploaded blob", extra={"blob_path": blob_path, "size": len(data)})
        return UploadResult(url=url, blob_name=blob_path)

    async def download_pdf(self, blob_path: str) -> bytes:
        """Download a blob's content."""
        try:
            async with self._service() as service:
                blob = service.get_blob_client(self.container_name, blob_path)
                stream = await blob.download_blob()
                return await stream.readall()
        except ResourceNotFoundError:
            raise UpstreamServiceError(f"Blob not found: {blob_path}", status_code=404)
        except AzureError as e:
            raise UpstreamServiceError(f"Blob download failed for {blob_path}: {e}")

    async def delete_pdf(self, blob_path: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if deleted, False if the blob did not exist
        """
        try:
            async with self._service() as service:
                blob = service.get_blob_client(self.container_name, blob_path)
                await blob.delete_blob()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            raise UpstreamServiceError(f"Blob delete failed for {blob_path}: {e}")

        logger.info("Deleted blob", extra={"blob_path": blob_path})
        return True
