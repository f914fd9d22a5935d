"""
invoice-generator.com client.
Renders an invoice JSON document to PDF bytes.
"""

from typing import Any, Dict, Optional
import logging

from backoffice.core.config import settings
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.core.integrations.http.http_client import HttpClient

logger = logging.getLogger(__name__)


class InvoiceGeneratorClient:
    """Thin wrapper around the invoice-generator.com render endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.INVOICE_GENERATOR_API_KEY
        self.http = http_client or HttpClient(
            base_url=settings.INVOICE_GENERATOR_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            service_name="Invoice generator",
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def generate_pdf(self, payload: Dict[str, Any]) -> bytes:
        """
        Render an invoice payload to PDF.

        Raises:
            UpstreamServiceError: The renderer rejected the payload or was unreachable
        """
        pdf = await self.http.post_for_bytes("/", json=payload, headers=self._headers())
        if not pdf:
            raise UpstreamServiceError("Invoice generator returned an empty document")
        logger.info(
            "Rendered invoice PDF",
            extra={"invoice_number": payload.get("number"), "size": len(pdf)},
        )
        return pdf

    async def close(self) -> None:
        await self.http.close()
