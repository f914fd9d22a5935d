"""
Generic async HTTP client wrapper using aiohttp.
Single attempt by default; retry with exponential backoff is opt-in.
"""

import asyncio
import json as jsonlib
from dataclasses import dataclass
from typing import Optional, Dict, Any
import aiohttp
import logging

from backoffice.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """Fully read response body."""
    status: int
    body: bytes
    content_type: str

    def json(self) -> Any:
        return jsonlib.loads(self.body.decode("utf-8") or "null")


class HttpClient:
    """
    Async HTTP client wrapper using aiohttp.
    Provides get/post helpers that raise UpstreamServiceError on failure.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 1,
        retry_delay: float = 1.0,
        service_name: str = "HTTP",
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Optional base URL for all requests
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts
            retry_delay: Initial delay between retries in seconds
            service_name: Label used in error messages
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.service_name = service_name
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if self.base_url and not endpoint.startswith(("http://", "https://")):
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint

    async def request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> HttpResponse:
        """
        Make an HTTP request, reading the whole body before the connection is released.

        Raises:
            UpstreamServiceError: Non-2xx status, or the request could not be completed
        """
        url = self._build_url(endpoint)
        session = await self._get_session()
        last_error: Optional[str] = None

        for attempt in range(self.max_retries):
            try:
                async with session.request(method, url, **kwargs) as response:
                    body = await response.read()
                    if response.status >= 400:
                        text = body.decode("utf-8", errors="replace")
                        raise UpstreamServiceError(
                            f"{self.service_name} API error: {response.status} - {text}",
                            details={"upstream_status": response.status},
                        )
                    return HttpResponse(
                        status=response.status,
                        body=body,
                        content_type=response.headers.get("Content-Type", ""),
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = str(e) or type(e).__name__
                if attempt < self.max_retries - 1:
                    delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.max_retries}): {last_error}. Retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"Request failed after {self.max_retries} attempts: {last_error}")

        raise UpstreamServiceError(f"{self.service_name} request failed: {last_error}")

    async def get_json(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make GET request and decode the JSON body."""
        response = await self.request("GET", endpoint, params=params, headers=headers)
        try:
            return response.json()
        except (UnicodeDecodeError, ValueError) as e:
            logger.error(f"{self.service_name} returned an undecodable body: {e}")
            raise UpstreamServiceError(f"{self.service_name} returned an invalid JSON body")

    async def post_for_bytes(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """Make POST request with a JSON body and return the raw response body."""
        response = await self.request("POST", endpoint, json=json, headers=headers)
        return response.body
