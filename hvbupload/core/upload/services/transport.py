"""
HTTP transport service.

Performs the request/response exchanges of an upload over aiohttp.
"""
from typing import Optional, Mapping, Dict
import asyncio
import logging
import time
import aiohttp

from ..models import TransportResponse
from ...config import TimeoutConfig
from ...exceptions import TransportError


class AiohttpTransport:
    """
    HTTP transport backed by an aiohttp session.

    Reuses one session for every request of an upload. Network errors,
    timeouts and non-success statuses are raised as TransportError; the
    caller decides what they mean for the upload.
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        headers: Optional[Mapping[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            timeout: Timeouts applied to every request
            headers: Headers added to every request
            session: Optional shared session (closed by its owner, not here)
        """
        self._timeout = timeout or TimeoutConfig()
        self._headers: Dict[str, str] = dict(headers or {})
        self._session = session
        self._owns_session = False
        self._logger = logging.getLogger('hvbupload.upload.transport')

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=10, keepalive_timeout=30),
                timeout=self._timeout.to_aiohttp_timeout()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def __aenter__(self) -> 'AiohttpTransport':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def request(
        self,
        method: str,
        url: str,
        data: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        """
        Perform one HTTP exchange.

        Args:
            method: HTTP method
            url: Absolute request URL
            data: Optional request body
            headers: Request headers (merged over the default headers)

        Returns:
            Response status and headers

        Raises:
            TransportError: On network failure, timeout or HTTP error status
        """
        merged = {**self._headers, **(headers or {})}
        session = await self._get_session()
        body_size = len(data) if data else 0

        request_start = time.time()
        self._logger.debug(f"{method} {url} ({body_size} bytes)")

        try:
            async with session.request(method, url, data=data, headers=merged) as response:
                response.raise_for_status()
                elapsed = time.time() - request_start
                self._logger.debug(f"{method} {url} -> {response.status} in {elapsed:.2f}s")
                return TransportResponse(status=response.status, headers=response.headers)
        except aiohttp.ClientResponseError as e:
            self._logger.error(f"{method} {url} failed with HTTP {e.status}: {e.message}")
            raise TransportError(f"HTTP {e.status} on {method} {url}: {e.message}", status=e.status) from e
        except asyncio.TimeoutError as e:
            elapsed = time.time() - request_start
            self._logger.error(f"{method} {url} timed out after {elapsed:.2f}s")
            raise TransportError(f"Timeout on {method} {url} after {elapsed:.2f}s") from e
        except aiohttp.ClientError as e:
            self._logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Network error on {method} {url}: {e}") from e
