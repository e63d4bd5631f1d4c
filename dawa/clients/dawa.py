"""Async HTTP client for the DAWA web service."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional

import httpx
import orjson

from dawa.config import Config, load_config
from dawa.constants import BUFFER_SIZE, CHUNK_SIZE, DEFAULT_HOST
from dawa.errors import RequestError, ServiceError

logger = logging.getLogger(__name__)


def error_from_body(url: str, status_code: int, body: bytes) -> RequestError:
    """Turn an error response body into the matching exception.

    A ``{"type", "title", "details"}`` payload with a non-empty ``type``
    becomes :class:`ServiceError`; anything else a plain :class:`RequestError`.
    """
    if not body:
        return RequestError(url)
    try:
        payload: Any = orjson.loads(body)
    except orjson.JSONDecodeError:
        return RequestError(url)
    if not isinstance(payload, dict) or not payload.get("type"):
        return RequestError(url)
    details = payload.get("details")
    if details is not None and not isinstance(details, list):
        details = [details]
    return ServiceError(
        url,
        str(payload["type"]),
        str(payload.get("title") or ""),
        details,
        status_code=status_code,
    )


class DawaClient:
    """Minimal async wrapper around the DAWA API.

    Queries render their own URLs; the client only issues GETs and classifies
    failures. It also carries the defaults that streams started through it
    use (buffer size, read chunk size, strict field checking).
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        request_timeout: float = 30.0,
        max_connections: int = 10,
        *,
        buffer_size: int = BUFFER_SIZE,
        chunk_size: int = CHUNK_SIZE,
        strict_fields: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Create a client.

        Parameters
        ----------
        host:
            Base URL used by the ``get_*`` helpers.
        request_timeout:
            Timeout in seconds applied to every request.
        max_connections:
            Maximum number of concurrent HTTP connections.
        buffer_size:
            Default capacity of the hand-off queue of streams.
        chunk_size:
            Bytes read from a response body at a time.
        strict_fields:
            Default for rejecting unknown JSON keys while decoding.
        transport:
            Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self.host = host.rstrip("/")
        self.buffer_size = buffer_size
        self.chunk_size = chunk_size
        self.strict_fields = strict_fields
        self._timeout = httpx.Timeout(request_timeout)
        self._limits = httpx.Limits(
            max_connections=max_connections, max_keepalive_connections=max_connections
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: Optional[Config] = None, **kwargs: Any) -> "DawaClient":
        """Build a client from :func:`~dawa.config.load_config` values."""
        config = config or load_config()
        return cls(
            host=config.host,
            request_timeout=config.request_timeout,
            max_connections=config.max_connections,
            buffer_size=config.buffer_size,
            chunk_size=config.chunk_size,
            strict_fields=config.strict_fields,
            **kwargs,
        )

    async def __aenter__(self) -> "DawaClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Close the HTTP client when leaving the context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _ensure_client(self) -> None:
        """Instantiate the underlying :class:`httpx.AsyncClient` if missing."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout, limits=self._limits, transport=self._transport
            )

    def _require_client(self) -> httpx.AsyncClient:
        """Return the initialized HTTP client or raise ``RuntimeError``."""
        if self._client is None:
            raise RuntimeError("Client not initialized; use 'async with DawaClient()'")
        return self._client

    async def open_stream(self, url: str) -> httpx.Response:
        """GET ``url`` and return the response with its body still unread.

        The caller must close the response. Status 400 and above raises
        :class:`ServiceError` or :class:`RequestError`; transport failures
        propagate as ``httpx.HTTPError``.
        """
        client = self._require_client()
        logger.debug("GET %s", url)
        response = await client.send(client.build_request("GET", url), stream=True)
        if response.status_code < 400:
            return response

        try:
            body = await response.aread()
        except httpx.HTTPError as exc:
            logger.debug("reading error body of %s failed: %s", url, exc)
            body = b""
        finally:
            await response.aclose()
        error = error_from_body(url, response.status_code, body)
        logger.warning("GET %s failed with status %d: %s", url, response.status_code, error)
        raise error

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the whole body.

        An empty body is treated as a failed request.
        """
        start = perf_counter()
        response = await self.open_stream(url)
        try:
            body = await response.aread()
        finally:
            await response.aclose()
        if not body:
            raise RequestError(url)
        logger.debug("GET %s → %d bytes in %.2fs", url, len(body), perf_counter() - start)
        return body
