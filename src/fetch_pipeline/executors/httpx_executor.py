"""
Stream-based executor using httpx.
"""
import asyncio
import logging
from typing import Dict, Optional

import httpx

from ..config import is_ssl_verify_disabled_by_env
from ..core.url_builder import resolve_request_url
from ..exceptions import (
    InvalidRequestUrlException,
    RequestAbortedException,
    RequestFailedException,
    RequestTimedOutException,
)
from ..types import Request, Response
from .finalize import decode_body, encode_body, finalize, merge_header_pairs

logger = logging.getLogger("fetch_pipeline.executors.httpx")


def _mask_headers_for_logging(headers: Dict[str, str]) -> Dict[str, str]:
    """Mask authorization headers for safe logging."""
    masked = dict(headers)
    for key in masked:
        if key.lower() in ("authorization", "x-api-key"):
            masked[key] = masked[key][:10] + "***"
    return masked


class HttpxExecutor:
    """
    Sends the request through an httpx.AsyncClient stream and buffers the reply.

    An injected httpx_client is reused across sends and never closed here.
    Without one, a client is created for each send and closed afterwards.
    """

    def __init__(self, httpx_client: Optional[httpx.AsyncClient] = None):
        self._client = httpx_client

    def _create_client(self) -> httpx.AsyncClient:
        # NODE_TLS_REJECT_UNAUTHORIZED=0 or SSL_CERT_VERIFY=0 disables SSL verification
        verify_ssl = not is_ssl_verify_disabled_by_env()
        return httpx.AsyncClient(verify=verify_ssl)

    async def send(self, request: Request) -> Response:
        """Send the request, racing it against request.timeout when it is set."""
        url = resolve_request_url(request)

        if request.timeout <= 0:
            return await self._exchange(request, url)

        try:
            # wait_for cancels the losing exchange, so nothing that arrives
            # after the timer is observed.
            return await asyncio.wait_for(
                self._exchange(request, url), timeout=request.timeout / 1000
            )
        except asyncio.TimeoutError:
            logger.debug(f"send: {request.method.value} {url} exceeded {request.timeout}ms")
            raise RequestTimedOutException(request) from None

    async def _exchange(self, request: Request, url: httpx.URL) -> Response:
        headers = dict(request.headers.items())
        logger.debug(
            f"_exchange: {request.method.value} {url} "
            f"headers={_mask_headers_for_logging(headers)}"
        )

        # The wait_for race owns the timeout, httpx must not time out first.
        timeout = httpx.Timeout(request.timeout / 1000 if request.timeout > 0 else None)

        client = self._client or self._create_client()
        try:
            async with client.stream(
                request.method.value,
                url,
                headers=headers,
                content=encode_body(request.body),
                timeout=timeout,
            ) as response:
                raw = await response.aread()
                status = response.status_code
                response_headers = merge_header_pairs(response.headers.multi_items())
        except httpx.TimeoutException as e:
            raise RequestTimedOutException(request) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequestUrlException(request) from e
        except httpx.RemoteProtocolError as e:
            raise RequestAbortedException(request) from e
        except httpx.HTTPError as e:
            logger.debug(f"_exchange: {request.method.value} {url} failed: {e!r}")
            raise RequestFailedException(request, e) from e
        finally:
            if self._client is None:
                await client.aclose()

        logger.debug(f"_exchange: {request.method.value} {url} -> {status}")
        try:
            body = decode_body(raw, request.response.type, request.response.encoding)
        except LookupError as e:
            raise RequestFailedException(request, e) from e
        return finalize(body, status, response_headers)
