"""
EventRequestHandle implementation backed by httpx.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from ..config import is_ssl_verify_disabled_by_env
from ..types import ResponseType
from .event_executor import Callback, ReadyState
from .finalize import decode_body

logger = logging.getLogger("fetch_pipeline.executors.httpx_event_handle")


class HttpxEventHandle:
    """
    Runs one httpx exchange as an asyncio task and reports the outcome
    through callbacks.

    send() must be called from a running event loop. Callbacks fire on the
    loop, never from inside send() itself.
    """

    def __init__(self, httpx_client: Optional[httpx.AsyncClient] = None):
        self._client = httpx_client
        self._method = "GET"
        self._url = ""
        self._request_headers: Dict[str, str] = {}
        self._response_headers: List[Tuple[str, str]] = []
        self._task: Optional["asyncio.Task[None]"] = None

        self.ready_state = ReadyState.UNSENT
        self.status = 0
        self.response: Any = None
        self.error: Optional[BaseException] = None
        self.timeout = 0
        self.response_type = ResponseType.JSON
        self.response_encoding = "utf8"

        self.on_ready_state_change: Callback = None
        self.on_abort: Callback = None
        self.on_error: Callback = None
        self.on_timeout: Callback = None

    def open(self, method: str, url: str) -> None:
        if self.ready_state != ReadyState.UNSENT:
            raise RuntimeError("Handle has already been opened")
        self._method = method
        self._url = url
        self._change_state(ReadyState.OPENED)

    def set_request_header(self, name: str, value: str) -> None:
        if self.ready_state != ReadyState.OPENED:
            raise RuntimeError("Headers can only be set on an opened handle")
        self._request_headers[name] = value

    def send(self, body: Optional[Union[bytes, str]] = None) -> None:
        if self.ready_state != ReadyState.OPENED or self._task is not None:
            raise RuntimeError("Handle is not opened or has already been sent")
        self._task = asyncio.get_running_loop().create_task(self._run(body))

    def abort(self) -> None:
        if self.ready_state == ReadyState.DONE:
            return
        if self._task is not None:
            self._task.cancel()
        self.ready_state = ReadyState.DONE
        self._fire(self.on_abort)

    def get_all_response_headers(self) -> str:
        return "".join(f"{key}: {value}\r\n" for key, value in self._response_headers)

    def _change_state(self, state: ReadyState) -> None:
        self.ready_state = state
        self._fire(self.on_ready_state_change)

    def _fire(self, callback: Callback) -> None:
        if callback is not None:
            callback()

    async def _run(self, body: Optional[Union[bytes, str]]) -> None:
        try:
            if self.timeout > 0:
                await asyncio.wait_for(self._exchange(body), timeout=self.timeout / 1000)
            else:
                await self._exchange(body)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.debug(f"_run: {self._method} {self._url} timed out after {self.timeout}ms")
            self.ready_state = ReadyState.DONE
            self._fire(self.on_timeout)
        except Exception as e:
            # Network errors, invalid URLs and undecodable bodies all end the
            # exchange the same way.
            logger.debug(f"_run: {self._method} {self._url} failed: {e!r}")
            self.error = e
            self.ready_state = ReadyState.DONE
            self._fire(self.on_error)
        else:
            self._change_state(ReadyState.DONE)

    async def _exchange(self, body: Optional[Union[bytes, str]]) -> None:
        client = self._client or httpx.AsyncClient(verify=not is_ssl_verify_disabled_by_env())
        try:
            async with client.stream(
                self._method,
                self._url,
                headers=self._request_headers,
                content=body,
                timeout=httpx.Timeout(None),
            ) as response:
                self.status = response.status_code
                self._response_headers = list(response.headers.multi_items())
                self._change_state(ReadyState.HEADERS_RECEIVED)

                self._change_state(ReadyState.LOADING)
                raw = await response.aread()
        finally:
            if self._client is None:
                await client.aclose()

        self.response = decode_body(raw, self.response_type, self.response_encoding)
