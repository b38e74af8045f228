"""
Event-driven executor.

Drives a callback-style request handle (open, set headers, send, then wait for
a ready-state change, abort, error or timeout callback) and turns the first
terminal event into the result of send().
"""
import asyncio
import logging
from enum import IntEnum
from typing import Any, Callable, Optional, Protocol, Union

from ..core.url_builder import resolve_request_url
from ..exceptions import (
    HttpStatusRejection,
    RequestAbortedException,
    RequestFailedException,
    RequestInvalidatedException,
    RequestTimedOutException,
)
from ..types import Request, Response, ResponseType
from .finalize import encode_body, finalize, parse_raw_headers

logger = logging.getLogger("fetch_pipeline.executors.event")

Callback = Optional[Callable[[], None]]


class ReadyState(IntEnum):
    """Lifecycle of an event request handle."""
    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class EventRequestHandle(Protocol):
    """
    Callback-style native request object.

    A handle performs exactly one request. ``response`` holds the body decoded
    according to ``response_type`` once ``ready_state`` is DONE.
    """

    ready_state: ReadyState
    status: int
    response: Any
    error: Optional[BaseException]
    """Underlying failure reported with on_error, when known."""
    timeout: int
    response_type: ResponseType
    response_encoding: str
    on_ready_state_change: Callback
    on_abort: Callback
    on_error: Callback
    on_timeout: Callback

    def open(self, method: str, url: str) -> None:
        ...

    def set_request_header(self, name: str, value: str) -> None:
        ...

    def send(self, body: Optional[Union[bytes, str]] = None) -> None:
        ...

    def abort(self) -> None:
        ...

    def get_all_response_headers(self) -> str:
        ...


HandleFactory = Callable[[], EventRequestHandle]


def _default_handle_factory() -> EventRequestHandle:
    from .httpx_event_handle import HttpxEventHandle

    return HttpxEventHandle()


class EventExecutor:
    """
    Executor over a single-use EventRequestHandle.

    The handle is created with the executor. A second send() on the same
    executor raises RequestInvalidatedException before any I/O.
    """

    def __init__(self, handle_factory: Optional[HandleFactory] = None):
        self._handle = (handle_factory or _default_handle_factory)()

    @property
    def handle(self) -> EventRequestHandle:
        return self._handle

    async def send(self, request: Request) -> Response:
        handle = self._handle
        if handle.ready_state != ReadyState.UNSENT:
            raise RequestInvalidatedException(request)

        url = resolve_request_url(request)
        loop = asyncio.get_running_loop()
        outcome: "asyncio.Future[Response]" = loop.create_future()

        def settle(error: BaseException) -> None:
            # Only the first terminal event counts.
            if outcome.done():
                return
            outcome.set_exception(error)

        def on_ready_state_change() -> None:
            if outcome.done() or handle.ready_state != ReadyState.DONE:
                return
            try:
                outcome.set_result(finalize(
                    handle.response,
                    handle.status,
                    parse_raw_headers(handle.get_all_response_headers()),
                ))
            except HttpStatusRejection as rejection:
                outcome.set_exception(rejection)

        handle.open(request.method.value, str(url))
        # 0, the default, is no timeout.
        handle.timeout = request.timeout
        handle.response_type = request.response.type
        handle.response_encoding = request.response.encoding
        for name, value in request.headers.items():
            handle.set_request_header(name, value)

        handle.on_ready_state_change = on_ready_state_change
        handle.on_abort = lambda: settle(RequestAbortedException(request))
        handle.on_error = lambda: settle(RequestFailedException(request, handle.error))
        handle.on_timeout = lambda: settle(RequestTimedOutException(request))

        logger.debug(f"send: {request.method.value} {url} via {type(handle).__name__}")
        handle.send(encode_body(request.body))

        try:
            return await outcome
        except asyncio.CancelledError:
            handle.abort()
            raise
