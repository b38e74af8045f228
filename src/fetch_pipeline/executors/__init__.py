"""
Executors for fetch_pipeline.
"""
import logging
from typing import Optional

import httpx

from ..config import ExecutorKind
from ..types import ExecutorFactory
from .event_executor import EventExecutor, EventRequestHandle, ReadyState
from .finalize import (
    NON_CONCATENATED_HEADERS,
    decode_body,
    encode_body,
    finalize,
    merge_header_pairs,
    parse_raw_headers,
)
from .httpx_event_handle import HttpxEventHandle
from .httpx_executor import HttpxExecutor

logger = logging.getLogger("fetch_pipeline.executors")


def resolve_executor_factory(
    kind: ExecutorKind,
    httpx_client: Optional[httpx.AsyncClient] = None,
) -> ExecutorFactory:
    """
    Resolve the factory used by the default executor interceptor.

    "stream" yields HttpxExecutor, "event" yields EventExecutor over an
    HttpxEventHandle. A given httpx_client is shared by every executor the
    factory creates.
    """
    logger.debug(f"resolve_executor_factory: kind={kind}, shared_client={httpx_client is not None}")

    if kind == "stream":
        return lambda: HttpxExecutor(httpx_client)
    if kind == "event":
        return lambda: EventExecutor(lambda: HttpxEventHandle(httpx_client))
    raise ValueError(f"Invalid executor: {kind}. Must be one of: ['event', 'stream']")


__all__ = [
    "EventExecutor",
    "EventRequestHandle",
    "HttpxEventHandle",
    "HttpxExecutor",
    "NON_CONCATENATED_HEADERS",
    "ReadyState",
    "decode_body",
    "encode_body",
    "finalize",
    "merge_header_pairs",
    "parse_raw_headers",
    "resolve_executor_factory",
]
