"""
Built-in interceptors.

Conceptual order: default executor selection, URL construction, header name
normalization, default accept header, conflicting authorization removal and
payload handling. The order is enforced through priorities, see
default_interceptors().
"""
import json
import logging
from typing import List

import httpx

from .core.pipeline import (
    EXECUTOR_SELECTION_PRIORITY,
    REQUEST_FINALIZATION_PRIORITY,
    InterceptorEntry,
)
from .core.url_builder import build_url
from .exceptions import InvalidRequestUrlException
from .maybe import Present
from .types import ExecutorFactory, Interceptor, Request, ResponseType

logger = logging.getLogger("fetch_pipeline.interceptors")

JSON_CONTENT_TYPE = "application/json;charset=utf-8"
JSON_ACCEPT = "application/json"
FALLBACK_ACCEPT = "text/plain, */*"

# Bodies serialized to JSON text. Text and bytes are sent as is, anything
# else is rejected.
STRUCTURED_BODY_TYPES = (dict, list, tuple)
JSON_SCALAR_BODY_TYPES = (bool, int, float)
RAW_BODY_TYPES = (str, bytes, bytearray)


def select_default_executor(factory: ExecutorFactory) -> Interceptor:
    """
    Build the interceptor that assigns factory() when no executor is set.

    The factory is chosen once at configuration time (see
    executors.resolve_executor_factory), so the interceptor itself never
    inspects the environment.
    """

    async def determine_default_executor(request: Request) -> None:
        if request.executor.is_present:
            return

        executor = factory()
        logger.debug(f"determine_default_executor: assigned {type(executor).__name__}")
        request.executor = Present(executor)

    return determine_default_executor


async def build_url_object(request: Request) -> None:
    """Build and cache the request URL. A URL set by an earlier interceptor is kept."""
    if request.url.is_present:
        return

    url = build_url(request.base, request.path, request.query, request.authentication)
    request.url = Present(url.expect(InvalidRequestUrlException(request)))
    logger.debug(f"build_url_object: {request.url.unwrap()}")


async def normalize_headers(request: Request) -> None:
    """Lower-case all header names. On collision the last write wins."""
    normalized = httpx.Headers()
    for key, value in request.headers.items():
        normalized[key.lower()] = value if isinstance(value, (str, bytes)) else str(value)
    request.headers = normalized


async def assign_default_accept_header(request: Request) -> None:
    """Assign an accept header matching the response type unless one is set."""
    if "accept" in request.headers:
        return

    if request.response.type == ResponseType.JSON:
        request.headers["accept"] = JSON_ACCEPT
    else:
        request.headers["accept"] = FALLBACK_ACCEPT


async def remove_conflicting_authorization_header(request: Request) -> None:
    """Drop the authorization header when basic auth credentials are given."""
    if not request.authentication.is_set:
        return

    if "authorization" in request.headers:
        logger.debug("remove_conflicting_authorization_header: authentication set, dropping header")
        del request.headers["authorization"]


async def handle_request_payload(request: Request) -> None:
    """
    Serialize structured bodies and keep the content headers consistent.

    Raises:
        TypeError: the body is neither text, bytes nor JSON serializable.
    """
    if request.body is None:
        for name in ("content-type", "content-length"):
            if name in request.headers:
                del request.headers[name]
        return

    if not isinstance(request.body, RAW_BODY_TYPES + STRUCTURED_BODY_TYPES + JSON_SCALAR_BODY_TYPES):
        raise TypeError(f"Unsupported request body type: {type(request.body).__name__}")

    if isinstance(request.body, STRUCTURED_BODY_TYPES + JSON_SCALAR_BODY_TYPES):
        request.headers["content-type"] = JSON_CONTENT_TYPE
        request.body = json.dumps(request.body, separators=(",", ":"))

    if isinstance(request.body, str):
        request.headers["content-length"] = str(len(request.body.encode("utf-8")))
    elif isinstance(request.body, (bytes, bytearray)):
        request.headers["content-length"] = str(len(request.body))


def default_interceptors(factory: ExecutorFactory) -> List[InterceptorEntry]:
    """Built-in interceptors at their fixed priorities."""
    return [
        InterceptorEntry(select_default_executor(factory), EXECUTOR_SELECTION_PRIORITY),
        InterceptorEntry(build_url_object, REQUEST_FINALIZATION_PRIORITY),
        InterceptorEntry(normalize_headers, REQUEST_FINALIZATION_PRIORITY),
        InterceptorEntry(assign_default_accept_header, REQUEST_FINALIZATION_PRIORITY),
        InterceptorEntry(remove_conflicting_authorization_header, REQUEST_FINALIZATION_PRIORITY),
        InterceptorEntry(handle_request_payload, REQUEST_FINALIZATION_PRIORITY),
    ]
