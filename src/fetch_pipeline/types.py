"""
Type definitions for fetch_pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Union,
)

import httpx

from .maybe import Absent, Maybe


class HttpMethod(str, Enum):
    """HTTP request method"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ResponseType(str, Enum):
    """Desired decoding of the response body"""
    JSON = "json"
    TEXT = "text"
    BUFFER = "buffer"


@dataclass
class Authentication:
    """Basic auth credentials overlaid on the request URL."""

    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def is_set(self) -> bool:
        return self.username is not None or self.password is not None


@dataclass
class ResponseOptions:
    """How the executor should decode the reply."""

    type: ResponseType = ResponseType.JSON
    encoding: str = "utf8"


@dataclass
class Request:
    """
    Mutable state of one logical call.

    Created with defaults right before a terminal call, mutated in place by
    the interceptor pipeline and handed to exactly one executor.
    """

    base: str = ""
    path: str = ""
    method: HttpMethod = HttpMethod.GET
    body: Any = None
    query: Dict[str, str] = field(default_factory=dict)
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    timeout: int = 0
    """Timeout in milliseconds. 0 means no timeout."""
    authentication: Authentication = field(default_factory=Authentication)
    response: ResponseOptions = field(default_factory=ResponseOptions)
    url: Maybe[httpx.URL] = field(default_factory=Absent)
    executor: Maybe["Executor"] = field(default_factory=Absent)


@dataclass(frozen=True)
class Response:
    """Immutable result of one send."""

    body: Any
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)


class Executor(Protocol):
    """Transport strategy turning a prepared Request into a Response."""

    async def send(self, request: Request) -> Response:
        """
        Send the request.

        Raises HttpStatusRejection for status >= 400 and one of the
        RequestException subclasses for transport-level failures.
        """
        ...


# An interceptor receives the shared request and mutates it. The return value
# is ignored; an awaitable return value is awaited first.
Interceptor = Callable[[Request], Union[Awaitable[Any], Any]]

ExecutorFactory = Callable[[], Executor]
