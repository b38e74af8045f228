"""
Public client: register interceptors with use(), then run them with a
terminal call (send, the verb shorthands, body or optional).
"""
import logging
from typing import Any, List, Optional

import httpx

from .config import ClientConfig, ResolvedConfig, resolve_config
from .core.pipeline import DEFAULT_PRIORITY, InterceptorEntry, InterceptorPipeline
from .exceptions import HttpStatusRejection
from .executors import resolve_executor_factory
from .interceptors import default_interceptors
from .maybe import Absent, Maybe, Present
from .tracing import trace_request, trace_response
from .types import (
    Authentication,
    ExecutorFactory,
    HttpMethod,
    Interceptor,
    Request,
    Response,
    ResponseOptions,
)

logger = logging.getLogger("fetch_pipeline.client")

# Tracing runs after every built-in so it prints the final request.
TRACE_PRIORITY = -2000


class PipelineClient:
    """
    Declarative HTTP client.

    use() only records interceptors. Each terminal call creates a fresh
    Request from the resolved config, runs the interceptors against it in
    priority order and hands it to the executor they assigned.

    Example:
        client = PipelineClient(ClientConfig(base_url="https://api.example.com"))
        todo = await client.use(authorize, 10).body("todos/1")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        executor_factory: Optional[ExecutorFactory] = None,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = resolve_config(config)
        self._httpx_client = httpx_client
        self._executor_factory = executor_factory or resolve_executor_factory(
            self._config.executor, httpx_client
        )
        self._pipeline = InterceptorPipeline(default_interceptors(self._executor_factory))
        if self._config.trace:
            self._pipeline.add(trace_request, TRACE_PRIORITY)

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    @property
    def interceptors(self) -> List[InterceptorEntry]:
        """Registered interceptors in insertion order."""
        return self._pipeline.entries

    def new_request(self) -> Request:
        """Create a Request seeded with the configured defaults."""
        config = self._config
        return Request(
            base=config.base_url,
            headers=httpx.Headers(config.headers),
            timeout=config.timeout_ms,
            authentication=Authentication(
                username=config.authentication.username,
                password=config.authentication.password,
            ),
            response=ResponseOptions(
                type=config.response_type,
                encoding=config.response_encoding,
            ),
        )

    def use(self, interceptor: Interceptor, priority: int = DEFAULT_PRIORITY) -> "PipelineClient":
        """
        Register an interceptor. It receives the Request and mutates it; its
        return value is disregarded. Higher priorities run first.

        request.url is built at REQUEST_FINALIZATION_PRIORITY (-1000); register
        below it to read the built URL.
        """
        self._pipeline.add(interceptor, priority)
        return self

    def discard(self) -> "PipelineClient":
        """
        Remove every registered interceptor, built-ins included.

        Callers must register an executor (and any built-ins they still want)
        before the next terminal call.
        """
        self._pipeline.clear()
        return self

    async def send(self) -> Response:
        """
        Run the interceptors and send the request.

        Raises:
            HttpStatusRejection: the response status is 400 or more.
            RequestException: any transport or configuration failure.
        """
        return await self._send([])

    async def _send(self, transient: List[InterceptorEntry]) -> Response:
        request = self.new_request()
        try:
            response = await self._pipeline.run(request, transient)
        except HttpStatusRejection as rejection:
            if self._config.trace:
                trace_response(rejection.response, request.url.map(str).unwrap_or(""))
            raise

        if self._config.trace:
            trace_response(response, request.url.map(str).unwrap_or(""))
        return response

    async def _request(
        self,
        method: HttpMethod,
        path: Optional[Any] = None,
        body: Optional[Any] = None,
    ) -> Response:
        async def assign(request: Request) -> None:
            request.method = method
            if path is not None:
                request.path = path
            if body is not None:
                request.body = body

        assign.__qualname__ = f"assign_{method.value.lower()}"
        return await self._send([InterceptorEntry(assign, DEFAULT_PRIORITY)])

    async def get(self, path: Optional[Any] = None) -> Response:
        """GET request."""
        return await self._request(HttpMethod.GET, path)

    async def delete(self, path: Optional[Any] = None) -> Response:
        """DELETE request."""
        return await self._request(HttpMethod.DELETE, path)

    async def head(self, path: Optional[Any] = None) -> Response:
        """HEAD request."""
        return await self._request(HttpMethod.HEAD, path)

    async def options(self, path: Optional[Any] = None) -> Response:
        """OPTIONS request."""
        return await self._request(HttpMethod.OPTIONS, path)

    async def post(self, path: Optional[Any] = None, body: Optional[Any] = None) -> Response:
        """POST request."""
        return await self._request(HttpMethod.POST, path, body)

    async def put(self, path: Optional[Any] = None, body: Optional[Any] = None) -> Response:
        """PUT request."""
        return await self._request(HttpMethod.PUT, path, body)

    async def patch(self, path: Optional[Any] = None, body: Optional[Any] = None) -> Response:
        """PATCH request."""
        return await self._request(HttpMethod.PATCH, path, body)

    async def body(self, path: Optional[Any] = None) -> Any:
        """GET request returning only the response body."""
        response = await self.get(path)
        return response.body

    async def optional(self, path: Optional[Any] = None) -> Maybe[Any]:
        """
        GET request returning Present(body), or Absent() when the server
        answers with a status of 400 or more. Transport failures still raise.
        """
        try:
            response = await self.get(path)
        except HttpStatusRejection as rejection:
            logger.debug(f"optional: status {rejection.status} mapped to Absent")
            return Absent()
        return Present(response.body)

    async def close(self) -> None:
        """Close the shared httpx client, if one was given."""
        if self._httpx_client is not None:
            await self._httpx_client.aclose()

    async def __aenter__(self) -> "PipelineClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()
