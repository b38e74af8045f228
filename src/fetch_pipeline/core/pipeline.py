"""
Priority-ordered interceptor pipeline.

Interceptors run strictly one after another against a single Request, higher
priority first and in insertion order on ties. The executor assigned by the
chain then sends the request.
"""
import inspect
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..exceptions import NoExecutorProvidedException
from ..types import Interceptor, Request, Response

logger = logging.getLogger("fetch_pipeline.pipeline")

# Priority used by use() when the caller does not pass one
DEFAULT_PRIORITY = 0

# Default executor selection runs before user interceptors and only fills an
# absent executor.
EXECUTOR_SELECTION_PRIORITY = 1000

# URL, header and payload built-ins run after user interceptors so they see
# the final base/path/query/headers/body.
REQUEST_FINALIZATION_PRIORITY = -1000


@dataclass(frozen=True)
class InterceptorEntry:
    """An interceptor registered with its priority."""

    interceptor: Interceptor
    priority: int = DEFAULT_PRIORITY


def _interceptor_name(interceptor: Interceptor) -> str:
    return getattr(interceptor, "__qualname__", None) or repr(interceptor)


def order_entries(entries: Iterable[InterceptorEntry]) -> List[InterceptorEntry]:
    """Sort by descending priority. sorted() is stable, so ties keep insertion order."""
    return sorted(entries, key=lambda entry: -entry.priority)


class InterceptorPipeline:
    """Ordered collection of interceptors plus the final executor dispatch."""

    def __init__(self, entries: Optional[Iterable[InterceptorEntry]] = None):
        self._entries: List[InterceptorEntry] = list(entries or [])

    @property
    def entries(self) -> List[InterceptorEntry]:
        """Registered entries in insertion order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, interceptor: Interceptor, priority: int = DEFAULT_PRIORITY) -> None:
        """Register an interceptor. Nothing runs until run()."""
        self._entries.append(InterceptorEntry(interceptor, priority))

    def clear(self) -> None:
        """Remove every registered interceptor, built-ins included."""
        self._entries.clear()

    async def intercept(
        self,
        request: Request,
        transient: Iterable[InterceptorEntry] = (),
    ) -> Request:
        """
        Run the interceptors against the request.

        Transient entries take part in this run only; they are ordered as if
        appended after the registered ones.

        Any interceptor failure aborts the chain and propagates unchanged.
        """
        ordered = order_entries([*self._entries, *transient])
        logger.debug(
            "intercept: order="
            + str([f"{_interceptor_name(e.interceptor)}@{e.priority}" for e in ordered])
        )

        for entry in ordered:
            result = entry.interceptor(request)
            if inspect.isawaitable(result):
                await result

        return request

    async def run(
        self,
        request: Request,
        transient: Iterable[InterceptorEntry] = (),
    ) -> Response:
        """
        Run the interceptors, then send the request with its executor.

        Raises:
            NoExecutorProvidedException: no interceptor assigned an executor.
        """
        await self.intercept(request, transient)

        executor = request.executor.expect(NoExecutorProvidedException(request))
        logger.debug(
            f"run: dispatching {request.method.value} to {type(executor).__name__}"
        )
        return await executor.send(request)
