"""
Declarative async HTTP client.

Requests are prepared by a priority-ordered chain of interceptors that mutate
one shared Request, then sent by a pluggable executor (httpx stream based or
event driven).
"""
from .types import (
    Authentication,
    Executor,
    ExecutorFactory,
    HttpMethod,
    Interceptor,
    Request,
    Response,
    ResponseOptions,
    ResponseType,
)
from .maybe import Absent, Maybe, Present
from .exceptions import (
    HttpStatusRejection,
    InvalidRequestUrlException,
    NoExecutorProvidedException,
    RequestAbortedException,
    RequestException,
    RequestFailedException,
    RequestInvalidatedException,
    RequestTimedOutException,
)
from .config import ClientConfig, ResolvedConfig, resolve_config
from .core.pipeline import (
    DEFAULT_PRIORITY,
    EXECUTOR_SELECTION_PRIORITY,
    REQUEST_FINALIZATION_PRIORITY,
    InterceptorPipeline,
)
from .core.url_builder import build_url, resolve_request_url
from .interceptors import (
    assign_default_accept_header,
    build_url_object,
    default_interceptors,
    handle_request_payload,
    normalize_headers,
    remove_conflicting_authorization_header,
    select_default_executor,
)
from .executors import (
    EventExecutor,
    EventRequestHandle,
    HttpxEventHandle,
    HttpxExecutor,
    ReadyState,
    finalize,
    resolve_executor_factory,
)
from .tracing import trace_request, trace_response
from .client import PipelineClient

__all__ = [
    # Types
    "Authentication",
    "Executor",
    "ExecutorFactory",
    "HttpMethod",
    "Interceptor",
    "Request",
    "Response",
    "ResponseOptions",
    "ResponseType",
    # Maybe
    "Absent",
    "Maybe",
    "Present",
    # Exceptions
    "HttpStatusRejection",
    "InvalidRequestUrlException",
    "NoExecutorProvidedException",
    "RequestAbortedException",
    "RequestException",
    "RequestFailedException",
    "RequestInvalidatedException",
    "RequestTimedOutException",
    # Config
    "ClientConfig",
    "ResolvedConfig",
    "resolve_config",
    # Pipeline
    "DEFAULT_PRIORITY",
    "EXECUTOR_SELECTION_PRIORITY",
    "REQUEST_FINALIZATION_PRIORITY",
    "InterceptorPipeline",
    "build_url",
    "resolve_request_url",
    # Interceptors
    "assign_default_accept_header",
    "build_url_object",
    "default_interceptors",
    "handle_request_payload",
    "normalize_headers",
    "remove_conflicting_authorization_header",
    "select_default_executor",
    # Executors
    "EventExecutor",
    "EventRequestHandle",
    "HttpxEventHandle",
    "HttpxExecutor",
    "ReadyState",
    "finalize",
    "resolve_executor_factory",
    # Tracing
    "trace_request",
    "trace_response",
    # Client
    "PipelineClient",
]

__version__ = "0.1.0"
