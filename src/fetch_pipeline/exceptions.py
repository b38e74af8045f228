"""
Failure types surfaced by the pipeline and its executors.

Every RequestException carries the request that caused it. An HTTP status of
400 or more is not a RequestException: it raises HttpStatusRejection, which
carries the Response instead.
"""
from typing import Any, Mapping, Optional

from .types import Request, Response


def describe_request(request: Request) -> str:
    """Short form of a request for exception messages."""
    method = getattr(request.method, "value", request.method)
    return f"{method} {request.base} {request.path}"


class RequestException(Exception):
    """Base class of the request failure taxonomy."""

    def __init__(self, request: Request, message: str):
        super().__init__(message)
        self.request = request


class InvalidRequestUrlException(RequestException):
    """The base and path cannot be parsed into an absolute URL."""

    def __init__(self, request: Request):
        super().__init__(request, f"The request [{describe_request(request)}] has an invalid URL.")


class RequestAbortedException(RequestException):
    """The transport aborted the request mid-flight."""

    def __init__(self, request: Request):
        super().__init__(request, f"The request [{describe_request(request)}] has been aborted.")


class RequestFailedException(RequestException):
    """Network-level failure."""

    def __init__(self, request: Request, cause: Optional[BaseException] = None):
        super().__init__(request, f"The request [{describe_request(request)}] has failed.")
        self.cause = cause


class RequestTimedOutException(RequestException):
    """The configured timeout elapsed before the request completed."""

    def __init__(self, request: Request):
        super().__init__(
            request,
            f"The request [{describe_request(request)}] exceeded the [{request.timeout}ms] timeout.",
        )


class RequestInvalidatedException(RequestException):
    """A single-use transport handle was used for a second send."""

    def __init__(self, request: Request):
        super().__init__(request, f"The request [{describe_request(request)}] has been invalidated.")


class NoExecutorProvidedException(RequestException):
    """The interceptor chain finished without assigning an executor."""

    def __init__(self, request: Request):
        super().__init__(
            request,
            f"The request [{describe_request(request)}] has no executor to send it.",
        )


class HttpStatusRejection(Exception):
    """The executor completed but the response status is 400 or more."""

    def __init__(self, response: Response):
        super().__init__(f"The request was rejected with status [{response.status}].")
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def body(self) -> Any:
        return self.response.body

    @property
    def headers(self) -> Mapping[str, str]:
        return self.response.headers
