"""
Shared fixtures for fetch_pipeline tests.
"""
import pytest

from fetch_pipeline.client import PipelineClient
from fetch_pipeline.config import ClientConfig
from fetch_pipeline.exceptions import HttpStatusRejection, RequestFailedException
from fetch_pipeline.maybe import Present
from fetch_pipeline.types import Request, Response


class EchoExecutor:
    """Executor answering with the request it received as the body."""

    def __init__(self):
        self.calls = 0

    async def send(self, request: Request) -> Response:
        self.calls += 1
        if request.path == "error":
            raise RequestFailedException(request, ConnectionError("boom"))
        if request.path == "invalid":
            raise HttpStatusRejection(Response(body=request, status=400, headers={}))
        return Response(body=request, status=200, headers={})


@pytest.fixture
def blank_request():
    """Request with every field at its default."""
    return Request()


@pytest.fixture
def echo_executor():
    return EchoExecutor()


@pytest.fixture
def echo_client(echo_executor):
    """Client wired to the echo executor through a user interceptor."""

    async def use_echo(request):
        request.executor = Present(echo_executor)

    return PipelineClient(
        ClientConfig(base_url="http://localhost", executor="stream", trace=False)
    ).use(use_echo)
