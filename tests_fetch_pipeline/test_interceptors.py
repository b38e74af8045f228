"""
Tests for interceptors.py
Logic testing: Decision/Branch, Path coverage
"""
import httpx
import pytest

from fetch_pipeline.core.pipeline import (
    EXECUTOR_SELECTION_PRIORITY,
    REQUEST_FINALIZATION_PRIORITY,
)
from fetch_pipeline.exceptions import InvalidRequestUrlException
from fetch_pipeline.interceptors import (
    JSON_CONTENT_TYPE,
    assign_default_accept_header,
    build_url_object,
    default_interceptors,
    handle_request_payload,
    normalize_headers,
    remove_conflicting_authorization_header,
    select_default_executor,
)
from fetch_pipeline.maybe import Present
from fetch_pipeline.types import Authentication, ResponseType


class TestNormalizeHeaders:
    """Tests for normalize_headers interceptor."""

    @pytest.mark.asyncio
    async def test_lower_cases_header_names(self, blank_request):
        blank_request.headers["X-Custom-Header"] = "test"

        await normalize_headers(blank_request)

        assert dict(blank_request.headers) == {"x-custom-header": "test"}
        assert blank_request.headers.raw == [(b"x-custom-header", b"test")]

    # Path: plain dict assigned by a user interceptor
    @pytest.mark.asyncio
    async def test_plain_dict_last_write_wins(self, blank_request):
        blank_request.headers = {"X-Token": "first", "x-token": "second", "X-Count": 3}

        await normalize_headers(blank_request)

        assert isinstance(blank_request.headers, httpx.Headers)
        assert dict(blank_request.headers) == {"x-token": "second", "x-count": "3"}

    @pytest.mark.asyncio
    async def test_idempotent(self, blank_request):
        blank_request.headers = {"Accept": "application/xml", "X-A": "1"}

        await normalize_headers(blank_request)
        once = list(blank_request.headers.raw)
        await normalize_headers(blank_request)

        assert blank_request.headers.raw == once


class TestAssignDefaultAcceptHeader:
    """Tests for assign_default_accept_header interceptor."""

    @pytest.mark.asyncio
    async def test_json_response_type(self, blank_request):
        blank_request.response.type = ResponseType.JSON

        await assign_default_accept_header(blank_request)

        assert blank_request.headers["accept"] == "application/json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response_type", [ResponseType.TEXT, ResponseType.BUFFER])
    async def test_other_response_types(self, blank_request, response_type):
        blank_request.response.type = response_type

        await assign_default_accept_header(blank_request)

        assert blank_request.headers["accept"] == "text/plain, */*"

    @pytest.mark.asyncio
    async def test_keeps_user_defined_header(self, blank_request):
        blank_request.headers["accept"] = "application/xml"

        await assign_default_accept_header(blank_request)

        assert blank_request.headers["accept"] == "application/xml"


class TestRemoveConflictingAuthorizationHeader:
    """Tests for remove_conflicting_authorization_header interceptor."""

    @pytest.mark.asyncio
    async def test_removes_header_when_credentials_set(self, blank_request):
        blank_request.headers["authorization"] = "Bearer 123"
        blank_request.authentication = Authentication("awi", "secret")

        await remove_conflicting_authorization_header(blank_request)

        assert "authorization" not in blank_request.headers

    @pytest.mark.asyncio
    async def test_password_alone_counts_as_credentials(self, blank_request):
        blank_request.headers["authorization"] = "Bearer 123"
        blank_request.authentication = Authentication(password="secret")

        await remove_conflicting_authorization_header(blank_request)

        assert "authorization" not in blank_request.headers

    @pytest.mark.asyncio
    async def test_keeps_header_without_credentials(self, blank_request):
        blank_request.headers["authorization"] = "Bearer 123"

        await remove_conflicting_authorization_header(blank_request)

        assert blank_request.headers["authorization"] == "Bearer 123"


class TestHandleRequestPayload:
    """Tests for handle_request_payload interceptor."""

    # Decision: no body
    @pytest.mark.asyncio
    async def test_removes_content_headers_without_body(self, blank_request):
        blank_request.headers["content-type"] = "application/json"
        blank_request.headers["content-length"] = "13"

        await handle_request_payload(blank_request)

        assert "content-type" not in blank_request.headers
        assert "content-length" not in blank_request.headers

    # Decision: structured body
    @pytest.mark.asyncio
    async def test_serializes_structured_body(self, blank_request):
        blank_request.body = {"ok": True}

        await handle_request_payload(blank_request)

        assert blank_request.headers["content-type"] == JSON_CONTENT_TYPE
        assert blank_request.body == '{"ok":true}'
        assert blank_request.headers["content-length"] == "11"

    @pytest.mark.asyncio
    async def test_serializes_list_body(self, blank_request):
        blank_request.body = [1, 2]

        await handle_request_payload(blank_request)

        assert blank_request.body == "[1,2]"

    # Decision: scalar body
    @pytest.mark.asyncio
    async def test_string_body_kept_with_byte_length(self, blank_request):
        blank_request.body = "héllo"
        blank_request.headers["content-type"] = "text/plain"

        await handle_request_payload(blank_request)

        assert blank_request.body == "héllo"
        assert blank_request.headers["content-type"] == "text/plain"
        assert blank_request.headers["content-length"] == "6"

    @pytest.mark.asyncio
    async def test_bytes_body_length(self, blank_request):
        blank_request.body = b"\x00\x01\x02"

        await handle_request_payload(blank_request)

        assert blank_request.headers["content-length"] == "3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body,expected", [(True, "true"), (42, "42"), (1.5, "1.5")])
    async def test_scalar_body_serialized_as_json(self, blank_request, body, expected):
        blank_request.body = body

        await handle_request_payload(blank_request)

        assert blank_request.body == expected
        assert blank_request.headers["content-type"] == JSON_CONTENT_TYPE

    # Error Path: body with no wire representation
    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{1, 2}, object()])
    async def test_unsupported_body_rejected(self, blank_request, body):
        blank_request.body = body

        with pytest.raises(TypeError, match="Unsupported request body type"):
            await handle_request_payload(blank_request)


class TestBuildUrlObject:
    """Tests for build_url_object interceptor."""

    @pytest.mark.asyncio
    async def test_builds_url(self, blank_request):
        blank_request.base = "http://server.api"
        blank_request.path = "todos"

        await build_url_object(blank_request)

        assert str(blank_request.url.unwrap()) == "http://server.api/todos"

    @pytest.mark.asyncio
    async def test_accepts_url_set_earlier(self, blank_request):
        blank_request.base = "http://other.api"
        blank_request.url = Present(httpx.URL("http://server.api/"))

        await build_url_object(blank_request)

        assert str(blank_request.url.unwrap()) == "http://server.api/"

    @pytest.mark.asyncio
    async def test_assigns_query_parameters(self, blank_request):
        blank_request.base = "http://server.api"
        blank_request.query = {"awi": "awesome", "key": "123"}

        await build_url_object(blank_request)

        assert str(blank_request.url.unwrap()).endswith("?awi=awesome&key=123")

    @pytest.mark.asyncio
    async def test_invalid_url_raises(self, blank_request):
        blank_request.base = "invalid-url"

        with pytest.raises(InvalidRequestUrlException) as exc_info:
            await build_url_object(blank_request)

        assert exc_info.value.request.base == "invalid-url"


class TestSelectDefaultExecutor:
    """Tests for select_default_executor interceptor factory."""

    @pytest.mark.asyncio
    async def test_assigns_factory_result_when_absent(self, blank_request, echo_executor):
        interceptor = select_default_executor(lambda: echo_executor)

        await interceptor(blank_request)

        assert blank_request.executor.unwrap() is echo_executor

    @pytest.mark.asyncio
    async def test_keeps_assigned_executor(self, blank_request, echo_executor):
        calls = []

        def factory():
            calls.append(1)
            return object()

        blank_request.executor = Present(echo_executor)

        await select_default_executor(factory)(blank_request)

        assert blank_request.executor.unwrap() is echo_executor
        assert calls == []


class TestDefaultInterceptors:
    """Tests for default_interceptors function."""

    def test_priorities_and_order(self, echo_executor):
        entries = default_interceptors(lambda: echo_executor)

        assert entries[0].priority == EXECUTOR_SELECTION_PRIORITY
        assert [e.interceptor for e in entries[1:]] == [
            build_url_object,
            normalize_headers,
            assign_default_accept_header,
            remove_conflicting_authorization_header,
            handle_request_payload,
        ]
        assert all(e.priority == REQUEST_FINALIZATION_PRIORITY for e in entries[1:])
