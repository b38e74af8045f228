"""
URL construction for fetch_pipeline.

Merges base, path, query parameters and basic auth credentials into one
absolute httpx.URL.
"""
import logging
from typing import Any, Mapping, Optional

import httpx

from ..exceptions import InvalidRequestUrlException
from ..maybe import Absent, Maybe, Present
from ..types import Authentication, Request

logger = logging.getLogger("fetch_pipeline.url_builder")


def join_base_and_path(base: Any, path: Any) -> str:
    """Join base and path with exactly one slash between them."""
    # Scalars such as 0 are valid paths.
    base = "" if base is None else str(base)
    path = "" if path is None else str(path)

    base = base.strip("/")
    path = path.lstrip("/")

    if not base:
        return path
    if not path:
        return base
    return f"{base}/{path}"


def build_url(
    base: Any,
    path: Any,
    query: Optional[Mapping[str, Any]] = None,
    authentication: Optional[Authentication] = None,
) -> Maybe[httpx.URL]:
    """
    Build the absolute request URL.

    Explicit credentials override credentials embedded in the URL string,
    each field independently. Query parameters are applied in insertion
    order and percent-encoded.

    Returns:
        Present(url), or Absent() when the result is not an absolute URL.
    """
    raw = join_base_and_path(base, path)

    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as e:
        logger.debug(f"build_url: cannot parse {raw!r}: {e}")
        return Absent()

    if not url.is_absolute_url:
        logger.debug(f"build_url: {raw!r} is not an absolute URL")
        return Absent()

    try:
        if authentication is not None and authentication.is_set:
            # httpx rewrites the whole userinfo, so carry over the embedded half.
            username = authentication.username
            password = authentication.password
            url = url.copy_with(
                username=url.username if username is None else username,
                password=url.password if password is None else password,
            )
        for key, value in (query or {}).items():
            url = url.copy_set_param(str(key), str(value))
    except httpx.InvalidURL as e:
        logger.debug(f"build_url: cannot apply credentials/query to {raw!r}: {e}")
        return Absent()

    return Present(url)


def resolve_request_url(request: Request) -> httpx.URL:
    """
    Return the cached request URL, building it when it is not set yet.

    Raises:
        InvalidRequestUrlException: base and path do not form an absolute URL.
    """
    if not request.url.is_present:
        request.url = build_url(
            request.base, request.path, request.query, request.authentication
        )
    return request.url.expect(InvalidRequestUrlException(request))
