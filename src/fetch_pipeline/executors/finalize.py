"""
Helpers shared by every executor: body encoding and decoding, response
header merging and the resolve-or-reject rule.
"""
import json
import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..exceptions import HttpStatusRejection
from ..types import Response, ResponseType

logger = logging.getLogger("fetch_pipeline.executors.finalize")

# Headers that must not be concatenated when they occur more than once. The
# first occurrence wins.
NON_CONCATENATED_HEADERS = frozenset({
    "age",
    "authorization",
    "content-length",
    "content-type",
    "etag",
    "expires",
    "from",
    "host",
    "if-modified-since",
    "if-unmodified-since",
    "last-modified",
    "location",
    "max-forwards",
    "proxy-authorization",
    "referer",
    "retry-after",
    "user-agent",
})

# Status codes from this value up reject instead of resolve
REJECTION_STATUS = 400


def finalize(body: Any, status: int, headers: Dict[str, str]) -> Response:
    """
    Build the Response and apply the resolve-or-reject rule.

    Raises:
        HttpStatusRejection: status is 400 or more. The rejection carries
            the Response so callers can inspect it.
    """
    response = Response(body=body, status=status, headers=headers)
    if status >= REJECTION_STATUS:
        logger.debug(f"finalize: rejecting status={status}")
        raise HttpStatusRejection(response)
    return response


def merge_header_pairs(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Lower-case header names and comma-join repeated values."""
    headers: Dict[str, str] = {}
    for raw_key, raw_value in pairs:
        key = raw_key.strip().lower()
        value = raw_value.strip()
        if not key:
            continue

        if key not in headers:
            headers[key] = value
        elif key not in NON_CONCATENATED_HEADERS:
            headers[key] = f"{headers[key]}, {value}"

    return headers


def parse_raw_headers(raw: str) -> Dict[str, str]:
    """Parse a CRLF separated "Name: value" block into merged headers."""
    pairs = []
    for line in raw.splitlines():
        key, separator, value = line.partition(":")
        # Lines without a name/value separator are not headers.
        if not separator:
            continue
        pairs.append((key, value))
    return merge_header_pairs(pairs)


def decode_body(raw: bytes, response_type: ResponseType, encoding: str = "utf8") -> Any:
    """
    Decode a buffered response body.

    BUFFER returns the bytes untouched. TEXT decodes with the given encoding,
    replacing undecodable bytes. JSON parses the text, returns None for an
    empty body, falls back to the text when the body is not valid JSON and to
    the raw bytes when it is not text at all.

    Raises:
        LookupError: the encoding is unknown.
    """
    if response_type == ResponseType.BUFFER:
        return raw

    if response_type == ResponseType.TEXT:
        return raw.decode(encoding, errors="replace")

    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError:
        logger.debug(f"decode_body: response is not {encoding} text, returning bytes")
        return raw

    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.debug("decode_body: response is not valid JSON, returning text")
        return text


def encode_body(body: Any) -> Optional[Union[bytes, str]]:
    """Turn the request body into content a transport can send."""
    if body is None:
        return None
    if isinstance(body, (bytes, str)):
        return body
    if isinstance(body, bytearray):
        return bytes(body)
    return str(body)
