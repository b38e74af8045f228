"""
Configuration for fetch_pipeline.
"""
from dataclasses import dataclass, field
import logging
import os
from typing import Dict, Literal, Optional, Union

from .types import Authentication, ResponseType

logger = logging.getLogger("fetch_pipeline.config")

# Executor kinds selectable by the default executor interceptor
ExecutorKind = Literal["stream", "event"]

EXECUTOR_ENV_VAR = "FETCH_PIPELINE_EXECUTOR"
TRACE_ENV_VAR = "FETCH_PIPELINE_TRACE"

DEFAULT_EXECUTOR: ExecutorKind = "stream"
DEFAULT_RESPONSE_ENCODING = "utf8"

_TRUTHY = ("1", "true", "yes", "on")


def _mask_sensitive(value: Optional[str], visible_chars: int = 10) -> str:
    """Mask sensitive value for safe logging."""
    if value is None:
        return "<None>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


@dataclass
class ClientConfig:
    """Client configuration.

    Every field seeds the Request created for each terminal call; interceptors
    can still override any of them.

    Properties:
    - base_url: URL prefix joined with the request path
    - timeout_ms: request timeout in milliseconds, 0 disables it
    - executor: "stream" (httpx) or "event" (callback-driven handle);
      None falls back to FETCH_PIPELINE_EXECUTOR, then "stream"
    - trace: pretty-print requests and responses; None falls back to
      FETCH_PIPELINE_TRACE
    """

    base_url: str = ""
    timeout_ms: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    response_type: Union[ResponseType, str] = ResponseType.JSON
    response_encoding: str = DEFAULT_RESPONSE_ENCODING
    username: Optional[str] = None
    password: Optional[str] = None
    executor: Optional[ExecutorKind] = None
    trace: Optional[bool] = None

    def __repr__(self) -> str:
        """Safe repr that masks sensitive values."""
        return (
            f"ClientConfig(base_url={self.base_url!r}, "
            f"timeout_ms={self.timeout_ms!r}, "
            f"headers={list(self.headers)!r}, "
            f"response_type={self.response_type!r}, "
            f"response_encoding={self.response_encoding!r}, "
            f"username={self.username!r}, "
            f"password={_mask_sensitive(self.password)!r}, "
            f"executor={self.executor!r}, "
            f"trace={self.trace!r})"
        )


@dataclass
class ResolvedConfig:
    """Resolved client configuration with defaults applied."""

    base_url: str
    timeout_ms: int
    headers: Dict[str, str]
    response_type: ResponseType
    response_encoding: str
    authentication: Authentication
    executor: ExecutorKind
    trace: bool


def resolve_executor_kind(kind: Optional[str] = None) -> ExecutorKind:
    """Resolve the executor kind: explicit value, then environment, then default."""
    if kind is None:
        kind = os.environ.get(EXECUTOR_ENV_VAR) or DEFAULT_EXECUTOR
        logger.debug(f"resolve_executor_kind: using {kind!r} from environment/default")

    kind = kind.strip().lower()
    if kind not in ("stream", "event"):
        raise ValueError(f"Invalid executor: {kind}. Must be one of: ['event', 'stream']")
    return kind  # type: ignore[return-value]


def resolve_trace(trace: Optional[bool] = None) -> bool:
    """Resolve the trace switch: explicit value, then environment."""
    if trace is not None:
        return trace
    return os.environ.get(TRACE_ENV_VAR, "").strip().lower() in _TRUTHY


def validate_config(config: ClientConfig) -> None:
    """Validate client configuration."""
    if not isinstance(config.timeout_ms, int) or isinstance(config.timeout_ms, bool):
        raise ValueError(f"timeout_ms must be an integer, got: {config.timeout_ms!r}")
    if config.timeout_ms < 0:
        raise ValueError(f"timeout_ms must be non-negative, got: {config.timeout_ms}")

    try:
        ResponseType(config.response_type)
    except ValueError as e:
        valid = sorted(t.value for t in ResponseType)
        raise ValueError(
            f"Invalid response_type: {config.response_type}. Must be one of: {valid}"
        ) from e

    if not config.response_encoding:
        raise ValueError("response_encoding is required")


def resolve_config(config: Optional[ClientConfig] = None) -> ResolvedConfig:
    """Resolve client configuration with defaults."""
    config = config or ClientConfig()
    validate_config(config)

    resolved = ResolvedConfig(
        base_url=config.base_url,
        timeout_ms=config.timeout_ms,
        headers=dict(config.headers),
        response_type=ResponseType(config.response_type),
        response_encoding=config.response_encoding,
        authentication=Authentication(username=config.username, password=config.password),
        executor=resolve_executor_kind(config.executor),
        trace=resolve_trace(config.trace),
    )
    logger.debug(f"resolve_config: {config!r} -> executor={resolved.executor}, trace={resolved.trace}")
    return resolved
