"""
Console tracing of requests and responses with rich.
"""
import json
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .types import Request, Response

console = Console(stderr=True)

SENSITIVE_HEADERS = ("authorization", "proxy-authorization", "x-api-key")


def mask_auth_header(value: Optional[str], visible_chars: int = 15) -> str:
    """Mask an auth header value, keeping the first characters visible."""
    if value is None:
        return "<none>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(headers: Mapping[str, str]) -> dict:
    """Copy of headers with auth values masked."""
    return {
        key: mask_auth_header(value) if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def _format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


async def trace_request(request: Request) -> None:
    """Interceptor printing the outgoing request. Register it after the built-ins."""
    target = request.url.map(str).unwrap_or(f"{request.base} {request.path}")
    console.print(Panel(
        f"[bold cyan]{request.method.value}[/bold cyan] {target}",
        title="[bold blue]Request[/bold blue]",
    ))
    console.print("[bold]Headers:[/bold]", mask_headers(request.headers))
    if request.body is not None:
        console.print(Panel(
            Syntax(_format_body(request.body), "json"),
            title="[bold]Request Body[/bold]",
        ))


def trace_response(response: Response, url: str = "") -> None:
    """Print a response, or the response carried by an HTTP status rejection."""
    status_color = "green" if response.status < 400 else "red"
    console.print(Panel(
        f"[bold {status_color}]{response.status}[/bold {status_color}]",
        title=f"[bold blue]Response[/bold blue] ({url})",
    ))
    console.print("[bold]Headers:[/bold]", dict(response.headers))
    if response.body:
        console.print(Panel(
            Syntax(_format_body(response.body), "json"),
            title=f"[bold]Response Body[/bold] (URL: {url})",
        ))
