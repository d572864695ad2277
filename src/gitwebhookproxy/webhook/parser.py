"""
Turns inbound webhook requests into Hooks.
"""
import logging

from fastapi import Request
from starlette.requests import ClientDisconnect

from ..exceptions import BodyReadError, MissingHeaderError, ParseError
from .models import Hook
from .providers import Provider

logger = logging.getLogger(__name__)

# GitHub caps webhook payloads at 25 MB
DEFAULT_MAX_BODY_SIZE = 25 * 1024 * 1024


async def read_body(request: Request, max_body_size: int = DEFAULT_MAX_BODY_SIZE) -> bytes:
    """Read the whole request body, refusing anything over max_body_size."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_body_size:
        raise BodyReadError(f"Request body exceeds {max_body_size} bytes")

    body = bytearray()
    try:
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > max_body_size:
                raise BodyReadError(f"Request body exceeds {max_body_size} bytes")
    except ClientDisconnect:
        raise BodyReadError("Client disconnected while reading request body")
    except RuntimeError as e:
        # Starlette refuses to stream a body twice
        raise BodyReadError(f"Failed to read request body: {e}")

    return bytes(body)


async def parse(
    request: Request,
    provider: Provider,
    max_body_size: int = DEFAULT_MAX_BODY_SIZE
) -> Hook:
    """
    Parse an inbound request into a Hook.

    Args:
        request: Inbound request
        provider: Provider the delivery is expected from
        max_body_size: Largest accepted body in bytes

    Returns:
        Hook carrying every inbound header and the raw body

    Raises:
        ParseError: If the method is not POST or a required header is missing
        BodyReadError: If the body cannot be read or is too large
    """
    if request.method.upper() != "POST":
        raise ParseError(f"Unknown method '{request.method}'")

    for header in provider.required_headers:
        if not request.headers.get(header, "").strip():
            raise MissingHeaderError(header)

    payload = await read_body(request, max_body_size)
    headers = {key.lower(): value for key, value in request.headers.items()}

    logger.debug(f"Parsed {provider.name.value} hook: {len(payload)} bytes, {len(headers)} headers")

    return Hook(
        request_method=provider.request_method,
        headers=headers,
        payload=payload,
    )
