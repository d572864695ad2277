"""
Webhook proxy: validates inbound deliveries and replays them upstream.
"""
import asyncio
import logging
from typing import Optional, Sequence

import httpx
from fastapi import HTTPException, Request, Response, status

from .config import Settings
from .exceptions import (
    ConfigurationError,
    InvalidURLError,
    NilHookError,
    ParseError,
    ProviderError,
    RedirectError,
    TransportError,
)
from .webhook.models import CONTENT_TYPE_HEADER, Hook
from .webhook.parser import DEFAULT_MAX_BODY_SIZE, parse
from .webhook.providers import new_provider

logger = logging.getLogger(__name__)

UPSTREAM_TIMEOUT = 60.0  # seconds

# Set by the HTTP client from the outbound request itself
TRANSPORT_HEADERS = frozenset({"host", "content-length", "transfer-encoding", "connection"})


def _normalize_path(path: str) -> str:
    path = path.strip()
    if path.endswith("/"):
        path = path[:-1]
    return path


class Proxy:
    """Relays validated webhook deliveries to an upstream service."""

    def __init__(
        self,
        upstream_url: str,
        allowed_paths: Optional[Sequence[str]],
        provider: str,
        secret: str,
        http_client: Optional[httpx.AsyncClient] = None,
        max_body_size: int = DEFAULT_MAX_BODY_SIZE
    ):
        """
        Initialize proxy.

        Args:
            upstream_url: Base URL deliveries are forwarded to, scheme optional
            allowed_paths: Paths allowed to be proxied, empty allows all
            provider: Provider name (github, gitlab, gitea)
            secret: Shared webhook secret
            http_client: Client for outbound requests, created when omitted
            max_body_size: Largest accepted inbound body in bytes

        Raises:
            ConfigurationError: If a required value is blank or missing
        """
        if not secret or not secret.strip():
            raise ConfigurationError("Cannot create Proxy with empty secret", "secret")
        if not upstream_url or not upstream_url.strip():
            raise ConfigurationError("Cannot create Proxy with empty upstreamURL", "upstream_url")
        if not provider or not provider.strip():
            raise ConfigurationError("Cannot create Proxy with empty provider", "provider")
        if allowed_paths is None:
            raise ConfigurationError("Cannot create Proxy with nil allowedPaths", "allowed_paths")

        self.upstream_url = upstream_url
        self.allowed_paths = tuple(allowed_paths)
        self.provider = provider
        self.secret = secret
        self.max_body_size = max_body_size
        self.http_client = http_client or httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Proxy":
        """Create proxy from application settings."""
        return cls(
            upstream_url=settings.upstream_url,
            allowed_paths=settings.allowed_path_list,
            provider=settings.provider,
            secret=settings.secret,
            max_body_size=settings.max_body_size,
        )

    async def aclose(self):
        """Close the outbound HTTP client."""
        await self.http_client.aclose()

    def is_path_allowed(self, path: str) -> bool:
        """Check path against the allow-list, ignoring whitespace and a trailing slash."""
        if not self.allowed_paths:
            return True

        normalized = _normalize_path(path)
        return any(_normalize_path(p) == normalized for p in self.allowed_paths)

    def _target_url(self, path: str) -> httpx.URL:
        target = self.upstream_url + path
        # Default scheme, decided by the configured base only
        if "://" not in self.upstream_url:
            target = "http://" + target

        try:
            url = httpx.URL(target)
        except httpx.InvalidURL as e:
            raise InvalidURLError(target, str(e))

        if not url.host:
            raise InvalidURLError(target, "missing host")
        return url

    async def redirect(self, hook: Optional[Hook], path: str) -> httpx.Response:
        """
        Replay a hook to upstream_url + path.

        Args:
            hook: Parsed and validated hook
            path: Inbound request path, appended to the upstream URL

        Returns:
            Upstream response

        Raises:
            NilHookError: If hook is None
            InvalidURLError: If the target URL cannot be parsed
            TransportError: If the upstream cannot be reached or does not answer in time
        """
        if hook is None:
            raise NilHookError()

        url = self._target_url(path)

        headers = []
        content_type = hook.headers.get(CONTENT_TYPE_HEADER)
        if content_type:
            headers.append((CONTENT_TYPE_HEADER, content_type))

        for key, value in hook.headers.items():
            if key.lower() not in TRANSPORT_HEADERS:
                headers.append((key, value))

        request = self.http_client.request(
            hook.request_method,
            url,
            content=hook.payload,
            headers=headers,
        )
        try:
            # httpx timeouts apply per phase; this bounds the whole call
            return await asyncio.wait_for(request, UPSTREAM_TIMEOUT)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Upstream did not respond within {UPSTREAM_TIMEOUT}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{e.__class__.__name__}: {e}") from e

    async def proxy_request(self, request: Request) -> Response:
        """
        Handle an inbound webhook delivery.

        Raises:
            HTTPException: On any failure; the status code reflects the failed stage
        """
        path = request.url.path
        source = str(request.url)
        upstream = self.upstream_url + path

        logger.info(f"Proxying Request from '{source}', to upstream '{upstream}'")

        if not self.is_path_allowed(path):
            logger.warning(f"Not allowed to proxy path: '{path}'")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not allowed to proxy path: '{path}'"
            )

        try:
            provider = new_provider(self.provider, self.secret)
        except ProviderError as e:
            logger.error(f"Error creating provider: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating Provider"
            )

        try:
            hook = await parse(request, provider, self.max_body_size)
        except ParseError as e:
            logger.warning(f"Error parsing Hook: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Error parsing Hook: {e}"
            )

        if not provider.validate(hook):
            logger.warning(f"Error validating Hook for '{source}' with provider {provider!r}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Error validating Hook"
            )

        try:
            response = await self.redirect(hook, path)
        except RedirectError as e:
            logger.error(f"Error Redirecting '{source}' to upstream '{upstream}': {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error Redirecting '{source}' to upstream '{upstream}'"
            )

        upstream_status = f"{response.status_code} {response.reason_phrase}"
        if response.status_code >= 400:
            logger.error(
                f"Error Redirecting '{source}' to upstream '{upstream}', "
                f"Upstream Redirect Status: {upstream_status}"
            )
            raise HTTPException(
                status_code=response.status_code,
                detail=(
                    f"Error Redirecting '{source}' to upstream '{upstream}' "
                    f"Upstream Redirect Status: {upstream_status}"
                )
            )

        logger.info(
            f"Redirected incoming request '{source}' to '{upstream}' "
            f"with Response: '{upstream_status}'"
        )
        return Response(status_code=status.HTTP_200_OK)
