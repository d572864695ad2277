import hashlib
import hmac

import pytest
import respx
from fastapi.testclient import TestClient
from starlette.requests import Request

from gitwebhookproxy.main import create_app
from gitwebhookproxy.proxy import Proxy

SECRET = "s3cr3t"
UPSTREAM_URL = "http://upstream.test"


def github_signature(secret: str, body: bytes) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def github_headers(secret: str, body: bytes, event: str = "push") -> dict:
    return {
        "Content-Type": "application/json",
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature-256": github_signature(secret, body),
    }


def make_request(body: bytes = b"", headers: dict = None, method: str = "POST", chunks: list = None) -> Request:
    """Build a bare ASGI request whose body is delivered in the given chunks."""
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "method": method,
        "path": "/repo1",
        "query_string": b"",
        "headers": raw_headers,
    }

    parts = chunks if chunks is not None else [body]
    messages = [
        {"type": "http.request", "body": part, "more_body": i < len(parts) - 1}
        for i, part in enumerate(parts)
    ]

    async def receive():
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return Request(scope, receive)


@pytest.fixture
def upstream():
    with respx.mock(base_url=UPSTREAM_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
def make_client(upstream):
    clients = []

    def _make(allowed_paths=(), provider="github", secret=SECRET, upstream_url=UPSTREAM_URL):
        proxy = Proxy(
            upstream_url=upstream_url,
            allowed_paths=list(allowed_paths),
            provider=provider,
            secret=secret,
        )
        client = TestClient(create_app(proxy))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
