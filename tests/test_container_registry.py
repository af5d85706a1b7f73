"""Tests for container image digest resolution."""

from __future__ import annotations

import hashlib

import httpx
import pytest

from dotnet_bumper.cancellation import CancellationToken
from dotnet_bumper.container_registry import (
    DEFAULT_REGISTRY,
    ContainerRegistryClient,
    DigestCache,
    parse_challenge,
    split_registry,
)
from dotnet_bumper.errors import UpgradeCancelled

DIGEST = "sha256:" + "c" * 64
CHALLENGE = 'Bearer realm="https://auth.example.io/token",service="example.io",scope="repository:app:pull"'


def registry_client(handler) -> ContainerRegistryClient:
    return ContainerRegistryClient(DigestCache(), client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestHelpers:
    @pytest.mark.parametrize(
        ("image", "expected"),
        [
            ("mcr.microsoft.com/dotnet/sdk", ("mcr.microsoft.com", "dotnet/sdk")),
            ("localhost.localdomain/app", ("localhost.localdomain", "app")),
            ("library/ubuntu", (DEFAULT_REGISTRY, "library/ubuntu")),
            ("ubuntu", (DEFAULT_REGISTRY, "ubuntu")),
        ],
    )
    def test_split_registry(self, image: str, expected: tuple[str, str]) -> None:
        assert split_registry(image) == expected

    def test_parse_challenge(self) -> None:
        scheme, params = parse_challenge(CHALLENGE)
        assert scheme == "Bearer"
        assert params == {
            "realm": "https://auth.example.io/token",
            "service": "example.io",
            "scope": "repository:app:pull",
        }

    def test_cache(self) -> None:
        cache = DigestCache()
        cache.put("app", "8.0", DIGEST)
        assert cache.get("app", "8.0") == DIGEST
        assert cache.get("app", "9.0") is None
        assert len(cache) == 1


class TestContainerRegistryClient:
    def test_digest_header(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, headers={"Docker-Content-Digest": DIGEST}, content=b"{}")

        with registry_client(handler) as client:
            assert client.get_image_digest("mcr.microsoft.com/dotnet/runtime", "8.0") == DIGEST

        assert str(requests[0].url) == "https://mcr.microsoft.com/v2/dotnet/runtime/manifests/8.0"
        assert "manifest.list.v2+json" in requests[0].headers["Accept"]

    def test_body_hash_without_header(self) -> None:
        body = b'{"schemaVersion": 2}'

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body)

        digest = registry_client(handler).get_image_digest("example.io/app", "1.0")

        assert digest == f"sha256:{hashlib.sha256(body).hexdigest()}"

    def test_bearer_challenge(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            if request.url.host == "auth.example.io":
                assert request.url.params["service"] == "example.io"
                assert request.url.params["scope"] == "repository:app:pull"
                return httpx.Response(200, json={"token": "secret"})
            if request.headers.get("Authorization") != "Bearer secret":
                return httpx.Response(401, headers={"WWW-Authenticate": CHALLENGE})
            return httpx.Response(200, headers={"Docker-Content-Digest": DIGEST})

        client = registry_client(handler)

        assert client.get_image_digest("example.io/app", "8.0") == DIGEST
        assert client.get_image_digest("example.io/app", "9.0") == DIGEST
        # The token is reused for the second tag.
        assert seen == ["example.io", "auth.example.io", "example.io", "example.io"]

    def test_results_are_cached(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(200, headers={"Docker-Content-Digest": DIGEST})

        client = registry_client(handler)
        client.get_image_digest("example.io/app", "8.0")
        client.get_image_digest("example.io/app", "8.0")

        assert calls == 1
        assert client.cache.get("example.io/app", "8.0") == DIGEST

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(404),
            httpx.Response(401),
            httpx.Response(401, headers={"WWW-Authenticate": 'Bearer realm="file:///etc/passwd"'}),
        ],
    )
    def test_failures_return_none(self, response: httpx.Response) -> None:
        client = registry_client(lambda request: response)

        assert client.get_image_digest("example.io/app", "8.0") is None
        assert len(client.cache) == 0

    def test_rejected_token_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "auth.example.io":
                return httpx.Response(403)
            return httpx.Response(401, headers={"WWW-Authenticate": CHALLENGE})

        assert registry_client(handler).get_image_digest("example.io/app", "8.0") is None

    def test_network_error_returns_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        assert registry_client(handler).get_image_digest("example.io/app", "8.0") is None

    def test_cancelled_before_request(self) -> None:
        token = CancellationToken()
        token.cancel()
        client = ContainerRegistryClient(
            DigestCache(),
            client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200))),
            cancellation=token,
        )

        with pytest.raises(UpgradeCancelled):
            client.get_image_digest("example.io/app", "8.0")
