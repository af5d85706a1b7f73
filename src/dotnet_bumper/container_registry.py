"""Resolving container image tags to content digests.

Speaks the Docker Registry HTTP API v2. Anonymous bearer tokens are fetched
on demand when a registry answers with a ``WWW-Authenticate`` challenge.
"""

from __future__ import annotations

import hashlib
import logging
import ssl

import httpx
import truststore

from dotnet_bumper.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "registry.hub.docker.com"
DIGEST_HEADER = "Docker-Content-Digest"

MANIFEST_MEDIA_TYPES = (
    "application/vnd.docker.distribution.manifest.list.v2+json",
    "application/vnd.docker.distribution.manifest.v2+json",
    "application/vnd.oci.image.manifest.v1+json",
    "application/vnd.oci.image.index.v1+json",
)


class DigestCache:
    """Digests resolved during one run, keyed by ``image:tag``.

    Create one per run and pass it to the client; it is never shared
    between runs.
    """

    def __init__(self) -> None:
        self._digests: dict[str, str] = {}

    @staticmethod
    def key(image: str, tag: str) -> str:
        return f"{image}:{tag}"

    def get(self, image: str, tag: str) -> str | None:
        return self._digests.get(self.key(image, tag))

    def put(self, image: str, tag: str, digest: str) -> None:
        self._digests[self.key(image, tag)] = digest

    def __len__(self) -> int:
        return len(self._digests)


def split_registry(image: str) -> tuple[str, str]:
    """Split *image* into its registry host and repository name."""
    host, sep, name = image.partition("/")
    if sep and "." in host:
        return host, name
    return DEFAULT_REGISTRY, image


def parse_challenge(header: str) -> tuple[str, dict[str, str]]:
    """Parse a ``WWW-Authenticate`` header into its scheme and parameters."""
    scheme, _, rest = header.strip().partition(" ")
    params: dict[str, str] = {}
    for part in rest.split(","):
        name, sep, value = part.strip().partition("=")
        if sep:
            params[name.strip()] = value.strip().strip('"')
    return scheme, params


def default_client() -> httpx.Client:
    """HTTP client verifying TLS against the operating system trust store."""
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context, timeout=30, follow_redirects=True)


class ContainerRegistryClient:
    """Looks up the digest an image tag currently points to."""

    def __init__(
        self,
        cache: DigestCache,
        client: httpx.Client | None = None,
        cancellation: CancellationToken | None = None,
    ):
        self.cache = cache
        self.client = client or default_client()
        self.cancellation = cancellation or CancellationToken()
        self._authorization: dict[str, str] = {}

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ContainerRegistryClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_image_digest(self, image: str, tag: str) -> str | None:
        """Return the ``sha256:`` digest for *image*:*tag*, or ``None``.

        Network and protocol failures are logged and reported as ``None``.
        """
        cached = self.cache.get(image, tag)
        if cached is not None:
            return cached

        registry, name = split_registry(image)
        try:
            digest = self._resolve(registry, name, tag)
        except httpx.HTTPError as exc:
            logger.warning("Failed to resolve digest for %s:%s: %s", image, tag, exc)
            return None

        if digest is not None:
            logger.debug("Latest manifest digest for %s:%s is %s", image, tag, digest)
            self.cache.put(image, tag, digest)
        return digest

    def _resolve(self, registry: str, name: str, tag: str) -> str | None:
        url = f"https://{registry}/v2/{name}/manifests/{tag}"
        authorization = self._authorization.get(registry)

        response = self._get_manifest(url, authorization)
        if response.status_code == 401 and authorization is None:
            challenge = response.headers.get("WWW-Authenticate")
            if not challenge:
                return None
            logger.debug("Request to %s is unauthorized; requesting a token", registry)
            authorization = self._authorize(challenge)
            if authorization is None:
                return None
            response = self._get_manifest(url, authorization)
            if response.is_success:
                self._authorization[registry] = authorization

        if not response.is_success:
            logger.debug("Registry returned %s for %s", response.status_code, url)
            return None

        digest = response.headers.get(DIGEST_HEADER)
        if digest:
            return digest
        return f"sha256:{hashlib.sha256(response.content).hexdigest()}"

    def _get_manifest(self, url: str, authorization: str | None) -> httpx.Response:
        self.cancellation.raise_if_cancelled()
        headers = {"Accept": ", ".join(MANIFEST_MEDIA_TYPES)}
        if authorization:
            headers["Authorization"] = authorization
        return self.client.get(url, headers=headers)

    def _authorize(self, challenge: str) -> str | None:
        scheme, params = parse_challenge(challenge)
        realm = params.get("realm")
        if not realm or not realm.startswith(("https://", "http://")):
            return None

        query = {key: params[key] for key in ("service", "scope") if key in params}
        self.cancellation.raise_if_cancelled()
        response = self.client.get(realm, params=query)
        if not response.is_success:
            logger.warning("Failed to get authorization from %s: %s", realm, response.status_code)
            return None

        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        token = payload.get("token") or payload.get("access_token")
        if not isinstance(token, str):
            return None
        logger.debug("Got authorization for realm %s", realm)
        return f"{scheme} {token}"
