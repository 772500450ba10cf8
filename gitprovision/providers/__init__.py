"""Hosting provider clients and the factory selecting one per hosting kind."""

from urllib.parse import urlparse

import httpx

from gitprovision.config import Settings
from gitprovision.exceptions import ProviderConstructionError
from gitprovision.providers.base import GitProvider
from gitprovision.providers.gitea import GiteaProvider
from gitprovision.providers.github import GitHubProvider
from gitprovision.providers.gitlab import GitLabProvider
from gitprovision.types.auth import (
    KIND_GITEA,
    KIND_GITHUB,
    KIND_GITLAB,
    HostingServer,
    UserCredential,
    infer_server_kind,
)

PROVIDERS: dict[str, type[GitProvider]] = {
    KIND_GITHUB: GitHubProvider,
    KIND_GITLAB: GitLabProvider,
    KIND_GITEA: GiteaProvider,
}


def provider_class(server: HostingServer, default_kind: str = KIND_GITHUB) -> type[GitProvider]:
    """
    Look up the provider implementation for a server.

    Raises:
        ProviderConstructionError: If the server's kind is not supported
    """
    kind = (server.kind or infer_server_kind(server.url, default_kind)).lower()
    try:
        return PROVIDERS[kind]
    except KeyError:
        raise ProviderConstructionError(
            f"Unsupported Git provider kind {kind!r} for server {server.url}. "
            f"Supported kinds: {', '.join(sorted(PROVIDERS))}"
        ) from None


def access_token_hint(server: HostingServer, username: str) -> str:
    """Provider-specific instructions for generating an access token."""
    return provider_class(server).access_token_hint(server, username)


def create_provider(
    server: HostingServer,
    credential: UserCredential,
    settings: Settings | None = None,
) -> GitProvider:
    """
    Build the provider client for a (server, credential) pair.

    Args:
        server: Resolved hosting server
        credential: Valid credential for that server
        settings: Settings supplying the default kind and HTTP timeout

    Returns:
        A GitProvider bound to the pair

    Raises:
        ProviderConstructionError: If the kind is unsupported, the credential
            is invalid or the server URL is malformed
    """
    settings = settings or Settings()
    cls = provider_class(server, settings.default_kind)

    parsed = urlparse(server.url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ProviderConstructionError(
            f"Malformed Git server URL {server.url!r}: expected http(s)://host"
        )
    if credential.is_invalid():
        raise ProviderConstructionError(
            f"Cannot create a {cls.kind} provider for {server.url}: "
            f"user {credential.username!r} has no valid access token"
        )

    try:
        return cls(server, credential, timeout=settings.timeout)
    except httpx.InvalidURL as e:
        raise ProviderConstructionError(
            f"Malformed Git server URL {server.url!r}: {e}"
        ) from e


__all__ = [
    "GitProvider",
    "GitHubProvider",
    "GitLabProvider",
    "GiteaProvider",
    "PROVIDERS",
    "access_token_hint",
    "create_provider",
    "provider_class",
]
