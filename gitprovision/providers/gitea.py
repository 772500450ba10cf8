"""Gitea (and Forgejo) provider."""

from typing import Any
from urllib.parse import quote

from gitprovision.providers.base import GitProvider
from gitprovision.providers.github import parse_repository
from gitprovision.transport import HTTPTransport, RetryConfig
from gitprovision.types.auth import KIND_GITEA, HostingServer, UserCredential
from gitprovision.types.repos import GitRepository


class GiteaProvider(GitProvider):
    """Provider for Gitea servers, whose API mirrors GitHub's under /api/v1."""

    kind = KIND_GITEA

    @classmethod
    def api_url(cls, server_url: str) -> str:
        return f"{server_url.rstrip('/')}/api/v1"

    @classmethod
    def _build_transport(
        cls,
        server: HostingServer,
        credential: UserCredential,
        timeout: float,
        retry_config: RetryConfig | None,
    ) -> HTTPTransport:
        return HTTPTransport(
            base_url=cls.api_url(server.url),
            token=credential.api_token,
            auth_scheme="token",
            timeout=timeout,
            retry_config=retry_config,
        )

    @classmethod
    def access_token_url(cls, server_url: str) -> str:
        return f"{server_url.rstrip('/')}/user/settings/applications"

    def get_repository(self, owner: str, name: str) -> GitRepository:
        data = self.transport.get(f"/repos/{quote(owner)}/{quote(name)}")
        return parse_repository(data)

    def create_repository(self, owner: str, name: str, private: bool) -> GitRepository:
        body: dict[str, Any] = {"name": name, "private": private}
        if self.is_own_namespace(owner):
            path = "/user/repos"
        else:
            path = f"/orgs/{quote(owner)}/repos"
        data = self.transport.post(path, body=body)
        return parse_repository(data)

    def list_organizations(self) -> list[str]:
        data = self.transport.get("/user/orgs", params={"limit": 50})
        return [org.get("username") or org.get("name") for org in data or []]
