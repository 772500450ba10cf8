"""GitHub and GitHub Enterprise provider."""

from typing import Any
from urllib.parse import quote, urlparse

from gitprovision.providers.base import GitProvider
from gitprovision.types.auth import KIND_GITHUB
from gitprovision.types.repos import GitRepository

GITHUB_URL = "https://github.com"
GITHUB_API_URL = "https://api.github.com"

_TOKEN_SCOPES = "repo,read:user,read:org,user:email,write:repo_hook,delete_repo"


def _is_github_dot_com(server_url: str) -> bool:
    host = (urlparse(server_url).hostname or "").lower()
    return host in ("github.com", "www.github.com", "api.github.com")


def parse_repository(data: dict[str, Any]) -> GitRepository:
    """Parse a GitHub (or Gitea, which mirrors it) repository payload."""
    owner = data.get("owner") or {}
    return GitRepository(
        name=data["name"],
        owner=owner.get("login") or owner.get("username") or "",
        full_name=data.get("full_name", ""),
        html_url=data.get("html_url", ""),
        clone_url=data.get("clone_url", ""),
        ssh_url=data.get("ssh_url", ""),
        private=bool(data.get("private", False)),
        default_branch=data.get("default_branch") or "main",
    )


class GitHubProvider(GitProvider):
    """Provider for github.com and GitHub Enterprise servers."""

    kind = KIND_GITHUB

    @classmethod
    def api_url(cls, server_url: str) -> str:
        if _is_github_dot_com(server_url):
            return GITHUB_API_URL
        return f"{server_url.rstrip('/')}/api/v3"

    @classmethod
    def access_token_url(cls, server_url: str) -> str:
        base = GITHUB_URL if _is_github_dot_com(server_url) else server_url.rstrip("/")
        return f"{base}/settings/tokens/new?scopes={_TOKEN_SCOPES}"

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
        data = self.transport.get("/user/orgs", params={"per_page": 100})
        return [org["login"] for org in data or []]
