"""GitLab provider."""

import re
from typing import Any
from urllib.parse import quote

from gitprovision.exceptions import ValidationRejectedError
from gitprovision.providers.base import GitProvider
from gitprovision.transport import HTTPTransport, RetryConfig
from gitprovision.types.auth import KIND_GITLAB, HostingServer, UserCredential
from gitprovision.types.repos import GitRepository

# Developer access level; enough to create projects in a group
_MIN_GROUP_ACCESS_LEVEL = 30


def _parse_project(data: dict[str, Any]) -> GitRepository:
    """Parse a GitLab project payload."""
    namespace = data.get("namespace") or {}
    return GitRepository(
        name=data.get("path") or data["name"],
        owner=namespace.get("full_path") or namespace.get("path") or "",
        full_name=data.get("path_with_namespace", ""),
        html_url=data.get("web_url", ""),
        clone_url=data.get("http_url_to_repo", ""),
        ssh_url=data.get("ssh_url_to_repo", ""),
        private=data.get("visibility") == "private",
        default_branch=data.get("default_branch") or "main",
    )


class GitLabProvider(GitProvider):
    """Provider for gitlab.com and self-managed GitLab servers."""

    kind = KIND_GITLAB

    # GitLab paths may not start with a special character
    name_pattern = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")
    max_name_length = 255

    @classmethod
    def api_url(cls, server_url: str) -> str:
        return f"{server_url.rstrip('/')}/api/v4"

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
            auth_header="PRIVATE-TOKEN",
            auth_scheme=None,
            timeout=timeout,
            retry_config=retry_config,
        )

    @classmethod
    def access_token_url(cls, server_url: str) -> str:
        return (
            f"{server_url.rstrip('/')}/-/user_settings/personal_access_tokens"
            f"?name=gitprovision&scopes=api"
        )

    def get_repository(self, owner: str, name: str) -> GitRepository:
        project_id = quote(self.qualified_name(owner, name), safe="")
        data = self.transport.get(f"/projects/{project_id}")
        return _parse_project(data)

    def create_repository(self, owner: str, name: str, private: bool) -> GitRepository:
        body: dict[str, Any] = {
            "name": name,
            "path": name,
            "visibility": "private" if private else "public",
        }
        if not self.is_own_namespace(owner):
            namespace = self.transport.get(f"/namespaces/{quote(owner, safe='')}")
            body["namespace_id"] = namespace["id"]
        data = self.transport.post("/projects", body=body)
        return _parse_project(data)

    def list_organizations(self) -> list[str]:
        data = self.transport.get(
            "/groups",
            params={"min_access_level": _MIN_GROUP_ACCESS_LEVEL, "per_page": 100},
        )
        return [group["full_path"] for group in data or []]

    def validate_repository_name(self, owner: str, name: str) -> None:
        if name.endswith(".git") or name.endswith(".atom"):
            raise ValidationRejectedError(
                f"Repository name {name!r} cannot end in .git or .atom"
            )
        super().validate_repository_name(owner, name)
