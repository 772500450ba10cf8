"""Hosting server and credential data models."""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

KIND_GITHUB = "github"
KIND_GITLAB = "gitlab"
KIND_GITEA = "gitea"

SUPPORTED_KINDS = (KIND_GITHUB, KIND_GITLAB, KIND_GITEA)


def normalize_url(url: str) -> str:
    """Strip surrounding whitespace and trailing slashes from a server URL."""
    return url.strip().rstrip("/")


def infer_server_kind(url: str, default_kind: str = KIND_GITHUB) -> str:
    """
    Guess the hosting kind from a server URL.

    Args:
        url: Server URL, e.g. "https://gitlab.example.com"
        default_kind: Kind returned when the host gives no hint

    Returns:
        One of the supported kind names
    """
    host = (urlparse(url).hostname or url).lower()
    if host == "github.com" or host.endswith(".github.com") or host.startswith("github."):
        return KIND_GITHUB
    if "gitlab" in host:
        return KIND_GITLAB
    if "gitea" in host or "codeberg" in host:
        return KIND_GITEA
    return default_kind


@dataclass
class UserCredential:
    """A username and access token pair scoped to one hosting server."""

    username: str
    api_token: str = ""

    def is_valid(self) -> bool:
        """A credential is usable once it has a username and a well-formed token."""
        token = self.api_token or ""
        return (
            bool(self.username.strip())
            and bool(token.strip())
            and not any(ch.isspace() for ch in token)
        )

    def is_invalid(self) -> bool:
        return not self.is_valid()

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "apiToken": self.api_token}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserCredential":
        return cls(
            username=data.get("username") or "",
            api_token=data.get("apiToken") or data.get("api_token") or "",
        )


@dataclass
class HostingServer:
    """Identity of a Git hosting endpoint and the credentials known for it."""

    url: str
    name: str = ""
    kind: str = ""
    users: list[UserCredential] = field(default_factory=list)
    current_user: str = ""

    def label(self) -> str:
        """Display name of the server, falling back to its URL."""
        return self.name or self.url

    def description(self) -> str:
        if self.name:
            return f"{self.name} at {self.url}"
        return self.url

    def matches(self, name_or_url: str) -> bool:
        """True when name_or_url is this server's name or (normalized) URL."""
        if not name_or_url:
            return False
        return name_or_url == self.name or normalize_url(name_or_url) == normalize_url(self.url)

    def find_user(self, username: str) -> UserCredential | None:
        for user in self.users:
            if user.username == username:
                return user
        return None

    def get_or_create_user(self, username: str) -> UserCredential:
        """
        Return the credential for username, registering a new empty one if needed.

        The first credential registered on a server becomes its current user.
        """
        user = self.find_user(username)
        if user is None:
            user = UserCredential(username=username)
            self.users.append(user)
        if not self.current_user:
            self.current_user = username
        return user

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "name": self.name,
            "kind": self.kind,
            "currentUser": self.current_user,
            "users": [user.to_dict() for user in self.users],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HostingServer":
        return cls(
            url=data.get("url") or "",
            name=data.get("name") or "",
            kind=data.get("kind") or "",
            current_user=data.get("currentUser") or "",
            users=[UserCredential.from_dict(user) for user in data.get("users") or []],
        )


@dataclass
class AuthConfig:
    """Snapshot of every known server, plus the current server selection."""

    servers: list[HostingServer] = field(default_factory=list)
    current_server: str = ""
    default_username: str = ""

    def find_server(self, name_or_url: str) -> HostingServer | None:
        for server in self.servers:
            if server.matches(name_or_url):
                return server
        return None

    def get_or_create_server(
        self, url: str, kind: str = "", default_kind: str = KIND_GITHUB
    ) -> HostingServer:
        """
        Return the server registered for url, registering it if unknown.

        An explicit kind overrides an unset kind on an existing record. New
        records infer their kind from the URL when none is given.
        """
        server = self.find_server(url)
        if server is None:
            url = normalize_url(url)
            server = HostingServer(
                url=url,
                name=urlparse(url).hostname or url,
                kind=kind or infer_server_kind(url, default_kind),
            )
            self.servers.append(server)
        elif kind and not server.kind:
            server.kind = kind
        if not server.kind:
            server.kind = infer_server_kind(server.url, default_kind)
        return server

    def current(self) -> HostingServer | None:
        """The designated current server, or the first one registered."""
        if not self.servers:
            return None
        if self.current_server:
            server = self.find_server(self.current_server)
            if server is not None:
                return server
        return self.servers[0]

    def find_credential(self, server_url: str, username: str) -> UserCredential | None:
        server = self.find_server(server_url)
        if server is None or not username:
            return None
        return server.find_user(username)

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentServer": self.current_server,
            "defaultUsername": self.default_username,
            "servers": [server.to_dict() for server in self.servers],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AuthConfig":
        data = data or {}
        return cls(
            servers=[HostingServer.from_dict(s) for s in data.get("servers") or []],
            current_server=data.get("currentServer") or "",
            default_username=data.get("defaultUsername") or "",
        )
