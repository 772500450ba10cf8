"""Capability interface shared by every hosting provider client."""

import re
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlparse

from gitprovision.exceptions import NotFoundError, ValidationRejectedError
from gitprovision.logging import get_logger
from gitprovision.transport import HTTPTransport, RetryConfig
from gitprovision.types.auth import HostingServer, UserCredential
from gitprovision.types.repos import GitRepository

logger = get_logger("providers")


class GitProvider(ABC):
    """
    A hosting provider client bound to one (server, credential) pair.

    Subclasses implement the HTTP calls of one hosting kind; naming rules,
    qualified names and the access token hint are also per kind.

    Example:
        ```python
        from gitprovision.providers import create_provider

        provider = create_provider(server, credential)
        provider.validate_repository_name("alice", "myapp")
        repo = provider.create_repository("alice", "myapp", private=True)
        ```
    """

    kind: str = ""

    # Allowed characters of a repository name on this kind of host
    name_pattern = re.compile(r"^[A-Za-z0-9_.-]+$")
    max_name_length = 100

    def __init__(
        self,
        server: HostingServer,
        credential: UserCredential,
        transport: HTTPTransport | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            server: Hosting server the provider talks to
            credential: Credential used for every request
            transport: Pre-built transport (default: one built from the server URL)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior (default: no retries)
        """
        self.server = server
        self.credential = credential
        self.transport = transport or self._build_transport(
            server, credential, timeout, retry_config
        )

    @classmethod
    def api_url(cls, server_url: str) -> str:
        """Base URL of the REST API served by a server."""
        return server_url.rstrip("/")

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
            timeout=timeout,
            retry_config=retry_config,
        )

    @classmethod
    @abstractmethod
    def access_token_url(cls, server_url: str) -> str:
        """Page of the hosting UI where a user generates an access token."""

    @classmethod
    def access_token_hint(cls, server: HostingServer, username: str) -> str:
        """Instructions shown to a user who still needs an access token."""
        who = f" for user {username}" if username else ""
        return (
            f"To be able to create a repository on {server.label()}{who} "
            f"we need an API token\n"
            f"Please click this URL {cls.access_token_url(server.url)}\n\n"
            f"Then COPY the token and enter it into the form below:\n"
        )

    @abstractmethod
    def get_repository(self, owner: str, name: str) -> GitRepository:
        """
        Fetch a repository.

        Raises:
            NotFoundError: If the repository does not exist
        """

    @abstractmethod
    def create_repository(self, owner: str, name: str, private: bool) -> GitRepository:
        """
        Create a repository under owner (the user or one of their organisations).

        Raises:
            ConflictError: If the repository already exists
        """

    @abstractmethod
    def list_organizations(self) -> list[str]:
        """Organisations the authenticated user can create repositories in."""

    def qualified_name(self, owner: str, name: str) -> str:
        return f"{owner}/{name}"

    def repository_exists(self, owner: str, name: str) -> bool:
        try:
            self.get_repository(owner, name)
        except NotFoundError:
            return False
        return True

    def validate_repository_name(self, owner: str, name: str) -> None:
        """
        Check that name can be used for a new repository under owner.

        Raises:
            ValidationRejectedError: If the name is malformed or already taken
        """
        if len(name) > self.max_name_length:
            raise ValidationRejectedError(
                f"Repository name must be at most {self.max_name_length} characters"
            )
        if name in (".", "..") or not self.name_pattern.match(name):
            raise ValidationRejectedError(
                f"Repository name {name!r} contains characters not allowed by {self.kind}"
            )
        if self.repository_exists(owner, name):
            raise ValidationRejectedError(
                f"Repository {self.qualified_name(owner, name)} already exists"
            )

    def is_own_namespace(self, owner: str) -> bool:
        return owner.lower() == self.credential.username.lower()

    def close(self) -> None:
        """Close the underlying transport."""
        self.transport.close()

    def __enter__(self) -> "GitProvider":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        host = urlparse(self.server.url).hostname or self.server.url
        return f"{type(self).__name__}(host={host!r}, user={self.credential.username!r})"
