"""Repository-related data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitprovision.types.auth import HostingServer, UserCredential

if TYPE_CHECKING:
    from gitprovision.providers.base import GitProvider


@dataclass
class GitRepository:
    """Repository information returned by a hosting provider."""

    name: str
    owner: str
    full_name: str
    html_url: str
    clone_url: str
    ssh_url: str = ""
    private: bool = False
    default_branch: str = "main"


@dataclass
class RepositoryRequestOptions:
    """
    Caller-supplied hints for a repository to create or reuse.

    Every field is optional; empty values are resolved by the resolver.
    """

    server_url: str = ""
    server_kind: str = ""
    username: str = ""
    api_token: str = ""
    owner: str = ""
    repo_name: str = ""
    private: bool = False


@dataclass(frozen=True)
class ProvisioningResult:
    """Fully resolved parameters of a repository plus a provider bound to them."""

    owner: str
    repo_name: str
    full_name: str
    private_repo: bool
    credential: UserCredential
    server: HostingServer
    provider: "GitProvider" = field(compare=False)

    def get_repository(self) -> GitRepository:
        """
        Return the repository if it already exists.

        Raises:
            NotFoundError: If the repository does not exist
        """
        return self.provider.get_repository(self.owner, self.repo_name)

    def create_repository(self) -> GitRepository:
        """
        Create the repository, failing if it already exists.

        Raises:
            ConflictError: If the repository already exists
        """
        return self.provider.create_repository(self.owner, self.repo_name, self.private_repo)
