"""
Pytest fixtures for gitprovision testing.

Provides credential stores, mock providers and prompters for testing code
that resolves repositories.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from gitprovision.auth import FileCredentialStore, MemoryCredentialStore
from gitprovision.testing.mock import MockGitProvider, MockProviderFactory, ScriptedPrompter
from gitprovision.types.auth import AuthConfig, HostingServer, UserCredential
from gitprovision.types.repos import GitRepository, RepositoryRequestOptions

SAMPLE_SERVER_URL = "https://git.example.com"
SAMPLE_USERNAME = "alice"
SAMPLE_TOKEN = "ghp_sampletoken0123456789"


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_repository(
    name: str = "sample-repo",
    owner: str = SAMPLE_USERNAME,
    server_url: str = SAMPLE_SERVER_URL,
    private: bool = False,
    default_branch: str = "main",
) -> GitRepository:
    """
    Create a GitRepository with sensible defaults.

    Example:
        ```python
        repo = create_mock_repository(name="myapp", private=True)
        ```
    """
    base = server_url.rstrip("/")
    return GitRepository(
        name=name,
        owner=owner,
        full_name=f"{owner}/{name}",
        html_url=f"{base}/{owner}/{name}",
        clone_url=f"{base}/{owner}/{name}.git",
        ssh_url=f"git@{base.split('://', 1)[-1]}:{owner}/{name}.git",
        private=private,
        default_branch=default_branch,
    )


def create_mock_server(
    url: str = SAMPLE_SERVER_URL,
    users: dict[str, str] | None = None,
    current_user: str = "",
    kind: str = "github",
    name: str = "",
) -> HostingServer:
    """
    Create a HostingServer with the given username -> token pairs.

    The first user becomes the current user unless current_user is given.
    """
    users = {SAMPLE_USERNAME: SAMPLE_TOKEN} if users is None else users
    credentials = [UserCredential(username=u, api_token=t) for u, t in users.items()]
    return HostingServer(
        url=url,
        name=name or url.split("://", 1)[-1],
        kind=kind,
        users=credentials,
        current_user=current_user or (credentials[0].username if credentials else ""),
    )


def create_memory_store(*servers: HostingServer, current_server: str = "") -> MemoryCredentialStore:
    """Create an in-memory credential store holding servers."""
    return MemoryCredentialStore(AuthConfig(servers=list(servers), current_server=current_server))


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def sample_server() -> HostingServer:
    """Provide a server with one valid credential for alice."""
    return create_mock_server()


@pytest.fixture
def memory_store(sample_server: HostingServer) -> MemoryCredentialStore:
    """Provide an in-memory store holding sample_server."""
    return create_memory_store(sample_server)


@pytest.fixture
def empty_store() -> MemoryCredentialStore:
    """Provide an in-memory store with no servers."""
    return MemoryCredentialStore()


@pytest.fixture
def file_store(tmp_path: Path) -> FileCredentialStore:
    """Provide a YAML-backed store in a temporary directory."""
    return FileCredentialStore(tmp_path / "gitAuth.yaml")


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def mock_provider() -> Generator[MockGitProvider, None, None]:
    """
    Provide a MockGitProvider for testing.

    Example:
        ```python
        def test_my_feature(mock_provider):
            mock_provider.configure_create(error=ConflictError("HTTP_422", "exists"))
            ...
            assert mock_provider.was_called("create_repository")
        ```
    """
    provider = MockGitProvider()
    yield provider
    provider.reset()


@pytest.fixture
def mock_provider_factory() -> MockProviderFactory:
    """Provide a factory handing MockGitProviders to the resolver."""
    return MockProviderFactory()


@pytest.fixture
def scripted_prompter() -> ScriptedPrompter:
    """Provide a ScriptedPrompter with no answers; append to .answers / .choices."""
    return ScriptedPrompter()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> GitRepository:
    """Provide a sample GitRepository object."""
    return create_mock_repository(name="myapp")


@pytest.fixture
def sample_options() -> RepositoryRequestOptions:
    """Provide fully specified request options for the sample server."""
    return RepositoryRequestOptions(
        server_url=SAMPLE_SERVER_URL,
        username=SAMPLE_USERNAME,
        repo_name="myapp",
    )
