"""gitprovision - resolve, then create or reuse, a repository on a Git hosting server."""

from gitprovision.auth import (
    CredentialEdit,
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
)
from gitprovision.config import Settings
from gitprovision.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    CredentialStoreError,
    GitProvisionError,
    IncompleteAuthenticationError,
    NoCredentialsConfiguredError,
    NoServersConfiguredError,
    NotFoundError,
    PromptCancelledError,
    ProviderConstructionError,
    RateLimitedError,
    RepositoryNameRequiredError,
    ServerError,
    ValidationError,
    ValidationRejectedError,
)
from gitprovision.logging import configure_logging, get_logger
from gitprovision.prompts import ClickPrompter, Prompter
from gitprovision.providers import (
    GiteaProvider,
    GitHubProvider,
    GitLabProvider,
    GitProvider,
    create_provider,
)
from gitprovision.resolver import pick_new_or_existing_repository, pick_new_repository
from gitprovision.transport import HTTPTransport, RetryConfig
from gitprovision.types import (
    AuthConfig,
    GitRepository,
    HostingServer,
    ProvisioningResult,
    RepositoryRequestOptions,
    UserCredential,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Resolver
    "pick_new_or_existing_repository",
    "pick_new_repository",
    # Types
    "AuthConfig",
    "HostingServer",
    "UserCredential",
    "GitRepository",
    "RepositoryRequestOptions",
    "ProvisioningResult",
    # Credential store
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "CredentialEdit",
    # Prompts
    "Prompter",
    "ClickPrompter",
    # Providers
    "GitProvider",
    "GitHubProvider",
    "GitLabProvider",
    "GiteaProvider",
    "create_provider",
    # Exceptions
    "GitProvisionError",
    "ConfigurationError",
    "NoServersConfiguredError",
    "NoCredentialsConfiguredError",
    "IncompleteAuthenticationError",
    "ProviderConstructionError",
    "RepositoryNameRequiredError",
    "ValidationRejectedError",
    "PromptCancelledError",
    "CredentialStoreError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Settings
    "Settings",
    # Logging
    "configure_logging",
    "get_logger",
]
