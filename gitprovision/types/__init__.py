"""gitprovision type definitions.

This module exports all data model types used by the package.
"""

from gitprovision.types.auth import (
    KIND_GITEA,
    KIND_GITHUB,
    KIND_GITLAB,
    SUPPORTED_KINDS,
    AuthConfig,
    HostingServer,
    UserCredential,
    infer_server_kind,
    normalize_url,
)
from gitprovision.types.repos import (
    GitRepository,
    ProvisioningResult,
    RepositoryRequestOptions,
)

__all__ = [
    # Server and credential types
    "AuthConfig",
    "HostingServer",
    "UserCredential",
    "KIND_GITHUB",
    "KIND_GITLAB",
    "KIND_GITEA",
    "SUPPORTED_KINDS",
    "infer_server_kind",
    "normalize_url",
    # Repository types
    "GitRepository",
    "RepositoryRequestOptions",
    "ProvisioningResult",
]
