"""gitprovision testing utilities.

Provides a mock provider, a scripted prompter and fixtures for testing code
that resolves and provisions repositories.
"""

from gitprovision.auth import MemoryCredentialStore
from gitprovision.testing.fixtures import (
    create_memory_store,
    create_mock_repository,
    create_mock_server,
)
from gitprovision.testing.mock import (
    MockCall,
    MockGitProvider,
    MockProviderFactory,
    MockResponse,
    ScriptedPrompter,
)

__all__ = [
    # Test doubles
    "MockGitProvider",
    "MockProviderFactory",
    "ScriptedPrompter",
    "MockCall",
    "MockResponse",
    "MemoryCredentialStore",
    # Helper functions
    "create_mock_repository",
    "create_mock_server",
    "create_memory_store",
]
