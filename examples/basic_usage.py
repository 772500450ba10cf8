#!/usr/bin/env python3
"""
Basic gitprovision usage example.

Resolves a repository against an in-memory credential store and a mock
provider, so nothing touches the network or ~/.gitprovision.
Run with: python examples/basic_usage.py
"""

from gitprovision import (
    GitProvisionError,
    IncompleteAuthenticationError,
    RepositoryRequestOptions,
    pick_new_or_existing_repository,
)
from gitprovision.testing import MockProviderFactory, create_memory_store, create_mock_server

print("=== gitprovision Basic Usage Example ===\n")

store = create_memory_store(
    create_mock_server("https://github.com", users={"alice": "ghp_exampletoken0123456789"}),
    create_mock_server("https://gitlab.example.com", users={"bob": ""}, kind="gitlab"),
)
factory = MockProviderFactory(organizations=["acme"])

# 1. Batch mode with nothing supplied: current server, current user, "dummy"
print("1. Batch resolution with defaults...")
result = pick_new_or_existing_repository(
    True, RepositoryRequestOptions(), store=store, provider_factory=factory
)
print(f"   Resolved {result.full_name} on {result.server.url} as {result.credential.username}")
assert result.repo_name == "dummy"

# 2. Batch mode with an explicit owner and name
print("2. Batch resolution with owner and name...")
options = RepositoryRequestOptions(owner="acme", repo_name="myapp", private=True)
result = pick_new_or_existing_repository(True, options, store=store, provider_factory=factory)
repo = result.create_repository()
print(f"   Created {repo.full_name} (private={repo.private}): {repo.clone_url}")

# 3. A credential without a token cannot be completed in batch mode
print("3. Incomplete credential in batch mode...")
options = RepositoryRequestOptions(server_url="https://gitlab.example.com", username="bob")
try:
    pick_new_or_existing_repository(True, options, store=store, provider_factory=factory)
except IncompleteAuthenticationError as e:
    print(f"   Caught {type(e).__name__}: {e.message}")
except GitProvisionError as e:
    raise SystemExit(f"unexpected error: {e}")

print(f"\n   Store writes: {store.save_count}")
print("\n=== Done ===")
