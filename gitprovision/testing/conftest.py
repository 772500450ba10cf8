"""
Pytest plugin for gitprovision testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them in your tests, add this to your
top-level conftest.py:

    pytest_plugins = ["gitprovision.testing.conftest"]

Or import the fixtures directly:

    from gitprovision.testing.fixtures import memory_store, mock_provider
"""

from gitprovision.testing.fixtures import (
    empty_store,
    file_store,
    memory_store,
    mock_provider,
    mock_provider_factory,
    sample_options,
    sample_repository,
    sample_server,
    scripted_prompter,
)

__all__ = [
    "empty_store",
    "file_store",
    "memory_store",
    "mock_provider",
    "mock_provider_factory",
    "sample_options",
    "sample_repository",
    "sample_server",
    "scripted_prompter",
]
