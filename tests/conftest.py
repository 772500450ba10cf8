"""Shared fixtures, re-exported from the shipped testing package."""

from gitprovision.testing.fixtures import (  # noqa: F401
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
