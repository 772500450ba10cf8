"""
Tests for gitprovision testing utilities.

Verifies that MockGitProvider, ScriptedPrompter and fixtures work correctly.
"""

import pytest

from gitprovision.exceptions import (
    ConflictError,
    NotFoundError,
    PromptCancelledError,
    ServerError,
    ValidationRejectedError,
)
from gitprovision.testing import (
    MockGitProvider,
    MockProviderFactory,
    ScriptedPrompter,
    create_memory_store,
    create_mock_repository,
    create_mock_server,
)
from gitprovision.types.auth import UserCredential


class TestMockGitProvider:
    """Tests for MockGitProvider."""

    def test_default_behaviour(self) -> None:
        """Repositories created are found afterwards; duplicates are refused."""
        mock = MockGitProvider(existing=["mock-user/old"])

        repo = mock.create_repository("mock-user", "new", private=True)

        assert repo.full_name == "mock-user/new"
        assert repo.private is True
        assert mock.get_repository("mock-user", "new") == repo
        assert mock.get_repository("mock-user", "old").name == "old"
        with pytest.raises(NotFoundError):
            mock.get_repository("mock-user", "missing")
        with pytest.raises(ConflictError):
            mock.create_repository("mock-user", "old", private=False)

    def test_configured_responses(self) -> None:
        mock = MockGitProvider()
        custom = create_mock_repository(name="custom", owner="acme")

        mock.configure_get(response=custom)
        mock.configure_list_organizations(response=["acme", "globex"])

        assert mock.get_repository("anyone", "anything") == custom
        assert mock.list_organizations() == ["acme", "globex"]

    def test_configured_errors(self) -> None:
        mock = MockGitProvider()
        mock.configure_create(error=ServerError("HTTP_500", "boom"))
        mock.configure_validate(error=ValidationRejectedError("nope"))

        with pytest.raises(ServerError):
            mock.create_repository("mock-user", "x", private=False)
        with pytest.raises(ValidationRejectedError):
            mock.validate_repository_name("mock-user", "x")

    def test_real_validation_rules(self) -> None:
        mock = MockGitProvider(existing=["alice/taken"])

        mock.validate_repository_name("alice", "fresh")
        with pytest.raises(ValidationRejectedError):
            mock.validate_repository_name("alice", "taken")
        with pytest.raises(ValidationRejectedError):
            mock.validate_repository_name("alice", "bad name")

    def test_call_tracking(self) -> None:
        mock = MockGitProvider()

        mock.list_organizations()
        mock.list_organizations()
        mock.create_repository("mock-user", "x", private=False)

        assert mock.was_called("list_organizations")
        assert not mock.was_called("get_repository")
        assert mock.call_count("list_organizations") == 2
        assert mock.get_calls("create_repository")[0].args == ("mock-user", "x")
        assert len(mock.get_calls()) == 3

    def test_reset(self) -> None:
        mock = MockGitProvider()
        mock.configure_list_organizations(response=["acme"])
        mock.list_organizations()

        mock.reset()

        assert mock.get_calls() == []
        assert mock.list_organizations() == []

    def test_context_manager(self) -> None:
        with MockGitProvider() as mock:
            assert not mock.closed

        assert mock.closed


class TestMockProviderFactory:
    def test_builds_bound_providers(self, sample_server, memory_store) -> None:
        factory = MockProviderFactory(organizations=["acme"], existing=["alice/old"])
        credential = sample_server.users[0]

        first = factory(sample_server, credential, None)
        second = factory(sample_server, credential, None)

        assert factory.providers == [first, second]
        assert factory.last is second
        assert first.server is sample_server
        assert first.credential is credential
        assert first.list_organizations() == ["acme"]
        assert first.repository_exists("alice", "old")


class TestScriptedPrompter:
    """Tests for ScriptedPrompter."""

    def test_answers_defaults_and_rejections(self) -> None:
        prompter = ScriptedPrompter(answers=["", "bad", "good", ""])

        def validator(value: str) -> None:
            if value == "bad":
                raise ValidationRejectedError("bad value")

        assert prompter.ask("first?", validator=validator) == "good"
        assert prompter.ask("second?", default="fallback") == "fallback"
        assert prompter.rejections == [("bad", "bad value")]
        assert prompter.questions == ["first?", "second?"]

    def test_non_rejection_errors_propagate(self) -> None:
        prompter = ScriptedPrompter(answers=["a", "b"])

        def validator(value: str) -> None:
            raise ServerError("HTTP_503", "Service Unavailable")

        with pytest.raises(ServerError):
            prompter.ask("name?", validator=validator)

        assert prompter.rejections == []
        assert list(prompter.answers) == ["b"]

    def test_runs_out_of_answers(self) -> None:
        prompter = ScriptedPrompter()

        with pytest.raises(PromptCancelledError):
            prompter.ask("anything?")
        with pytest.raises(PromptCancelledError):
            prompter.choose("which?", ["a", "b"])

    def test_choose(self) -> None:
        prompter = ScriptedPrompter(choices=["", "b", "z"])

        assert prompter.choose("which?", ["a", "b"], default="a") == "a"
        assert prompter.choose("which?", ["a", "b"]) == "b"
        with pytest.raises(ValueError, match="not one of"):
            prompter.choose("which?", ["a", "b"])

    def test_echo(self) -> None:
        prompter = ScriptedPrompter()

        prompter.echo("hello")

        assert prompter.messages == ["hello"]
        assert prompter.prompt_count == 0


class TestHelperFunctions:
    """Tests for helper functions."""

    def test_create_mock_repository(self) -> None:
        repo = create_mock_repository(name="myapp", owner="acme", private=True)

        assert repo.full_name == "acme/myapp"
        assert repo.clone_url == "https://git.example.com/acme/myapp.git"
        assert repo.ssh_url == "git@git.example.com:acme/myapp.git"
        assert repo.private is True

    def test_create_mock_server(self) -> None:
        server = create_mock_server(users={"bob": "", "carol": "tok"})

        assert server.current_user == "bob"
        assert server.find_user("bob") == UserCredential(username="bob")
        assert server.find_user("carol").is_valid()

    def test_create_memory_store(self) -> None:
        store = create_memory_store(
            create_mock_server("https://github.com"),
            create_mock_server("https://gitlab.example.com"),
            current_server="https://gitlab.example.com",
        )

        assert store.config().current().url == "https://gitlab.example.com"
        assert store.save_count == 0
