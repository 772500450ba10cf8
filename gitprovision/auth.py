"""
Credential store: known hosting servers and the user credentials for each.

`FileCredentialStore` keeps them in a YAML file; `MemoryCredentialStore`
holds them in memory only. Both share the lookup, create-on-the-fly and
interactive picking logic of `BaseCredentialStore`.
"""

import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlparse

import yaml

from gitprovision.exceptions import (
    CredentialStoreError,
    GitProvisionError,
    IncompleteAuthenticationError,
    ValidationRejectedError,
)
from gitprovision.logging import get_logger, mask_token
from gitprovision.prompts import Prompter
from gitprovision.types.auth import (
    KIND_GITHUB,
    AuthConfig,
    HostingServer,
    UserCredential,
    normalize_url,
)

logger = get_logger("auth")

# Called with the username before the user is asked for a token
InvalidCredentialCallback = Callable[[str], None]


class CredentialStore(Protocol):
    """Operations the resolver needs from a credential store."""

    def config(self) -> AuthConfig: ...

    def list_servers(self) -> list[HostingServer]: ...

    def get_or_create_server(self, url: str, kind: str = "") -> HostingServer: ...

    def get_or_create_credential(self, server_url: str, username: str) -> UserCredential: ...

    def find_credential(self, server_url: str, username: str) -> UserCredential | None: ...

    def edit_credential(
        self,
        label: str,
        credential: UserCredential,
        default_username: str,
        batch_mode: bool,
        prompter: Prompter | None,
        on_invalid: InvalidCredentialCallback | None = None,
    ) -> None: ...

    def persist_credential(self, server_url: str, credential: UserCredential) -> None: ...

    def pick_server(self, prompter: Prompter, message: str) -> HostingServer: ...

    def pick_server_credential(
        self, server: HostingServer, prompter: Prompter, message: str
    ) -> UserCredential: ...


def _require(what: str) -> Callable[[str], None]:
    def validator(value: str) -> None:
        if not value.strip():
            raise ValidationRejectedError(f"{what} is required")

    return validator


def _validate_server_url(value: str) -> None:
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationRejectedError(f"{value!r} is not an http(s) URL")


class BaseCredentialStore:
    """
    Credential store logic over an in-memory `AuthConfig`.

    Subclasses provide persistence by implementing `save()`.
    """

    def __init__(self, config: AuthConfig | None = None, default_kind: str = KIND_GITHUB) -> None:
        self._config = config or AuthConfig()
        self.default_kind = default_kind

    def config(self) -> AuthConfig:
        """The live configuration snapshot held by this store."""
        return self._config

    def save(self) -> None:
        raise NotImplementedError

    def list_servers(self) -> list[HostingServer]:
        return list(self._config.servers)

    def get_or_create_server(self, url: str, kind: str = "") -> HostingServer:
        """Look up a server by URL or name, registering it in memory if unknown."""
        known = self._config.find_server(url) is not None
        server = self._config.get_or_create_server(url, kind, self.default_kind)
        if not known:
            logger.info("Registered new %s server %s", server.kind, server.url)
        return server

    def get_or_create_credential(self, server_url: str, username: str) -> UserCredential:
        server = self.get_or_create_server(server_url)
        known = server.find_user(username) is not None
        credential = server.get_or_create_user(username)
        if not known:
            logger.info("Registered new user %s on %s", username, server.url)
        return credential

    def find_credential(self, server_url: str, username: str) -> UserCredential | None:
        return self._config.find_credential(server_url, username)

    def edit_credential(
        self,
        label: str,
        credential: UserCredential,
        default_username: str,
        batch_mode: bool,
        prompter: Prompter | None,
        on_invalid: InvalidCredentialCallback | None = None,
    ) -> None:
        """
        Complete a credential in place by asking for the missing values.

        Args:
            label: Server label used in the questions
            credential: Credential to complete
            default_username: Suggested username when the credential has none
            batch_mode: When True nothing can be asked and the edit fails
            prompter: Prompt engine (required unless batch_mode)
            on_invalid: Called with the username before the token is asked for

        Raises:
            IncompleteAuthenticationError: In batch mode
            PromptCancelledError: If the user aborts a prompt
        """
        if batch_mode or prompter is None:
            missing = "Git username" if not credential.username.strip() else "API token"
            raise IncompleteAuthenticationError(
                f"Running in batch mode and no {missing} found for {label}"
            )

        if not credential.username.strip():
            credential.username = prompter.ask(
                f"{label} username",
                default=default_username or self._config.default_username,
                validator=_require("Username"),
            ).strip()

        if on_invalid is not None:
            on_invalid(credential.username)

        credential.api_token = prompter.ask(
            f"API Token for {label}",
            validator=_require("API token"),
            hide_input=True,
        ).strip()

    def persist_credential(self, server_url: str, credential: UserCredential) -> None:
        """
        Store a credential under its server and save the store.

        Raises:
            CredentialStoreError: If the store cannot be written
        """
        server = self.get_or_create_server(server_url)
        existing = server.find_user(credential.username)
        if existing is None:
            server.users.append(credential)
        elif existing is not credential:
            server.users[server.users.index(existing)] = credential
        if not server.current_user:
            server.current_user = credential.username
        logger.debug(
            "Persisting credential %s (token %s) for %s",
            credential.username,
            mask_token(credential.api_token),
            server.url,
        )
        self.save()

    def pick_server(self, prompter: Prompter, message: str) -> HostingServer:
        """
        Let the user choose among the registered servers.

        With no registered server the user is asked for a new server URL.
        """
        servers = self.list_servers()
        if not servers:
            url = prompter.ask(message, validator=_validate_server_url)
            return self.get_or_create_server(url)
        if len(servers) == 1:
            return servers[0]

        current = self._config.current()
        urls = [server.url for server in servers]
        choice = prompter.choose(message, urls, default=current.url if current else urls[0])
        return self.get_or_create_server(choice)

    def pick_server_credential(
        self, server: HostingServer, prompter: Prompter, message: str
    ) -> UserCredential:
        """
        Ask for a username on server, returning its credential.

        Unknown usernames become new (token-less) credentials.
        """
        default = server.current_user
        if not default and server.users:
            default = server.users[0].username
        if not default:
            default = self._config.default_username
        if server.users:
            known = ", ".join(user.username for user in server.users)
            prompter.echo(f"Known users on {server.label()}: {known}")

        username = prompter.ask(message, default=default, validator=_require("Username")).strip()
        return self.get_or_create_credential(server.url, username)


class FileCredentialStore(BaseCredentialStore):
    """
    Credential store persisted as YAML.

    Example:
        ```python
        store = FileCredentialStore(Path("~/.gitprovision/gitAuth.yaml").expanduser())
        server = store.get_or_create_server("https://github.com")
        ```
    """

    def __init__(self, path: Path, default_kind: str = KIND_GITHUB) -> None:
        self.path = Path(path)
        super().__init__(self._read(), default_kind)

    def _read(self) -> AuthConfig:
        if not self.path.exists():
            return AuthConfig()
        try:
            with self.path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CredentialStoreError(
                f"Failed to load git auth configuration {self.path}: {e}"
            ) from e
        if data is not None and not isinstance(data, dict):
            raise CredentialStoreError(
                f"Failed to load git auth configuration {self.path}: expected a mapping"
            )
        return AuthConfig.from_dict(data)

    def load(self) -> AuthConfig:
        """Re-read the file, discarding unsaved changes."""
        self._config = self._read()
        return self._config

    def save(self) -> None:
        """
        Write the configuration atomically, readable by the owner only.

        Raises:
            CredentialStoreError: If the file cannot be written
        """
        content = yaml.safe_dump(self._config.to_dict(), sort_keys=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".gitAuth-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CredentialStoreError(
                f"Failed to store git auth configuration {self.path}: {e}"
            ) from e


class MemoryCredentialStore(BaseCredentialStore):
    """Credential store that never touches disk; counts its writes."""

    def __init__(self, config: AuthConfig | None = None, default_kind: str = KIND_GITHUB) -> None:
        super().__init__(config, default_kind)
        self.save_count = 0
        self.fail_on_save: Exception | None = None

    def save(self) -> None:
        if self.fail_on_save is not None:
            raise CredentialStoreError(
                f"Failed to store git auth configuration: {self.fail_on_save}"
            )
        self.save_count += 1

    def load(self) -> AuthConfig:
        return self._config


class CredentialEdit:
    """
    Scoped edit of one credential with explicit commit and rollback.

    Entering snapshots the credential. `commit()` persists it to the store;
    `rollback()` restores the snapshot in memory. Leaving the block with an
    exception before a commit rolls back.

    Example:
        ```python
        with CredentialEdit(store, server.url, credential) as edit:
            store.edit_credential(server.label(), credential, "", False, prompter)
            edit.commit()
        ```
    """

    def __init__(self, store: CredentialStore, server_url: str, credential: UserCredential) -> None:
        self.store = store
        self.server_url = normalize_url(server_url)
        self.credential = credential
        self.committed = False
        self._snapshot = (credential.username, credential.api_token)

    def commit(self) -> None:
        """
        Persist the edited credential.

        Raises:
            CredentialStoreError: If the store cannot be written
        """
        try:
            self.store.persist_credential(self.server_url, self.credential)
        except CredentialStoreError:
            raise
        except GitProvisionError as e:
            raise CredentialStoreError(f"Failed to store git auth configuration: {e.message}") from e
        except OSError as e:
            raise CredentialStoreError(f"Failed to store git auth configuration: {e}") from e
        self.committed = True

    def rollback(self) -> None:
        """Restore the credential to its state before the edit."""
        self.credential.username, self.credential.api_token = self._snapshot

    def __enter__(self) -> "CredentialEdit":
        return self

    def __exit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type is not None and not self.committed:
            self.rollback()
