"""
Repository provisioning resolver.

Turns partial input (`RepositoryRequestOptions`, optionally a pre-supplied
server and credential) into a fully resolved `ProvisioningResult` through a
fixed sequence of stages:

    Start -> ServerResolved -> CredentialResolved -> ProviderBound
          -> OwnerResolved -> NameResolved -> Assembled

Every stage is a function `(state, collaborators) -> state` with a batch path
(no prompts, defaults or loud failure) and an interactive path. A stage that
raises ends the pipeline; no partial result is ever returned.

Example:
    ```python
    from gitprovision import FileCredentialStore, RepositoryRequestOptions
    from gitprovision.resolver import pick_new_repository

    store = FileCredentialStore(settings.config_path)
    options = RepositoryRequestOptions(repo_name="myapp")
    result = pick_new_repository(True, options, store=store)
    repo = result.create_repository()
    ```
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from gitprovision.auth import CredentialEdit, CredentialStore
from gitprovision.config import Settings
from gitprovision.exceptions import (
    ConfigurationError,
    IncompleteAuthenticationError,
    NoCredentialsConfiguredError,
    NoServersConfiguredError,
    RepositoryNameRequiredError,
)
from gitprovision.logging import get_logger, log_resolution_stage
from gitprovision.prompts import ClickPrompter, Prompter
from gitprovision.providers import GitProvider, access_token_hint, create_provider
from gitprovision.types.auth import HostingServer, UserCredential
from gitprovision.types.repos import ProvisioningResult, RepositoryRequestOptions

logger = get_logger("resolver")

# Repository name used in batch mode when the caller gives no default
DEFAULT_BATCH_REPO_NAME = "dummy"

ProviderFactory = Callable[[HostingServer, UserCredential, Settings], GitProvider]
TokenHint = Callable[[HostingServer, str], str]


@dataclass(frozen=True)
class ResolutionState:
    """Inputs of one resolution plus everything resolved so far."""

    batch_mode: bool
    options: RepositoryRequestOptions
    default_repo_name: str = ""
    allow_existing_repository: bool = False
    stage: str = "Start"
    server: HostingServer | None = None
    credential: UserCredential | None = None
    provider: GitProvider | None = None
    owner: str = ""
    repo_name: str = ""


@dataclass
class Collaborators:
    """External services the stages call."""

    store: CredentialStore
    prompter: Prompter | None = None
    provider_factory: ProviderFactory = create_provider
    token_hint: TokenHint = access_token_hint
    settings: Settings = field(default_factory=Settings)

    def require_prompter(self) -> Prompter:
        if self.prompter is None:
            raise ConfigurationError("Interactive resolution requires a prompter")
        return self.prompter


def _notify(state: ResolutionState, collaborators: Collaborators, message: str) -> None:
    logger.info(message)
    if not state.batch_mode and collaborators.prompter is not None:
        collaborators.prompter.echo(message)


def resolve_server(state: ResolutionState, collaborators: Collaborators) -> ResolutionState:
    """Pick the hosting server; records its URL back into the options."""
    options = state.options
    store = collaborators.store

    if state.server is not None:
        server = state.server
    elif options.server_url:
        server = store.get_or_create_server(options.server_url, options.server_kind)
    elif state.batch_mode:
        config = store.config()
        if not config.servers:
            raise NoServersConfiguredError()
        server = config.current()
    else:
        server = store.pick_server(collaborators.require_prompter(), "Which Git service?")

    if state.server is None:
        options.server_url = server.url

    _notify(state, collaborators, f"Using Git provider {server.description()}")
    return replace(state, server=server, stage="ServerResolved")


def resolve_credential(state: ResolutionState, collaborators: Collaborators) -> ResolutionState:
    """
    Pick the user credential on the resolved server.

    An invalid credential first receives the token from the options, then
    goes through the edit flow.

    Raises:
        NoCredentialsConfiguredError: In batch mode when the server has no users
        IncompleteAuthenticationError: If the credential is still invalid
        CredentialStoreError: If the edited credential cannot be persisted
    """
    server = state.server
    options = state.options
    store = collaborators.store

    if state.credential is not None:
        credential = state.credential
    elif options.username:
        credential = store.get_or_create_credential(server.url, options.username)
    elif state.batch_mode:
        if not server.users:
            raise NoCredentialsConfiguredError(server.url)
        credential = None
        if server.current_user:
            credential = store.find_credential(server.url, server.current_user)
        if credential is None:
            credential = server.users[0]
    else:
        credential = store.pick_server_credential(
            server, collaborators.require_prompter(), "Git user name?"
        )

    if credential.is_invalid() and options.api_token:
        credential.api_token = options.api_token

    if credential.is_invalid():
        _edit_credential(state, collaborators, server, credential)

    return replace(state, credential=credential, stage="CredentialResolved")


def _edit_credential(
    state: ResolutionState,
    collaborators: Collaborators,
    server: HostingServer,
    credential: UserCredential,
) -> None:
    store = collaborators.store

    def show_token_hint(username: str) -> None:
        if collaborators.prompter is not None:
            collaborators.prompter.echo(collaborators.token_hint(server, username))

    with CredentialEdit(store, server.url, credential) as edit:
        store.edit_credential(
            server.label(),
            credential,
            "",
            state.batch_mode,
            collaborators.prompter,
            show_token_hint,
        )
        if credential.is_valid():
            edit.commit()
        elif collaborators.settings.persist_incomplete_credentials:
            logger.warning(
                "Persisting credential for %s on %s although it has no valid access token",
                credential.username,
                server.url,
            )
            edit.commit()
        else:
            logger.warning(
                "Discarding incomplete credential for %s on %s",
                credential.username,
                server.url,
            )
            edit.rollback()

    if credential.is_invalid():
        raise IncompleteAuthenticationError()


def bind_provider(state: ResolutionState, collaborators: Collaborators) -> ResolutionState:
    """
    Build the hosting provider client for the resolved server and credential.

    Raises:
        ProviderConstructionError: If no client can be built for the pair
    """
    server = state.server
    credential = state.credential

    repo_name = state.options.repo_name or state.default_repo_name
    target = f"repository {repo_name}" if repo_name else "a repository"
    _notify(
        state,
        collaborators,
        f"About to create {target} on server {server.url} with user {credential.username}",
    )

    provider = collaborators.provider_factory(server, credential, collaborators.settings)
    return replace(state, provider=provider, stage="ProviderBound")


def resolve_owner(state: ResolutionState, collaborators: Collaborators) -> ResolutionState:
    """Pick the namespace owning the repository, defaulting to the user."""
    username = state.credential.username

    if state.options.owner:
        owner = state.options.owner
    elif state.batch_mode:
        owner = username
    else:
        owner = pick_organisation(
            state.provider, username, collaborators.require_prompter()
        ) or username

    return replace(state, owner=owner, stage="OwnerResolved")


def pick_organisation(provider: GitProvider, username: str, prompter: Prompter) -> str:
    """
    Let the user choose between their own namespace and their organisations.

    Returns an empty string when the user has no organisations.
    """
    organisations = [org for org in provider.list_organizations() if org and org != username]
    if not organisations:
        return ""
    choices: Sequence[str] = [username, *sorted(organisations)]
    return prompter.choose("Which organisation do you want to use?", choices, default=username)


def resolve_repo_name(state: ResolutionState, collaborators: Collaborators) -> ResolutionState:
    """
    Pick the repository name.

    Raises:
        RepositoryNameRequiredError: If the resolved name is blank
        PromptCancelledError: If the user aborts the prompt
    """
    if state.options.repo_name:
        repo_name = state.options.repo_name
    elif state.batch_mode:
        repo_name = state.default_repo_name or DEFAULT_BATCH_REPO_NAME
    else:
        repo_name = ask_repo_name(state, collaborators.require_prompter())

    if not repo_name.strip():
        raise RepositoryNameRequiredError("No repository name specified")

    return replace(state, repo_name=repo_name, stage="NameResolved")


def ask_repo_name(state: ResolutionState, prompter: Prompter) -> str:
    """Prompt for a repository name until the provider accepts it."""
    provider = state.provider
    owner = state.owner

    def validator(value: str) -> None:
        if not value.strip():
            raise RepositoryNameRequiredError()
        if state.allow_existing_repository:
            return
        provider.validate_repository_name(owner, value)

    return prompter.ask(
        "Enter the new repository name",
        default=state.default_repo_name,
        validator=validator,
    )


def assemble(state: ResolutionState, collaborators: Collaborators) -> ProvisioningResult:
    """Join owner and name with the provider's naming convention."""
    full_name = state.provider.qualified_name(state.owner, state.repo_name)
    _notify(state, collaborators, f"Resolved repository {full_name}")
    return ProvisioningResult(
        owner=state.owner,
        repo_name=state.repo_name,
        full_name=full_name,
        private_repo=state.options.private,
        credential=state.credential,
        server=state.server,
        provider=state.provider,
    )


STAGES: tuple[Callable[[ResolutionState, Collaborators], ResolutionState], ...] = (
    resolve_server,
    resolve_credential,
    bind_provider,
    resolve_owner,
    resolve_repo_name,
)


def resolve(state: ResolutionState, collaborators: Collaborators) -> ProvisioningResult:
    """
    Run every stage in order and assemble the result.

    A provider bound before a later stage fails is closed before the error
    propagates.
    """
    try:
        for stage in STAGES:
            state = stage(state, collaborators)
            log_resolution_stage(
                state.stage,
                server=state.server.url if state.server else "",
                username=state.credential.username if state.credential else "",
                owner=state.owner,
                repo_name=state.repo_name,
            )
    except Exception:
        if state.provider is not None:
            state.provider.close()
        raise

    result = assemble(state, collaborators)
    log_resolution_stage("Assembled", full_name=result.full_name, private=result.private_repo)
    return result


def pick_new_or_existing_repository(
    batch_mode: bool,
    options: RepositoryRequestOptions,
    server: HostingServer | None = None,
    credential: UserCredential | None = None,
    allow_existing_repository: bool = False,
    *,
    store: CredentialStore,
    prompter: Prompter | None = None,
    default_repo_name: str = "",
    provider_factory: ProviderFactory | None = None,
    settings: Settings | None = None,
) -> ProvisioningResult:
    """
    Resolve the parameters of a repository to create or reuse.

    Args:
        batch_mode: Never prompt; apply defaults or fail
        options: Caller hints; `server_url` is updated with the chosen server
        server: Pre-supplied server, used unchanged
        credential: Pre-supplied credential, used unchanged unless invalid
        allow_existing_repository: Skip provider-side name validation
        store: Credential store holding servers and credentials
        prompter: Prompt engine (default: a ClickPrompter in interactive mode)
        default_repo_name: Suggested repository name
        provider_factory: Builds the provider client (default: create_provider)
        settings: Settings (default: built-in defaults)

    Returns:
        The fully populated ProvisioningResult

    Raises:
        GitProvisionError: From whichever stage failed
    """
    if prompter is None and not batch_mode:
        prompter = ClickPrompter()

    collaborators = Collaborators(
        store=store,
        prompter=prompter,
        provider_factory=provider_factory or create_provider,
        settings=settings or Settings(),
    )
    state = ResolutionState(
        batch_mode=batch_mode,
        options=options,
        default_repo_name=default_repo_name,
        allow_existing_repository=allow_existing_repository,
        server=server,
        credential=credential,
    )
    return resolve(state, collaborators)


def pick_new_repository(
    batch_mode: bool,
    options: RepositoryRequestOptions,
    server: HostingServer | None = None,
    credential: UserCredential | None = None,
    **kwargs,
) -> ProvisioningResult:
    """Like pick_new_or_existing_repository, rejecting names already taken."""
    return pick_new_or_existing_repository(
        batch_mode, options, server, credential, False, **kwargs
    )
