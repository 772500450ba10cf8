"""Command line interface: resolve, then create or reuse, a repository."""

import logging
from pathlib import Path

import click

from gitprovision.auth import FileCredentialStore
from gitprovision.config import Settings
from gitprovision.exceptions import GitProvisionError, NotFoundError
from gitprovision.logging import configure_logging
from gitprovision.prompts import ClickPrompter
from gitprovision.providers import create_provider
from gitprovision.resolver import pick_new_or_existing_repository
from gitprovision.types.repos import GitRepository, ProvisioningResult, RepositoryRequestOptions


def _load_settings(config_path: Path | None) -> Settings:
    try:
        settings = Settings.from_env()
    except GitProvisionError as e:
        raise click.ClickException(e.message) from e
    if config_path is not None:
        settings.config_path = config_path
    return settings


def _create_or_reuse(result: ProvisioningResult, allow_existing: bool) -> tuple[GitRepository, bool]:
    """Return the repository and whether it was created by this call."""
    if allow_existing:
        try:
            return result.get_repository(), False
        except NotFoundError:
            pass
    return result.create_repository(), True


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Credential store file (default: $GITPROVISION_CONFIG or ~/.gitprovision/gitAuth.yaml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log resolution stages and HTTP traffic.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Provision repositories on GitHub, GitLab and Gitea servers."""
    if verbose:
        configure_logging(level=logging.DEBUG)
    ctx.obj = _load_settings(config_path)


@main.command("create")
@click.option("--server-url", default="", help="Git server URL, e.g. https://github.com.")
@click.option(
    "--kind",
    "server_kind",
    type=click.Choice(["github", "gitlab", "gitea"]),
    default=None,
    help="Hosting kind of a server not yet known (guessed from the URL otherwise).",
)
@click.option("--username", default="", help="Git user name.")
@click.option("--token", "api_token", default="", envvar="GITPROVISION_TOKEN", help="API access token.")
@click.option("--owner", default="", help="User or organisation owning the repository.")
@click.option("--name", "repo_name", default="", help="Repository name.")
@click.option("--default-name", default="", help="Repository name suggested when prompting.")
@click.option("--private", is_flag=True, help="Create a private repository.")
@click.option(
    "--batch/--interactive",
    "batch_mode",
    default=None,
    help="Never prompt (default: $GITPROVISION_BATCH_MODE).",
)
@click.option(
    "--allow-existing",
    is_flag=True,
    help="Reuse the repository when it already exists.",
)
@click.pass_obj
def create_cmd(
    settings: Settings,
    server_url: str,
    server_kind: str | None,
    username: str,
    api_token: str,
    owner: str,
    repo_name: str,
    default_name: str,
    private: bool,
    batch_mode: bool | None,
    allow_existing: bool,
) -> None:
    """Create a repository, asking for whatever is missing.

    Examples:

        # Everything known up front
        gitprovision create --batch --server-url https://github.com \\
            --username alice --name myapp

        # Pick server, user, organisation and name interactively
        gitprovision create
    """
    if batch_mode is None:
        batch_mode = settings.batch_mode

    options = RepositoryRequestOptions(
        server_url=server_url,
        server_kind=server_kind or "",
        username=username,
        api_token=api_token,
        owner=owner,
        repo_name=repo_name,
        private=private,
    )

    try:
        store = FileCredentialStore(settings.config_path, settings.default_kind)
        result = pick_new_or_existing_repository(
            batch_mode,
            options,
            allow_existing_repository=allow_existing,
            store=store,
            prompter=None if batch_mode else ClickPrompter(),
            default_repo_name=default_name,
            provider_factory=create_provider,
            settings=settings,
        )
        with result.provider:
            repo, created = _create_or_reuse(result, allow_existing)
    except GitProvisionError as e:
        raise click.ClickException(e.message) from e

    verb = "Created" if created else "Using existing"
    click.echo(f"{verb} repository {repo.full_name or result.full_name}", err=True)
    click.echo(repo.clone_url or repo.html_url)


@main.command("servers")
@click.pass_obj
def servers_cmd(settings: Settings) -> None:
    """List configured Git servers and their users.

    The current server and each server's current user are marked with *.
    """
    try:
        store = FileCredentialStore(settings.config_path, settings.default_kind)
    except GitProvisionError as e:
        raise click.ClickException(e.message) from e

    config = store.config()
    if not config.servers:
        click.echo("No Git servers are configured.", err=True)
        return

    current = config.current()
    for server in config.servers:
        marker = "*" if server is current else " "
        click.echo(f"{marker} {server.url} ({server.kind or 'unknown'}) {server.name}".rstrip())
        for user in server.users:
            user_marker = "*" if user.username == server.current_user else " "
            status = "" if user.is_valid() else " [no token]"
            click.echo(f"    {user_marker} {user.username}{status}")
