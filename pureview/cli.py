"""
Pureview CLI - List open GitHub pull requests by user.

Commands:
    auth      - Authenticate with GitHub and save the credentials
    prs       - Show open PRs authored by or assigned to users
    user      - Show a GitHub user's profile
    alias     - Manage username aliases (get/set/delete)
    config    - Manage stored configuration (get/set/delete)
"""

from __future__ import annotations

import logging
import sys

import click
from dotenv import load_dotenv

# Load .env so PUREVIEW_CONFIG can be set per directory
load_dotenv()

from . import __version__
from .aggregate import fetch_for_assignees, fetch_for_authors
from .alias import AliasResolver
from .config import ConfigStore
from .display import (
    echo_error,
    echo_info,
    echo_json,
    echo_results,
    echo_success,
    results_to_json,
)
from .github import ASSIGNEE, AUTHOR, GitHubAPIError, GitHubClient


PASSWORD_WARNING = """\
!!!!!!!!!
Authentication with a password may fail if your account utilizes 2FA.
It is recommended that you instead generate and use a new Personal Access Token (PAT).
More information on PATs can be found here: https://github.com/blog/1509-personal-api-tokens
!!!!!!!!!
"""


def _authenticate(client: GitHubClient, username: str, secret: str) -> None:
    try:
        client.authenticate(username, secret)
    except GitHubAPIError as e:
        raise click.ClickException(str(e))


def _apply_inline_auth(
    client: GitHubClient,
    username: str | None,
    password: str | None,
    token: str | None,
) -> None:
    """Authenticate from per-command flags before running the command."""
    if not username and not password and not token:
        return
    if password and token:
        echo_error("You must specify exactly one of either password or token")
        sys.exit(1)
    if username and password:
        echo_info(PASSWORD_WARNING)
        _authenticate(client, username, password)
    elif username and token:
        _authenticate(client, username, token)
    else:
        echo_error("If you provide a username, you must specify exactly one of either password or token")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Pureview - a cli-tool to display open pull requests by user."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)


def _store(ctx: click.Context) -> ConfigStore:
    obj = ctx.ensure_object(dict)
    if "store" not in obj:
        obj["store"] = ConfigStore()
    return obj["store"]


# ---------------------------------------------------------------------------
# auth
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.option("-p", "--password", help="Authenticate with a password")
@click.option("-t", "--token", help="A Personal Access Token to use for authentication")
@click.pass_context
def auth(ctx: click.Context, username: str, password: str | None, token: str | None):
    """Authenticate with GitHub and save the credentials for future requests.

    Without --password or --token you are prompted for a token.
    """
    if password and token:
        echo_error("You must specify exactly one of either password or token")
        sys.exit(1)

    if password:
        echo_info(PASSWORD_WARNING)
        secret = password
    else:
        secret = token or click.prompt("Personal Access Token", hide_input=True)

    client = GitHubClient(_store(ctx))
    _authenticate(client, username, secret)
    echo_success("Authenticated successfully!")


# ---------------------------------------------------------------------------
# prs
# ---------------------------------------------------------------------------


@main.command()
@click.argument("users", nargs=-1, required=True)
@click.option("--author", is_flag=True, help="PRs authored by the users (default)")
@click.option("--assignee", is_flag=True, help="PRs assigned to the users")
@click.option("--both", is_flag=True, help="Both authored and assigned PRs")
@click.option("-u", "--username", help="Authenticate as this user for this command")
@click.option("-p", "--password", help="Password for --username")
@click.option("-t", "--token", help="Personal Access Token for --username")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def prs(
    ctx: click.Context,
    users: tuple[str, ...],
    author: bool,
    assignee: bool,
    both: bool,
    username: str | None,
    password: str | None,
    token: str | None,
    as_json: bool,
):
    """Show open pull requests for USERS.

    USERS may be GitHub logins or alias names; aliases expand to their members.

    Examples:

        pureview prs octocat                # PRs authored by octocat
        pureview prs team --assignee        # PRs assigned to members of alias "team"
        pureview prs octocat hubot --both   # Authored and assigned
    """
    store = _store(ctx)
    client = GitHubClient(store)
    _apply_inline_auth(client, username, password, token)

    usernames = AliasResolver(store).expand(users)
    if both or (author and assignee):
        roles = [AUTHOR, ASSIGNEE]
    elif assignee:
        roles = [ASSIGNEE]
    else:
        roles = [AUTHOR]
    fetchers = {AUTHOR: fetch_for_authors, ASSIGNEE: fetch_for_assignees}

    results = {}
    try:
        for r in roles:
            results[r] = fetchers[r](client, usernames)
    except GitHubAPIError as e:
        raise click.ClickException(str(e))

    if as_json:
        if len(roles) == 1:
            click.echo(results_to_json(results[roles[0]]))
        else:
            echo_json({r: {name: info.to_dict() for name, info in results[r].items()} for r in roles})
        return

    if not client.is_authenticated:
        echo_info("Not authenticated; results are limited to public repositories. Run: pureview auth <username>")
    for r in roles:
        echo_results(results[r], r)


# ---------------------------------------------------------------------------
# user
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def user(ctx: click.Context, username: str, as_json: bool):
    """Show the GitHub profile of USERNAME."""
    client = GitHubClient(_store(ctx))
    try:
        profile = client.get_user(username)
    except GitHubAPIError as e:
        raise click.ClickException(str(e))

    if as_json:
        echo_json(profile)
        return

    click.echo(f"{profile.get('login', username)} ({profile.get('name') or 'no name'})")
    click.echo(f"  Profile: {profile.get('html_url', '')}")
    click.echo(f"  Public repos: {profile.get('public_repos', 0)}")


# ---------------------------------------------------------------------------
# alias
# ---------------------------------------------------------------------------


@main.group(name="alias")
def alias_group():
    """Manage username aliases."""
    pass


@alias_group.command("get")
@click.argument("name", required=False)
@click.pass_context
def alias_get(ctx: click.Context, name: str | None):
    """Show one alias, or all aliases when NAME is omitted."""
    aliases = AliasResolver(_store(ctx))
    if name is None:
        echo_json(aliases.get_alias())
        return

    members = aliases.get_alias(name)
    if not members:
        echo_error(f"No alias named '{name}'")
        sys.exit(1)
    click.echo(" ".join(members))


@alias_group.command("set")
@click.argument("name")
@click.argument("users", nargs=-1, required=True)
@click.pass_context
def alias_set(ctx: click.Context, name: str, users: tuple[str, ...]):
    """Set alias NAME to the given USERS, replacing any existing members."""
    AliasResolver(_store(ctx)).set_alias(name, users)
    echo_success(f"Alias '{name}' set to: {' '.join(users)}")


@alias_group.command("delete")
@click.argument("name", required=False)
@click.option("--yes", is_flag=True, help="Do not ask before deleting every alias")
@click.pass_context
def alias_delete(ctx: click.Context, name: str | None, yes: bool):
    """Delete alias NAME, or every alias when NAME is omitted."""
    if name is None and not yes:
        click.confirm("Delete all aliases?", abort=True)
    AliasResolver(_store(ctx)).delete_alias(name)
    echo_success(f"Deleted alias '{name}'" if name else "Deleted all aliases")


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@main.group(name="config")
def config_group():
    """Manage stored configuration."""
    pass


@config_group.command("get")
@click.argument("key", required=False)
@click.pass_context
def config_get(ctx: click.Context, key: str | None):
    """Show one config value, or all of them when KEY is omitted."""
    store = _store(ctx)
    if key is None:
        echo_json(store.get())
        return

    if not store.has_key(key):
        echo_error(f"Config key not set: {key}")
        sys.exit(1)
    click.echo(store.get(key))


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str):
    """Set config KEY to VALUE."""
    _store(ctx).set(key, value)
    echo_success(f"Set {key}")


@config_group.command("delete")
@click.argument("key", required=False)
@click.option("--yes", is_flag=True, help="Do not ask before clearing the whole config")
@click.pass_context
def config_delete(ctx: click.Context, key: str | None, yes: bool):
    """Delete config KEY, or the whole config when KEY is omitted."""
    if key is None and not yes:
        click.confirm("Delete the entire configuration?", abort=True)
    _store(ctx).delete(key)
    echo_success(f"Deleted {key}" if key else "Cleared configuration")


if __name__ == "__main__":
    main()
