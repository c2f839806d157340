"""
Terminal output for Pureview.
"""

from __future__ import annotations

import json
from typing import Any

import click

from .models import PullRequestInfo, UserInfo


ROLE_LABELS = {
    "author": "authored by",
    "assignee": "assigned to",
}


def echo_info(message: str) -> None:
    click.secho(message, fg="yellow")


def echo_error(message: str) -> None:
    click.secho(message, fg="red", err=True)


def echo_success(message: str) -> None:
    click.secho(message, fg="green")


def format_pull_request(pr: PullRequestInfo) -> str:
    lines = [
        f"  {click.style(pr.title, bold=True)}",
        f"    {pr.repository} | by {pr.author}",
    ]
    if pr.assignees:
        lines.append(f"    Assignees: {pr.assignees}")
    lines.append(f"    {click.style(pr.link, fg='cyan')}")
    lines.append(f"    Opened: {pr.opened_at or 'unknown'} | Updated: {pr.updated_at or 'unknown'}")
    return "\n".join(lines)


def format_user_info(info: UserInfo, role: str) -> str:
    """Render one user's results as a text block."""
    label = ROLE_LABELS.get(role, role)
    shown = len(info.pull_requests)
    header = click.style(f"{info.username}", fg="green", bold=True)
    lines = [f"{'─' * 60}", f"{header}: open PRs {label} (showing {shown} of {info.total})", f"{'─' * 60}"]

    if not info.pull_requests:
        lines.append("  No open pull requests.")
    for pr in info.pull_requests:
        lines.append(format_pull_request(pr))
        lines.append("")
    return "\n".join(lines).rstrip()


def echo_results(results: dict[str, UserInfo], role: str) -> None:
    for info in results.values():
        click.echo(format_user_info(info, role))
        click.echo()


def results_to_json(results: dict[str, UserInfo]) -> str:
    return json.dumps({name: info.to_dict() for name, info in results.items()}, indent=2)


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))
