"""
Fan-out of per-user PR searches.

One search runs per username, all concurrently; the first failure fails the
whole fetch and no partial results are returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from .github import ASSIGNEE, AUTHOR, GitHubClient, check_username
from .models import UserInfo, build_user_info

logger = logging.getLogger(__name__)


async def gather_user_info(
    client: GitHubClient,
    usernames: Iterable[str],
    role: str,
) -> dict[str, UserInfo]:
    """
    Search PRs for every username concurrently.

    Args:
        client: GitHub client shared by all searches
        usernames: Logins to search for; duplicates are searched once
        role: "author" or "assignee"

    Returns:
        Mapping of username to UserInfo, in input order.
    """
    # dict.fromkeys keeps first-seen order
    users = list(dict.fromkeys(usernames))
    if not users:
        return {}
    for username in users:
        check_username(username)

    # Workers share client.session and only read its headers; nothing mutates
    # it while a fetch is in flight.
    async def fetch_one(username: str) -> UserInfo:
        result = await asyncio.to_thread(client.search_pull_requests, role, username)
        info = build_user_info(username, result)
        logger.debug("%s %s: %d of %d PRs", role, username, len(info.pull_requests), info.total)
        return info

    results = await asyncio.gather(*(fetch_one(u) for u in users))
    return dict(zip(users, results))


def fetch_for_users(
    client: GitHubClient,
    usernames: Iterable[str],
    role: str,
) -> dict[str, UserInfo]:
    return asyncio.run(gather_user_info(client, usernames, role))


def fetch_for_authors(client: GitHubClient, usernames: Iterable[str]) -> dict[str, UserInfo]:
    """Open PRs authored by each user."""
    return fetch_for_users(client, usernames, AUTHOR)


def fetch_for_assignees(client: GitHubClient, usernames: Iterable[str]) -> dict[str, UserInfo]:
    """Open PRs assigned to each user."""
    return fetch_for_users(client, usernames, ASSIGNEE)
