"""
Display records built from GitHub search results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


NO_TITLE = "NO TITLE"


@dataclass
class PullRequestInfo:
    """One open pull request, trimmed down for display."""
    author: str
    repository: str  # "owner/name"
    link: str
    title: str
    opened_at: str | None
    updated_at: str | None
    assignees: str = ""  # comma-separated logins

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class UserInfo:
    """Search results for one user. total may exceed len(pull_requests)."""
    username: str
    total: int
    pull_requests: list[PullRequestInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "total": self.total,
            "pull_requests": [pr.to_dict() for pr in self.pull_requests],
        }


def repository_name(repository_url: str) -> str:
    """Turn ``https://api.github.com/repos/owner/name`` into ``owner/name``."""
    parts = [part for part in repository_url.split("/") if part]
    return "/".join(parts[-2:])


def parse_pull_request(item: dict[str, Any]) -> PullRequestInfo:
    """
    Project a raw search item into a PullRequestInfo.

    Only ``user.login``, ``repository_url`` and ``pull_request.html_url`` are
    required; everything else falls back to a default.
    """
    assignees = item.get("assignees") or []
    opened_at = item.get("created_at")

    return PullRequestInfo(
        author=item["user"]["login"],
        repository=repository_name(item["repository_url"]),
        link=item["pull_request"]["html_url"],
        title=item.get("title") or NO_TITLE,
        opened_at=opened_at,
        updated_at=item.get("updated_at") or opened_at,
        assignees=", ".join(a["login"] for a in assignees if a and a.get("login")),
    )


def build_user_info(username: str, result: dict[str, Any]) -> UserInfo:
    items = result.get("items") or []
    return UserInfo(
        username=username,
        total=int(result.get("total_count", 0)),
        pull_requests=[parse_pull_request(item) for item in items],
    )
