from __future__ import annotations

import json

import click

from pureview.display import format_user_info, results_to_json
from pureview.models import PullRequestInfo, UserInfo


def _info() -> UserInfo:
    return UserInfo(
        username="amy",
        total=12,
        pull_requests=[
            PullRequestInfo(
                author="amy",
                repository="acme/widget",
                link="https://github.com/acme/widget/pull/3",
                title="Fix gears",
                opened_at="2024-01-01T00:00:00Z",
                updated_at="2024-01-02T00:00:00Z",
                assignees="bob, cat",
            )
        ],
    )


def test_format_user_info():
    text = click.unstyle(format_user_info(_info(), "author"))

    assert "amy: open PRs authored by (showing 1 of 12)" in text
    assert "Fix gears" in text
    assert "acme/widget | by amy" in text
    assert "Assignees: bob, cat" in text
    assert "https://github.com/acme/widget/pull/3" in text


def test_format_user_info_without_prs():
    text = click.unstyle(format_user_info(UserInfo(username="zed", total=0), "assignee"))

    assert "assigned to (showing 0 of 0)" in text
    assert "No open pull requests." in text


def test_results_to_json():
    data = json.loads(results_to_json({"amy": _info()}))
    assert data["amy"]["pull_requests"][0]["repository"] == "acme/widget"
