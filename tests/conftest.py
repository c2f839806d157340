from __future__ import annotations

import pytest

from pureview.config import ConfigStore


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / ".pure-config"


@pytest.fixture
def store(config_path):
    return ConfigStore(config_path)


def _make_item(login="testuser", repo="testuser/testrepo", number=1, **overrides):
    """A trimmed-down GitHub issue-search hit for a pull request."""
    item = {
        "url": f"https://api.github.com/repos/{repo}/issues/{number}",
        "repository_url": f"https://api.github.com/repos/{repo}",
        "html_url": f"https://github.com/{repo}/pull/{number}",
        "number": number,
        "title": f"PR {number}",
        "user": {"login": login},
        "state": "open",
        "assignee": None,
        "assignees": [],
        "milestone": None,
        "created_at": "2017-11-03T12:30:54Z",
        "updated_at": "2018-01-27T08:50:39Z",
        "pull_request": {
            "url": f"https://api.github.com/repos/{repo}/pulls/{number}",
            "html_url": f"https://github.com/{repo}/pull/{number}",
        },
    }
    item.update(overrides)
    return item


def _make_result(items, total=None):
    return {
        "total_count": len(items) if total is None else total,
        "incomplete_results": False,
        "items": items,
    }


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def make_result():
    return _make_result
