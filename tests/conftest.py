"""Shared fixtures: bot config, a mocked forge client and an event factory."""

from typing import Callable
from unittest.mock import Mock

import pytest

from closebot.adapters.base import ForgeClient
from closebot.config import BotConfig, RepoPolicy, StateNames
from closebot.models import CommentEvent, ItemKind


@pytest.fixture
def bot_config() -> BotConfig:
    """owner/linked requires a linked PR to close issues; the rest of owner does not."""
    return BotConfig(
        states=StateNames(opened="opened", closed="closed"),
        config_items=[
            RepoPolicy(repos=["owner/linked"], need_issue_has_link_pull_requests=True),
            RepoPolicy(repos=["owner"], excluded_repos=["owner/private"]),
        ],
    )


@pytest.fixture
def client() -> Mock:
    """Forge client where every call succeeds and the commenter has no permission."""
    cli = Mock(spec=ForgeClient)
    cli.check_permission.return_value = False
    cli.get_issue_linked_pr_count.return_value = 0
    return cli


@pytest.fixture
def make_event() -> Callable[..., CommentEvent]:
    """Factory: '/close' by the issue author on an open issue in owner/repo."""

    def _make(**overrides: object) -> CommentEvent:
        fields: dict = {
            "org": "owner",
            "repo": "repo",
            "number": 7,
            "comment": "/close",
            "state": "opened",
            "author": "alice",
            "commenter": "alice",
            "kind": ItemKind.ISSUE,
        }
        fields.update(overrides)
        return CommentEvent(**fields)

    return _make
