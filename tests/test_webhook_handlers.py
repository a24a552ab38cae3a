"""Tests for webhook payload parsing, signature check and dispatch."""

import hashlib
import hmac
from unittest.mock import Mock

import pytest

from closebot.config import StateNames
from closebot.models import ItemKind
from closebot.webhook.handlers import handle_github_event, parse_comment_event, verify_signature

STATES = StateNames(opened="opened", closed="closed")


def _payload(body: str = "/close", state: str = "open", pull_request: bool = False) -> dict:
    issue = {"number": 12, "state": state, "user": {"login": "alice"}}
    if pull_request:
        issue["pull_request"] = {"url": "https://api.github.com/repos/owner/repo/pulls/12"}
    return {
        "action": "created",
        "comment": {"id": 1, "body": body, "user": {"login": "bob"}},
        "issue": issue,
        "repository": {"name": "repo", "full_name": "owner/repo", "owner": {"login": "owner"}},
    }


class TestParseCommentEvent:
    def test_issue_comment(self) -> None:
        event = parse_comment_event("issue_comment", _payload(), STATES)
        assert event is not None
        assert event.org == "owner"
        assert event.repo == "repo"
        assert event.number == 12
        assert event.comment == "/close"
        assert event.state == "opened"
        assert event.author == "alice"
        assert event.commenter == "bob"
        assert event.kind == ItemKind.ISSUE
        assert event.missing_fields() == []

    def test_pull_request_comment(self) -> None:
        event = parse_comment_event("issue_comment", _payload(pull_request=True), STATES)
        assert event.kind == ItemKind.PULL_REQUEST

    def test_closed_state_mapped(self) -> None:
        event = parse_comment_event("issue_comment", _payload(state="closed"), STATES)
        assert event.state == "closed"

    def test_open_mapped_to_configured_name(self) -> None:
        event = parse_comment_event("issue_comment", _payload(), StateNames(opened="open", closed="done"))
        assert event.state == "open"
        event = parse_comment_event("issue_comment", _payload(state="closed"), StateNames(opened="open", closed="done"))
        assert event.state == "done"

    def test_other_actions_and_events_ignored(self) -> None:
        edited = {**_payload(), "action": "edited"}
        assert parse_comment_event("issue_comment", edited, STATES) is None
        assert parse_comment_event("issues", _payload(), STATES) is None
        assert parse_comment_event("pull_request_review_comment", _payload(), STATES) is None

    def test_sparse_payload_gives_missing_fields(self) -> None:
        event = parse_comment_event("issue_comment", {"action": "created"}, STATES)
        assert event is not None
        assert event.missing_fields() == ["org", "repo", "number", "comment", "state", "author", "commenter"]


class TestVerifySignature:
    def test_valid_signature(self) -> None:
        body = b'{"action": "created"}'
        sig = "sha256=" + hmac.new(b"s3cret", body, hashlib.sha256).hexdigest()
        assert verify_signature("s3cret", body, sig) is True

    @pytest.mark.parametrize("header", ["", "sha1=abc", "sha256=deadbeef", "sha256=\xe9abc", "sha256=\u00e9\u4e2d"])
    def test_invalid_signature(self, header: str) -> None:
        assert verify_signature("s3cret", b"{}", header) is False

    def test_no_secret_accepts(self) -> None:
        assert verify_signature("", b"{}", "") is True


def test_handle_github_event_passes_event_to_moderator() -> None:
    moderator = Mock()
    moderator.handle.return_value = "result"
    assert handle_github_event(moderator, STATES, "issue_comment", _payload(pull_request=True)) == "result"
    moderator.handle.assert_called_once()
    event = moderator.handle.call_args[0][0]
    assert event.kind == ItemKind.PULL_REQUEST
    assert event.commenter == "bob"


def test_handle_github_event_ignores_other_events() -> None:
    moderator = Mock()
    assert handle_github_event(moderator, STATES, "push", {"ref": "refs/heads/main"}) is None
    moderator.handle.assert_not_called()
