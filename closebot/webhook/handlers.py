"""Handle GitHub webhook events.

Only ``issue_comment`` deliveries with action ``created`` carry commands;
everything else is acknowledged and ignored.
"""

import hashlib
import hmac
import logging
from typing import Any, Dict

from closebot.config import StateNames
from closebot.models import Classification, CommentEvent, ItemKind
from closebot.moderation import CommentModerator

LOG = logging.getLogger("closebot.webhook.handlers")

# GitHub's issue states
_GITHUB_OPEN = "open"
_GITHUB_CLOSED = "closed"


def verify_signature(secret: str, body: bytes, signature_header: str) -> bool:
    """Check X-Hub-Signature-256 against the raw body.

    An empty secret disables verification.
    """
    if not secret:
        return True
    if not signature_header or not signature_header.startswith("sha256="):
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected.encode("ascii"), signature_header.encode("utf-8", "surrogateescape"))


def _local_state(state: str | None, states: StateNames) -> str | None:
    if state == _GITHUB_OPEN:
        return states.opened
    if state == _GITHUB_CLOSED:
        return states.closed
    return state


def parse_comment_event(event: str, payload: Dict[str, Any], states: StateNames) -> CommentEvent | None:
    """Build CommentEvent from an issue_comment payload; None for other deliveries."""
    if event != "issue_comment" or payload.get("action") != "created":
        return None
    comment_payload = payload.get("comment") or {}
    issue_payload = payload.get("issue") or {}
    repo_payload = payload.get("repository") or {}
    owner = repo_payload.get("owner") or {}
    commenter = (comment_payload.get("user") or {}).get("login")
    author = (issue_payload.get("user") or {}).get("login")
    number = issue_payload.get("number")
    kind = ItemKind.PULL_REQUEST if issue_payload.get("pull_request") else ItemKind.ISSUE
    return CommentEvent(
        org=owner.get("login"),
        repo=repo_payload.get("name"),
        number=int(number) if number is not None else None,
        comment=comment_payload.get("body"),
        state=_local_state(issue_payload.get("state"), states),
        author=author,
        commenter=commenter,
        kind=kind,
    )


def handle_github_event(
    moderator: CommentModerator,
    states: StateNames,
    event: str,
    payload: Dict[str, Any],
) -> Classification | None:
    """Handle a GitHub webhook event.

    Supported events:
    - issue_comment (action=created): /close on issues and pull requests, /reopen on issues.
    """
    comment_event = parse_comment_event(event, payload, states)
    if comment_event is None:
        LOG.debug("Ignoring %s event (action=%s)", event, payload.get("action"))
        return None
    return moderator.handle(comment_event)
