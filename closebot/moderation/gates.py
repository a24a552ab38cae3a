"""Permission and linked pull request checks in front of state changes.

Both gates fail closed: when the forge cannot answer, nothing is changed.
They differ in what the commenter sees. A failed permission query is
silent; a failed linked pull request query asks the commenter to retry.
"""

import logging

from closebot.adapters.base import ForgeClient, ForgeError
from closebot.config import CommentTemplates, RepoPolicy
from closebot.models import GateResult, ItemKind

LOG = logging.getLogger("closebot.moderation.gates")


def post_comment(
    client: ForgeClient,
    kind: ItemKind,
    org: str,
    repo: str,
    number: int,
    body: str,
) -> bool:
    """Post body on the issue or pull request; log and return False on failure."""
    try:
        if kind == ItemKind.ISSUE:
            client.create_issue_comment(org, repo, number, body)
        else:
            client.create_pr_comment(org, repo, number, body)
    except ForgeError as e:
        LOG.error("%s/%s#%s: failed to post comment - %s", org, repo, number, e)
        return False
    return True


class PermissionGate:
    """Author may always act on own item; others need collaborator permission."""

    def __init__(self, client: ForgeClient, templates: CommentTemplates) -> None:
        self._client = client
        self._templates = templates

    def authorize(
        self,
        org: str,
        repo: str,
        number: int,
        author: str,
        commenter: str,
        kind: ItemKind,
        action: str,
    ) -> bool:
        if author == commenter:
            return True
        try:
            allowed = self._client.check_permission(org, repo, commenter)
        except ForgeError as e:
            LOG.warning(
                "%s/%s#%s: permission check for %s failed, ignoring /%s - %s",
                org,
                repo,
                number,
                commenter,
                action,
                e,
            )
            return False
        if allowed:
            return True
        LOG.info("%s/%s#%s: %s has no permission to %s", org, repo, number, commenter, action)
        template = (
            self._templates.no_permission_operate_issue
            if kind == ItemKind.ISSUE
            else self._templates.no_permission_operate_pr
        )
        post_comment(self._client, kind, org, repo, number, CommentTemplates.render(template, commenter, action))
        return False


class LinkedPRGate:
    """Issue /close requires a linked pull request when the policy says so."""

    def __init__(self, client: ForgeClient, templates: CommentTemplates) -> None:
        self._client = client
        self._templates = templates

    def may_close(self, policy: RepoPolicy, org: str, repo: str, number: int, commenter: str) -> GateResult:
        if not policy.need_issue_has_link_pull_requests:
            return GateResult.PROCEED
        try:
            count = self._client.get_issue_linked_pr_count(org, repo, number)
        except ForgeError as e:
            LOG.warning("%s/%s#%s: listing linked pull requests failed - %s", org, repo, number, e)
            body = CommentTemplates.render(self._templates.list_linking_pull_requests_failure, commenter)
            post_comment(self._client, ItemKind.ISSUE, org, repo, number, body)
            return GateResult.BLOCKED
        if count == 0:
            LOG.info("%s/%s#%s: no linked pull request, not closing", org, repo, number)
            body = CommentTemplates.render(self._templates.issue_needs_link_pr, commenter)
            post_comment(self._client, ItemKind.ISSUE, org, repo, number, body)
            return GateResult.BLOCKED
        return GateResult.PROCEED
