"""Turn a classified command into one state change on the forge."""

import logging

from closebot.adapters.base import ForgeClient, ForgeError
from closebot.config import RepoPolicy, StateNames
from closebot.models import Classification, Command, GateResult
from closebot.moderation.gates import LinkedPRGate, PermissionGate

LOG = logging.getLogger("closebot.moderation.dispatcher")


class ActionDispatcher:
    """Runs the gates for a command and performs at most one state change."""

    def __init__(
        self,
        client: ForgeClient,
        states: StateNames,
        permission_gate: PermissionGate,
        linked_pr_gate: LinkedPRGate,
    ) -> None:
        self._client = client
        self._states = states
        self._permission_gate = permission_gate
        self._linked_pr_gate = linked_pr_gate

    def dispatch(self, decision: Classification, policy: RepoPolicy) -> None:
        if decision.command is None:
            return
        action = decision.command.value
        if not self._permission_gate.authorize(
            decision.org, decision.repo, decision.number, decision.author, decision.commenter, decision.kind, action
        ):
            return

        if decision.command == Command.REOPEN:
            self._set_state(decision, self._states.opened)
            return

        if not decision.is_issue:
            self._set_state(decision, self._states.closed)
            return

        gate = self._linked_pr_gate.may_close(policy, decision.org, decision.repo, decision.number, decision.commenter)
        if gate == GateResult.PROCEED:
            self._set_state(decision, self._states.closed)

    def _set_state(self, decision: Classification, state: str) -> None:
        try:
            if decision.is_issue:
                self._client.update_issue_state(decision.org, decision.repo, decision.number, state)
            else:
                self._client.update_pr_state(decision.org, decision.repo, decision.number, state)
        except ForgeError as e:
            LOG.error(
                "%s/%s#%s: failed to set state %s on /%s by %s - %s",
                decision.org,
                decision.repo,
                decision.number,
                state,
                decision.command.value,
                decision.commenter,
                e,
            )
            return
        LOG.info(
            "%s/%s#%s: %s set to %s by %s",
            decision.org,
            decision.repo,
            decision.number,
            decision.kind.value,
            state,
            decision.commenter,
        )
