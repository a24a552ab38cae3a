"""Full /close and /reopen chain for one comment event."""

import logging

from closebot.adapters.base import ForgeClient
from closebot.config import BotConfig
from closebot.models import Classification, CommentEvent
from closebot.moderation.classifier import EventClassifier
from closebot.moderation.dispatcher import ActionDispatcher
from closebot.moderation.gates import LinkedPRGate, PermissionGate


class CommentModerator:
    """Resolves policy, classifies, gates and dispatches.

    Holds only the read-only config and the client, so one instance can
    serve concurrent deliveries.
    """

    def __init__(self, config: BotConfig, client: ForgeClient, log: logging.Logger | None = None) -> None:
        self._config = config
        self._log = log or logging.getLogger("closebot.moderation")
        self._classifier = EventClassifier(config.states)
        self._dispatcher = ActionDispatcher(
            client,
            config.states,
            PermissionGate(client, config.templates),
            LinkedPRGate(client, config.templates),
        )

    def handle(self, event: CommentEvent) -> Classification | None:
        """Process one event.

        Returns the classification, or None when the event was dropped
        (missing fields or no config item for the repository).
        """
        missing = event.missing_fields()
        if missing:
            self._log.debug("Ignoring comment event, missing: %s", ", ".join(missing))
            return None
        policy = self._config.resolve_policy(event.org, event.repo)
        if policy is None:
            self._log.warning("No config for this repo: %s/%s", event.org, event.repo)
            return None
        decision = self._classifier.classify(event)
        if decision is None or decision.command is None:
            return decision
        self._log.info(
            "%s/%s#%s: /%s from %s on %s",
            decision.org,
            decision.repo,
            decision.number,
            decision.command.value,
            decision.commenter,
            decision.kind.value,
        )
        self._dispatcher.dispatch(decision, policy)
        return decision
