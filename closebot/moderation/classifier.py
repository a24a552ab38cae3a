"""Decide whether a comment event is a /reopen or /close command."""

import re

from closebot.config import StateNames
from closebot.models import Classification, Command, CommentEvent, ItemKind


class EventClassifier:
    """Stateless classifier; build once and share between threads.

    The whole trimmed comment must be the command: ``/close please`` or a
    command inside a longer comment is an ordinary comment.
    """

    def __init__(self, states: StateNames) -> None:
        self._states = states
        self._reopen = re.compile(r"^/reopen$", re.IGNORECASE)
        self._close = re.compile(r"^/close$")

    def classify(self, event: CommentEvent) -> Classification | None:
        """Return the command carried by event.

        None when a required field is missing; a Classification with
        ``command=None`` for an ordinary comment.
        """
        if event.missing_fields():
            return None
        text = event.comment.strip()
        command = None
        # Reopen is issue-only and is checked first; an event is never both
        if event.kind == ItemKind.ISSUE and self._reopen.match(text) and event.state == self._states.closed:
            command = Command.REOPEN
        elif self._close.match(text) and event.state == self._states.opened:
            command = Command.CLOSE
        return Classification(
            command=command,
            org=event.org,
            repo=event.repo,
            number=event.number,
            author=event.author,
            commenter=event.commenter,
            kind=event.kind,
        )
