"""Comment events and their classification (Pydantic)."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ItemKind(str, Enum):
    """What the comment was posted on."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class Command(str, Enum):
    REOPEN = "reopen"
    CLOSE = "close"


class GateResult(str, Enum):
    """Outcome of the linked pull request check for /close on an issue."""

    PROCEED = "proceed"
    BLOCKED = "blocked"


class CommentEvent(BaseModel):
    """A comment on an issue or pull request, as delivered by the forge.

    Every field may be missing at the boundary; an event with a missing
    required field is ignored rather than rejected.
    """

    org: str | None = None
    repo: str | None = None
    number: int | None = None
    comment: str | None = None
    state: str | None = None
    author: str | None = None
    commenter: str | None = None
    kind: ItemKind | None = None

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent or empty."""
        missing = []
        if not self.org:
            missing.append("org")
        if not self.repo:
            missing.append("repo")
        if self.number is None:
            missing.append("number")
        if self.comment is None:
            missing.append("comment")
        if not self.state:
            missing.append("state")
        if not self.author:
            missing.append("author")
        if not self.commenter:
            missing.append("commenter")
        if self.kind is None:
            missing.append("kind")
        return missing


class Classification(BaseModel):
    """Which command (if any) an event carries, with the fields needed to act on it."""

    model_config = ConfigDict(frozen=True)

    command: Command | None
    org: str
    repo: str
    number: int
    author: str
    commenter: str
    kind: ItemKind

    @property
    def is_issue(self) -> bool:
        return self.kind == ItemKind.ISSUE
