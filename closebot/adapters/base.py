"""Abstract base for forge clients.

Every call either succeeds or raises ForgeError; callers treat a raised
ForgeError as an unsuccessful call.
"""

from abc import ABC, abstractmethod


class ForgeError(Exception):
    """Raised when a forge API call fails."""

    pass


class ForgeClient(ABC):
    """Calls the moderation core makes against an issue tracker / PR forge."""

    @abstractmethod
    def create_issue_comment(self, org: str, repo: str, number: int, body: str) -> None:
        """Post a comment on an issue."""
        ...

    @abstractmethod
    def create_pr_comment(self, org: str, repo: str, number: int, body: str) -> None:
        """Post a comment on a pull request."""
        ...

    @abstractmethod
    def check_permission(self, org: str, repo: str, username: str) -> bool:
        """Return True if username may close and reopen items in org/repo."""
        ...

    @abstractmethod
    def update_issue_state(self, org: str, repo: str, number: int, state: str) -> None:
        """Set issue state to one of the configured lifecycle state names."""
        ...

    @abstractmethod
    def update_pr_state(self, org: str, repo: str, number: int, state: str) -> None:
        """Set pull request state to one of the configured lifecycle state names."""
        ...

    @abstractmethod
    def get_issue_linked_pr_count(self, org: str, repo: str, number: int) -> int:
        """Return how many pull requests are linked to the issue."""
        ...
