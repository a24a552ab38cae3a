"""Tests for EventClassifier (which comments are commands)."""

import pytest

from closebot.config import StateNames
from closebot.models import Command, ItemKind
from closebot.moderation.classifier import EventClassifier


@pytest.fixture
def classifier() -> EventClassifier:
    return EventClassifier(StateNames(opened="opened", closed="closed"))


def test_close_on_open_issue(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event())
    assert decision is not None
    assert decision.command == Command.CLOSE
    assert decision.org == "owner"
    assert decision.repo == "repo"
    assert decision.number == 7
    assert decision.kind == ItemKind.ISSUE


def test_close_on_open_pull_request(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event(kind=ItemKind.PULL_REQUEST))
    assert decision.command == Command.CLOSE
    assert decision.kind == ItemKind.PULL_REQUEST


def test_reopen_on_closed_issue(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event(comment="/reopen", state="closed"))
    assert decision.command == Command.REOPEN


def test_reopen_on_closed_pull_request_is_not_a_command(classifier: EventClassifier, make_event) -> None:
    """Reopen is issue-only."""
    decision = classifier.classify(make_event(comment="/reopen", state="closed", kind=ItemKind.PULL_REQUEST))
    assert decision.command is None


def test_reopen_on_open_issue_is_not_a_command(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event(comment="/reopen", state="opened"))
    assert decision.command is None


def test_close_on_closed_issue_is_not_a_command(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event(state="closed"))
    assert decision.command is None


@pytest.mark.parametrize("comment", ["  /close  ", "/close\n", "\t/close"])
def test_close_trimmed(classifier: EventClassifier, make_event, comment: str) -> None:
    assert classifier.classify(make_event(comment=comment)).command == Command.CLOSE


@pytest.mark.parametrize("comment", ["/CLOSE", "\t/Close", "/cLose"])
def test_close_is_case_sensitive(classifier: EventClassifier, make_event, comment: str) -> None:
    assert classifier.classify(make_event(comment=comment)).command is None


@pytest.mark.parametrize("comment", ["/REOPEN", " /Reopen "])
def test_reopen_is_case_insensitive(classifier: EventClassifier, make_event, comment: str) -> None:
    assert classifier.classify(make_event(comment=comment, state="closed")).command == Command.REOPEN


@pytest.mark.parametrize(
    "comment",
    ["/close please", "please /close", "/closed", "/close\n/close", "", "lgtm", "/ close"],
)
def test_partial_or_extra_text_is_not_a_command(classifier: EventClassifier, make_event, comment: str) -> None:
    assert classifier.classify(make_event(comment=comment)).command is None


def test_reopen_with_trailing_text_is_not_a_command(classifier: EventClassifier, make_event) -> None:
    decision = classifier.classify(make_event(comment="/reopen now", state="closed"))
    assert decision.command is None


def test_custom_state_names(make_event) -> None:
    """State names come from config, e.g. GitHub's 'open'."""
    classifier = EventClassifier(StateNames(opened="open", closed="closed"))
    assert classifier.classify(make_event(state="open")).command == Command.CLOSE
    assert classifier.classify(make_event(state="opened")).command is None


@pytest.mark.parametrize("field", ["org", "repo", "number", "comment", "state", "author", "commenter", "kind"])
def test_missing_field_is_unclassifiable(classifier: EventClassifier, make_event, field: str) -> None:
    assert classifier.classify(make_event(**{field: None})) is None


def test_classify_is_repeatable(classifier: EventClassifier, make_event) -> None:
    event = make_event(comment="/reopen", state="closed")
    assert classifier.classify(event) == classifier.classify(event)
