"""Comment commands: classification, permission and linked PR gates, dispatch."""

from closebot.moderation.classifier import EventClassifier
from closebot.moderation.dispatcher import ActionDispatcher
from closebot.moderation.gates import LinkedPRGate, PermissionGate
from closebot.moderation.moderator import CommentModerator

__all__ = ["ActionDispatcher", "CommentModerator", "EventClassifier", "LinkedPRGate", "PermissionGate"]
