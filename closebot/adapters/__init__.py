"""Forge adapters (base and implementations)."""

from closebot.adapters.base import ForgeClient, ForgeError
from closebot.adapters.github import GitHubClient

__all__ = ["ForgeClient", "ForgeError", "GitHubClient"]
