"""Webhook server and handlers for GitHub events."""

from closebot.webhook.handlers import handle_github_event, parse_comment_event, verify_signature
from closebot.webhook.server import build_server, run_webhook_server

__all__ = ["build_server", "handle_github_event", "parse_comment_event", "run_webhook_server", "verify_signature"]
