"""Webhook HTTP server for GitHub events.

Serves a health check and the webhook path. Each delivery is handled on
its own thread.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs

from closebot.adapters.github import GitHubClient
from closebot.config import AppConfig
from closebot.moderation import CommentModerator
from closebot.webhook.handlers import handle_github_event, verify_signature

LOG = logging.getLogger("closebot.webhook")


class WebhookHandler(BaseHTTPRequestHandler):
    """Handle GET /health and POST to the configured webhook path."""

    config: AppConfig
    moderator: CommentModerator

    def _respond(self, code: int, payload: dict) -> None:
        data = json.dumps(payload).encode()
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def do_GET(self) -> None:
        if self.path == "/health" or self.path == "/":
            self._respond(200, {"status": "ok", "service": "closebot"})
            return
        self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        if self.path == self.config.github.webhook_path:
            self._handle_github_webhook()
            return
        self._respond(404, {"error": "not found"})

    def _parse_webhook_body(self, body: bytes) -> dict:
        """Parse webhook body as JSON.

        Supports raw JSON and application/x-www-form-urlencoded (payload=...).
        """
        if not body:
            return {}
        content_type = self.headers.get("Content-Type", "")
        if "application/x-www-form-urlencoded" in content_type:
            parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
            raw = (parsed.get("payload") or [None])[0]
            if raw is None:
                return {}
            return json.loads(raw)
        return json.loads(body.decode())

    def _handle_github_webhook(self) -> None:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length) if length else b""
        signature = self.headers.get("X-Hub-Signature-256", "")
        if not verify_signature(self.config.webhook_secret_resolved, body, signature):
            LOG.warning("Webhook signature mismatch (delivery %s)", self.headers.get("X-GitHub-Delivery", ""))
            self._respond(401, {"error": "bad signature"})
            return
        try:
            payload = self._parse_webhook_body(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            LOG.warning("Invalid webhook JSON. Full payload: %s", body.decode("utf-8", errors="replace"))
            self._respond(400, {"error": "invalid json"})
            return
        event = self.headers.get("X-GitHub-Event", "")
        LOG.debug("Webhook event: %s (delivery %s)", event, self.headers.get("X-GitHub-Delivery", ""))
        try:
            handle_github_event(self.moderator, self.config.bot.states, event, payload)
        except Exception as e:
            LOG.exception("Failed to handle %s event: %s", event, e)
        self._respond(200, {"received": True})

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def build_server(
    config: AppConfig,
    moderator: CommentModerator | None = None,
    token: str | None = None,
) -> ThreadingHTTPServer:
    """Create the HTTP server; builds a GitHub-backed moderator when none is given."""
    if moderator is None:
        client = GitHubClient(
            token=token or config.github_token_resolved or "",
            api_url=config.github.api_url,
            graphql_url=config.github.graphql_url,
            states=config.bot.states,
        )
        moderator = CommentModerator(config.bot, client)
    WebhookHandler.config = config
    WebhookHandler.moderator = moderator
    return ThreadingHTTPServer((config.webhook.host, config.webhook.port), WebhookHandler)


def run_webhook_server(config: AppConfig, token: str | None = None) -> None:
    """Run HTTP server for webhooks and health check."""
    server = build_server(config, token=token)
    LOG.info("Webhook server listening on %s:%s", config.webhook.host, config.webhook.port)
    server.serve_forever()
