"""closebot entry point.

Runs the webhook server that executes /close and /reopen comment commands.
Usage: closebot [--config config.yaml] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from closebot.config import AppConfig, load_config
from closebot.logging import setup_logging
from closebot.webhook.server import run_webhook_server


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="closebot",
        description="closebot - /close and /reopen commands for issues and pull requests",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def run_bot(config: AppConfig) -> None:
    """Configure logging and serve webhooks until interrupted."""
    setup_logging(config.logging)
    log = logging.getLogger("closebot.main")

    if not config.webhook.enabled:
        log.warning("Webhook disabled in config; nothing to do.")
        return
    token = config.load_github_token()
    if not token:
        log.warning("No GitHub token; API calls will fail")
    if not config.bot.config_items:
        log.warning("No config_items; every event will be dropped")
    log.info(
        "closebot started | config_items=%s | webhook=%s:%s",
        len(config.bot.config_items),
        config.webhook.host,
        config.webhook.port,
    )
    run_webhook_server(config, token=token)


def main(argv: list[str] | None = None) -> int:
    """Entry point for closebot."""
    args = parse_args(argv)
    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("closebot.main").warning("config.yaml not found, using config.example.yaml")

    try:
        config = load_config(config_path)
    except (ValidationError, yaml.YAMLError) as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("closebot.main").error("Invalid config %s: %s", config_path, e)
        return 1

    if args.check:
        print("Config OK:", len(config.bot.config_items), "config item(s)")
        return 0

    try:
        run_bot(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("closebot.main").exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
