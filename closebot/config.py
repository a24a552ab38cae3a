"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.

The loaded AppConfig is a read-only snapshot: every model is frozen and
the same instance is shared by all webhook handler threads.
"""

from pathlib import Path
from typing import Any, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_COMMENTER = "__commenter__"
PLACEHOLDER_ACTION = "__action__"


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so secret resolution can read env/file
_current_env: dict[str, str] = {}


class RepoPolicy(BaseModel):
    """Which repositories a config item applies to and how /close is gated.

    ``repos`` entries are either an organization (``org``) or a single
    repository (``org/repo``). ``excluded_repos`` carves single repositories
    out of an organization entry.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    repos: List[str] = Field(description="Organizations or org/repo names this item applies to")
    excluded_repos: List[str] = Field(default_factory=list, description="org/repo names to skip")
    need_issue_has_link_pull_requests: bool = Field(
        default=False,
        description="Issue can be closed by /close only when a pull request is linked to it",
    )

    @field_validator("repos")
    @classmethod
    def _repos_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("the repositories configuration can not be empty")
        return value

    @field_validator("excluded_repos")
    @classmethod
    def _excluded_are_full_names(cls, value: List[str]) -> List[str]:
        for name in value:
            if "/" not in name:
                raise ValueError(f"excluded repo must be org/repo: {name}")
        return value

    def can_apply(self, org: str, repo: str) -> bool:
        """True when this policy covers org/repo."""
        full_name = f"{org}/{repo}"
        if full_name in self.excluded_repos:
            return False
        return full_name in self.repos or org in self.repos


class CommentTemplates(BaseModel):
    """Reply templates; ``__commenter__`` and ``__action__`` are substituted."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    no_permission_operate_issue: str = Field(
        default=(
            "Hi @__commenter__, you do not have permission to __action__ this issue. "
            "Only the issue author and repository collaborators can __action__ it."
        ),
        min_length=1,
    )
    no_permission_operate_pr: str = Field(
        default=(
            "Hi @__commenter__, you do not have permission to __action__ this pull request. "
            "Only the pull request author and repository collaborators can __action__ it."
        ),
        min_length=1,
    )
    issue_needs_link_pr: str = Field(
        default="Hi @__commenter__, this issue can only be closed once a pull request is linked to it.",
        min_length=1,
    )
    list_linking_pull_requests_failure: str = Field(
        default=(
            "Hi @__commenter__, the linked pull requests of this issue could not be checked. "
            "Please comment /close again later."
        ),
        min_length=1,
    )

    @staticmethod
    def render(template: str, commenter: str, action: str | None = None) -> str:
        text = template.replace(PLACEHOLDER_COMMENTER, commenter)
        if action is not None:
            text = text.replace(PLACEHOLDER_ACTION, action)
        return text


class StateNames(BaseModel):
    """Lifecycle state names as they appear in comment events."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    opened: str = Field(default="opened", min_length=1)
    closed: str = Field(default="closed", min_length=1)


class BotConfig(BaseSettings):
    """Moderation policy: per-repo items, reply templates, state names."""

    model_config = SettingsConfigDict(env_prefix="BOT_", extra="ignore", frozen=True)

    webhook_secret: str = Field(default="", description="Secret for webhook verification")
    states: StateNames = Field(default_factory=StateNames)
    templates: CommentTemplates = Field(default_factory=CommentTemplates)
    config_items: List[RepoPolicy] = Field(default_factory=list, description="First matching item wins")

    def resolve_policy(self, org: str, repo: str) -> RepoPolicy | None:
        """Return the first config item that applies to org/repo."""
        for item in self.config_items:
            if item.can_apply(org, repo):
                return item
        return None


class GitHubConfig(BaseSettings):
    """GitHub API and webhook settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore", frozen=True)

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    graphql_url: str = Field(default="https://api.github.com/graphql", description="GraphQL endpoint")
    webhook_path: str = Field(default="/webhook/github", description="Webhook URL path")
    delete_token_file: bool = Field(
        default=False,
        description="Remove the GITHUB_TOKEN_FILE secret from disk once read at startup",
    )


class WebhookConfig(BaseSettings):
    """Webhook server settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore", frozen=True)

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    enabled: bool = Field(default=True, description="Enable webhook server")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore", frozen=True)

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    bot: BotConfig = Field(default_factory=BotConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    def load_github_token(self) -> str | None:
        """Resolve the GitHub token once at startup.

        With github.delete_token_file set, a token read from GITHUB_TOKEN_FILE
        is removed from disk after reading. Raises OSError when removal fails.
        """
        token = self.github_token_resolved
        if not token or not self.github.delete_token_file:
            return token
        configured = self.github.token
        if (configured and not configured.startswith("${")) or _current_env.get("GITHUB_TOKEN"):
            return token
        file_path = _current_env.get("GITHUB_TOKEN_FILE")
        if file_path:
            Path(file_path).unlink()
        return token

    @property
    def webhook_secret_resolved(self) -> str:
        """Resolve webhook secret from config, env or Docker secret file."""
        s = self.bot.webhook_secret
        if s and not s.startswith("${"):
            return s
        return _read_secret("WEBHOOK_SECRET", "WEBHOOK_SECRET_FILE") or ""


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE, WEBHOOK_SECRET or WEBHOOK_SECRET_FILE.
    Raises pydantic.ValidationError when the file holds an invalid policy.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    return AppConfig(
        bot=BotConfig(**(raw.get("bot") or {})),
        github=GitHubConfig(**(raw.get("github") or {})),
        webhook=WebhookConfig(**(raw.get("webhook") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
