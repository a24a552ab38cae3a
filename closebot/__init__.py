"""closebot: /close and /reopen comment commands for issues and pull requests."""

__version__ = "0.1.0"
