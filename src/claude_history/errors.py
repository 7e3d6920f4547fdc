"""Exceptions surfaced to callers of the session store."""

from pathlib import Path


class ClaudeHistoryError(Exception):
    """Base class for errors reported to the user."""


class StorageRootMissingError(ClaudeHistoryError):
    """The session storage root does not exist."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(
            f"Claude Code directory not found at {root}. "
            "Make sure Claude Code CLI is installed and has been used at least once."
        )


class InvalidArgumentError(ClaudeHistoryError, ValueError):
    """A caller passed an empty query, empty id or bad limit."""
