"""Enums for sync operations."""

from enum import Enum


class TargetSyncStatus(str, Enum):
    """Outcome of syncing one target repository."""

    PENDING = "pending"
    """Pipeline has not finished yet."""

    SYNCED = "synced"
    """Branch created, commits replayed, PR opened and reviewers requested."""

    SKIPPED_SOURCE = "skipped_source"
    """Target is the source repository itself."""

    SKIPPED_EMPTY = "skipped_empty"
    """No distinct commits to replay, so no branch or PR was created."""

    FAILED = "failed"
    """A GitHub request failed; the target may be partially synced."""


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
