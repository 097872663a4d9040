"""Enums for Pydantic schemas."""

from enum import Enum


class FileStatus(str, Enum):
    """Status of a file in a commit, as reported by the GitHub commits API."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"

    @property
    def is_replayable(self) -> bool:
        """Whether a sync knows how to apply this status to a target."""
        return self in _REPLAYABLE


_REPLAYABLE = frozenset(
    {FileStatus.ADDED, FileStatus.MODIFIED, FileStatus.REMOVED, FileStatus.RENAMED}
)
