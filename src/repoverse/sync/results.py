"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import TargetSyncStatus


@dataclass
class TargetSyncResult:
    """Result of syncing commits into a single target repository."""

    repository: str
    """Full target repository name (owner/repo)."""

    status: TargetSyncStatus = TargetSyncStatus.PENDING
    """What happened to this target."""

    branch: str | None = None
    """Sync branch created in the target (None if none was created)."""

    pull_request_number: int | None = None
    """Number of the opened PR."""

    pull_request_url: str | None = None
    """URL of the opened PR."""

    files_written: int = 0
    """Files created or updated on the sync branch."""

    files_deleted: int = 0
    """Files deleted from the sync branch."""

    files_ignored: int = 0
    """File changes with a status that is not replayed (copied, changed, unchanged)."""

    error: Exception | None = None
    """Exception that aborted this target."""

    started_at: datetime | None = None
    """When the target pipeline started."""

    completed_at: datetime | None = None
    """When the target pipeline finished (successfully or not)."""

    @property
    def success(self) -> bool:
        """Check if the target finished without errors."""
        return self.status not in (TargetSyncStatus.PENDING, TargetSyncStatus.FAILED)

    @property
    def duration_seconds(self) -> float:
        """Time taken to sync this target."""
        if self.started_at is None or self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "repository": self.repository,
            "status": self.status.value,
            "branch": self.branch,
            "pull_request_number": self.pull_request_number,
            "pull_request_url": self.pull_request_url,
            "files_written": self.files_written,
            "files_deleted": self.files_deleted,
            "files_ignored": self.files_ignored,
            "duration_seconds": round(self.duration_seconds, 2),
        }
        if self.error:
            result["error"] = str(self.error)
            result["error_type"] = type(self.error).__name__
        return result


@dataclass
class SyncRunResult:
    """Result of one synchronize call across all target repositories."""

    source: str
    """Source repository (owner/repo)."""

    branch_name: str
    """Sync branch name shared by every target."""

    commit_ids: list[str] = field(default_factory=list)
    """Distinct commits replayed, oldest first."""

    target_results: list[TargetSyncResult] = field(default_factory=list)
    """One result per configured repository, in configuration order."""

    duration_seconds: float = 0.0
    """Total time taken for the sync."""

    @property
    def targets_synced(self) -> int:
        """Number of targets that received a PR."""
        return sum(1 for r in self.target_results if r.status is TargetSyncStatus.SYNCED)

    @property
    def targets_failed(self) -> int:
        """Number of targets whose pipeline failed."""
        return sum(1 for r in self.target_results if r.status is TargetSyncStatus.FAILED)

    @property
    def first_error(self) -> Exception | None:
        """Error of the first failed target, in configuration order."""
        for r in self.target_results:
            if r.error is not None:
                return r.error
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "source": self.source,
                "branch": self.branch_name,
                "commits": len(self.commit_ids),
                "targets_synced": self.targets_synced,
                "targets_failed": self.targets_failed,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "commit_ids": list(self.commit_ids),
            "targets": [r.to_dict() for r in self.target_results],
        }
