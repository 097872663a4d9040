"""Sync module - propagate source directory commits to target repositories.

Services:
- Repoverse: Sync engine entry point (validate → order → cache → fan out)
- TargetSyncService: Per-target pipeline (branch → replay → PR → reviewers)
- build_commit_data_cache: Fetch source changes and blobs exactly once
- compose_pr_body: Render the sync pull request description
"""

from .cache import CommitDataCache, CommitDataEntry, build_commit_data_cache
from .engine import Repoverse
from .enums import OutputFormat, TargetSyncStatus
from .exceptions import SourceRepositoryError
from .ordering import filter_distinct_commits
from .pr_body import compose_pr_body, compose_pr_title
from .replay import TargetSyncService, map_target_path
from .results import SyncRunResult, TargetSyncResult

__all__ = [
    # Engine
    "Repoverse",
    "SourceRepositoryError",
    "SyncRunResult",
    # Ordering
    "filter_distinct_commits",
    # Cache
    "CommitDataCache",
    "CommitDataEntry",
    "build_commit_data_cache",
    # Per-target replay
    "TargetSyncResult",
    "TargetSyncService",
    "TargetSyncStatus",
    "map_target_path",
    # PR rendering
    "compose_pr_body",
    "compose_pr_title",
    # CLI
    "OutputFormat",
]
