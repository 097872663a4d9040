"""Pydantic schemas for Repoverse.

This module provides input validation for commit notifications,
GitHub API responses, and repository configuration.
"""

from .commits import CommitInfo, CommitUser, PushEvent, PushEventRepository
from .enums import FileStatus
from .github_api import FileChange, GitHubBlob, GitHubPullRequestRef
from .repository import RepositoryConfig, parse_repo_string

__all__ = [
    # Commits
    "CommitInfo",
    "CommitUser",
    "PushEvent",
    "PushEventRepository",
    # Enums
    "FileStatus",
    # GitHub API
    "FileChange",
    "GitHubBlob",
    "GitHubPullRequestRef",
    # Repository
    "RepositoryConfig",
    "parse_repo_string",
]
