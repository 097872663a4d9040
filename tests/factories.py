"""Factory functions for creating test data.

This module provides factory functions for:
- Pydantic schemas (commits, file changes, repository configs)
- A stateful mock GitHubClient that records every request

Design principles:
- Factories provide sensible defaults that can be overridden
- The mock client keeps a per-repository file table so replay tests can
  observe the effect of earlier writes and deletes
"""

import base64
import hashlib
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from repoverse.config import SyncConfig
from repoverse.schemas import (
    CommitInfo,
    CommitUser,
    FileChange,
    FileStatus,
    GitHubBlob,
    GitHubPullRequestRef,
    RepositoryConfig,
)
from tests.conftest import JAN_10

BASE_SHA = "b" * 40
PR_URL = "https://github.com/{owner}/{repo}/pull/{number}"


def fake_sha(seed: str) -> str:
    """Deterministic 40-char hex SHA derived from a seed string."""
    return hashlib.sha1(seed.encode()).hexdigest()


def blob_content(sha: str) -> str:
    """The base64 content the mock client returns for a blob SHA."""
    return base64.b64encode(f"content of {sha}".encode()).decode()


# -----------------------------------------------------------------------------
# Schema Factories
# -----------------------------------------------------------------------------
def make_commit_user(
    *,
    name: str = "Ada Lovelace",
    email: str = "ada@example.com",
    username: str | None = "ada",
) -> CommitUser:
    """Create a CommitUser."""
    return CommitUser(name=name, email=email, username=username)


def make_commit_info(
    commit_id: str | None = None,
    *,
    timestamp: datetime = JAN_10,
    distinct: bool = True,
    message: str = "Update models",
    author: CommitUser | None = None,
    committer: CommitUser | None = None,
    **overrides: Any,
) -> CommitInfo:
    """Create a CommitInfo as found in a push event.

    Args:
        commit_id: Commit SHA (derived from the message when omitted)
        timestamp: Commit time
        distinct: Whether the commit is distinct in its push
        message: Commit message
        author: Author identity (defaults to make_commit_user())
        committer: Committer identity (defaults to the author)
        **overrides: Additional field overrides
    """
    sha = commit_id or fake_sha(f"{message}-{timestamp.isoformat()}")
    author = author or make_commit_user()
    return CommitInfo(
        id=sha,
        timestamp=timestamp,
        distinct=distinct,
        message=message,
        author=author,
        committer=committer or author,
        url=f"https://github.com/acme/models/commit/{sha}",
        tree_id=fake_sha(f"tree-{sha}"),
        **overrides,
    )


def make_file_change(
    filename: str,
    status: FileStatus | str = FileStatus.MODIFIED,
    *,
    sha: str | None = None,
    previous_filename: str | None = None,
) -> FileChange:
    """Create a FileChange; the blob SHA is derived from the filename by default."""
    status = FileStatus(status)
    return FileChange(
        filename=filename,
        status=status,
        sha=sha if sha is not None else fake_sha(f"blob-{filename}"),
        previous_filename=previous_filename,
    )


def make_repository_config(
    owner: str = "acme",
    repo: str = "models",
    *,
    path: str = "models/",
    branch: str = "main",
    reviewers: tuple[str, ...] = (),
) -> RepositoryConfig:
    """Create a RepositoryConfig."""
    return RepositoryConfig(
        owner=owner, repo=repo, path=path, branch=branch, reviewers=reviewers
    )


def make_sync_config(
    *repositories: RepositoryConfig,
    sync_branch_prefix: str = "repoverse-sync",
    access_token: str = "test-token",
) -> SyncConfig:
    """Create a SyncConfig (defaults to a source plus one target)."""
    if not repositories:
        repositories = (
            make_repository_config("acme", "models", path="models/"),
            make_repository_config(
                "acme", "app", path="shared-models/", reviewers=("alice", "bob")
            ),
        )
    return SyncConfig(
        repositories=list(repositories),
        sync_branch_prefix=sync_branch_prefix,
        access_token=access_token,
    )


# -----------------------------------------------------------------------------
# Mock GitHub Client
# -----------------------------------------------------------------------------
def make_mock_client(
    *,
    commit_files: dict[str, list[FileChange]] | None = None,
    existing_files: dict[tuple[str, str], str] | None = None,
    base_sha: str = BASE_SHA,
    pr_number: int = 42,
) -> MagicMock:
    """Create a MagicMock that behaves like GitHubClient.

    Args:
        commit_files: Files returned by get_commit_files, keyed by commit SHA
        existing_files: Files already present in targets, keyed by
            ("owner/repo", path) with their blob SHA
        base_sha: SHA returned by get_ref_sha for every repository
        pr_number: Number of every created pull request

    Returns:
        MagicMock with AsyncMock methods. ``client.calls`` records
        ("method", "owner/repo", detail) tuples in call order and
        ``client.files`` exposes the current file table.
    """
    commit_files = commit_files or {}
    files: dict[tuple[str, str], str] = dict(existing_files or {})
    calls: list[tuple[str, str, Any]] = []

    async def get_commit_files(owner: str, repo: str, ref: str) -> list[FileChange]:
        calls.append(("get_commit_files", f"{owner}/{repo}", ref))
        return list(commit_files.get(ref, []))

    async def get_blob(owner: str, repo: str, sha: str) -> GitHubBlob:
        calls.append(("get_blob", f"{owner}/{repo}", sha))
        return GitHubBlob(sha=sha, content=blob_content(sha), encoding="base64")

    async def get_ref_sha(owner: str, repo: str, ref: str) -> str:
        calls.append(("get_ref_sha", f"{owner}/{repo}", ref))
        return base_sha

    async def create_ref(owner: str, repo: str, ref: str, sha: str) -> None:
        calls.append(("create_ref", f"{owner}/{repo}", ref))

    async def get_content_sha(owner: str, repo: str, path: str, ref: str) -> str | None:
        calls.append(("get_content_sha", f"{owner}/{repo}", path))
        return files.get((f"{owner}/{repo}", path))

    async def create_or_update_file(
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        calls.append(("write", f"{owner}/{repo}", path))
        files[(f"{owner}/{repo}", path)] = fake_sha(content)

    async def delete_file(
        owner: str, repo: str, path: str, *, message: str, sha: str, branch: str
    ) -> None:
        calls.append(("delete", f"{owner}/{repo}", path))
        files.pop((f"{owner}/{repo}", path), None)

    async def create_pull_request(
        owner: str, repo: str, *, title: str, head: str, base: str, body: str
    ) -> GitHubPullRequestRef:
        calls.append(("create_pull_request", f"{owner}/{repo}", head))
        return GitHubPullRequestRef(
            number=pr_number,
            html_url=PR_URL.format(owner=owner, repo=repo, number=pr_number),
        )

    async def request_reviewers(
        owner: str, repo: str, pull_number: int, reviewers: list[str]
    ) -> None:
        calls.append(("request_reviewers", f"{owner}/{repo}", tuple(reviewers)))

    client = MagicMock()
    client.calls = calls
    client.files = files
    client.get_commit_files = AsyncMock(side_effect=get_commit_files)
    client.get_blob = AsyncMock(side_effect=get_blob)
    client.get_ref_sha = AsyncMock(side_effect=get_ref_sha)
    client.create_ref = AsyncMock(side_effect=create_ref)
    client.get_content_sha = AsyncMock(side_effect=get_content_sha)
    client.create_or_update_file = AsyncMock(side_effect=create_or_update_file)
    client.delete_file = AsyncMock(side_effect=delete_file)
    client.create_pull_request = AsyncMock(side_effect=create_pull_request)
    client.request_reviewers = AsyncMock(side_effect=request_reviewers)
    client.close = AsyncMock()
    return client


def calls_named(client: MagicMock, method: str) -> list[tuple[str, str, Any]]:
    """Recorded calls of one method, in order."""
    return [call for call in client.calls if call[0] == method]
