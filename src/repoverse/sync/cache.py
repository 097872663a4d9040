"""Commit Data Cache - fetch each source commit's changes exactly once.

A sync replays the same source commits into every target repository.
The cache fetches each commit's file list and blob contents from the
source repository up front, so the number of source requests does not
grow with the number of targets.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from repoverse.logging import bind_commit, get_logger
from repoverse.schemas.enums import FileStatus
from repoverse.schemas.github_api import FileChange

from .concurrency import gather_or_cancel

if TYPE_CHECKING:
    from repoverse.github.client import GitHubClient
    from repoverse.schemas.commits import CommitInfo

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommitDataEntry:
    """Source changes of one commit, restricted to the synced directory."""

    commit_id: str
    """SHA of the source commit."""

    files: tuple[FileChange, ...]
    """Changed files under the source path."""

    blobs_by_sha: dict[str, str]
    """Base64 content for every non-removed file, keyed by blob SHA."""

    def content_for(self, change: FileChange) -> str:
        """Return cached base64 content for a file change.

        Raises:
            KeyError: If the change has no cached blob (e.g., a removal)
        """
        if change.sha is None:
            raise KeyError(f"{change.filename} has no blob SHA")
        return self.blobs_by_sha[change.sha]


@dataclass
class CommitDataCache:
    """Read-only map of commit SHA to its cached source changes.

    Built once per sync and shared by every target pipeline.
    """

    entries: dict[str, CommitDataEntry] = field(default_factory=dict)
    """Cached data keyed by commit SHA."""

    blob_fetches: int = 0
    """Number of blob requests made while building the cache."""

    def __getitem__(self, commit_id: str) -> CommitDataEntry:
        return self.entries[commit_id]

    def __len__(self) -> int:
        return len(self.entries)


class _CommitDataCacheBuilder:
    """Builds a CommitDataCache with blob fetches deduplicated by SHA.

    In-flight blob requests are shared, so two commits (or two files in one
    commit) that reference the same blob trigger a single request even when
    they are fetched concurrently.
    """

    def __init__(
        self,
        client: GitHubClient,
        source_owner: str,
        source_repo: str,
        source_path: str,
    ) -> None:
        self._client = client
        self._owner = source_owner
        self._repo = source_repo
        self._path = source_path
        self._blob_tasks: dict[str, asyncio.Task[str]] = {}

    async def build(self, commits: list[CommitInfo]) -> CommitDataCache:
        try:
            entries = await gather_or_cancel(self._fetch_commit(commit.id) for commit in commits)
        except BaseException:
            pending = list(self._blob_tasks.values())
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise

        return CommitDataCache(
            entries={entry.commit_id: entry for entry in entries},
            blob_fetches=len(self._blob_tasks),
        )

    async def _fetch_commit(self, commit_id: str) -> CommitDataEntry:
        commit_logger = bind_commit(self._owner, self._repo, commit_id)

        changes = await self._client.get_commit_files(self._owner, self._repo, commit_id)
        files = tuple(change for change in changes if change.filename.startswith(self._path))

        shas = {
            change.sha
            for change in files
            if change.status is not FileStatus.REMOVED and change.sha is not None
        }
        ordered_shas = sorted(shas)
        contents = await gather_or_cancel(self._blob(sha) for sha in ordered_shas)

        commit_logger.debug(
            "Cached {files} of {total} changed file(s), {blobs} blob(s)",
            files=len(files),
            total=len(changes),
            blobs=len(ordered_shas),
        )
        return CommitDataEntry(
            commit_id=commit_id,
            files=files,
            blobs_by_sha=dict(zip(ordered_shas, contents, strict=True)),
        )

    async def _blob(self, sha: str) -> str:
        task = self._blob_tasks.get(sha)
        if task is None:
            task = asyncio.create_task(self._fetch_blob(sha))
            self._blob_tasks[sha] = task
        # Shield so one waiter being cancelled doesn't cancel a fetch others share
        return await asyncio.shield(task)

    async def _fetch_blob(self, sha: str) -> str:
        blob = await self._client.get_blob(self._owner, self._repo, sha)
        return blob.to_base64()


async def build_commit_data_cache(
    client: GitHubClient,
    commits: list[CommitInfo],
    source_owner: str,
    source_repo: str,
    source_path: str,
) -> CommitDataCache:
    """Fetch file changes and blob contents for every commit.

    Commits are fetched concurrently; so are the blobs within each commit.
    Only files whose path starts with source_path are kept, and blobs are
    fetched only for files that still have content (not removed).

    Args:
        client: GitHub API client
        commits: Distinct commits to cache
        source_owner: Source repository owner
        source_repo: Source repository name
        source_path: Directory prefix to keep

    Returns:
        CommitDataCache keyed by commit SHA

    Raises:
        GitHubClientError: If any commit or blob fetch fails. No partial
            cache is returned and nothing is retried.
    """
    builder = _CommitDataCacheBuilder(client, source_owner, source_repo, source_path)
    cache = await builder.build(commits)
    logger.info(
        "Cached {commits} commit(s) from {owner}/{repo} with {blobs} blob fetch(es)",
        commits=len(cache),
        owner=source_owner,
        repo=source_repo,
        blobs=cache.blob_fetches,
    )
    return cache
