"""Target Sync Service - replay source commits onto one target repository.

Flow per target:
    1. Skip if the target is the source repository
    2. Create the sync branch from the target's base branch
    3. Replay every commit in order (files within a commit concurrently)
    4. Open a pull request
    5. Request reviewers
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, NamedTuple

from repoverse.logging import bind_repo
from repoverse.schemas.enums import FileStatus

from .concurrency import gather_or_cancel
from .enums import TargetSyncStatus
from .pr_body import compose_pr_body, compose_pr_title
from .results import TargetSyncResult

if TYPE_CHECKING:
    from loguru import Logger

    from repoverse.github.client import GitHubClient
    from repoverse.schemas.commits import CommitInfo
    from repoverse.schemas.github_api import FileChange
    from repoverse.schemas.repository import RepositoryConfig

    from .cache import CommitDataCache, CommitDataEntry


class ReplayOutcome(NamedTuple):
    """Writes and deletes made on the sync branch for one file change."""

    written: int = 0
    deleted: int = 0
    ignored: int = 0


def map_target_path(filename: str, source_path: str, target_path: str) -> str:
    """Translate a source file path into the target repository's directory.

    Example:
        >>> map_target_path("models/user.json", "models/", "shared-models/")
        'shared-models/user.json'
    """
    return f"{target_path}{filename[len(source_path):]}"


class _TargetReplay:
    """Replays cached commit data onto one target's sync branch."""

    def __init__(
        self,
        client: GitHubClient,
        source: RepositoryConfig,
        target: RepositoryConfig,
        branch_name: str,
        log: Logger,
    ) -> None:
        self._client = client
        self._source = source
        self._target = target
        self._branch = branch_name
        self._log = log
        self._handlers: dict[
            FileStatus, Callable[[CommitDataEntry, FileChange], Awaitable[ReplayOutcome]]
        ] = {
            FileStatus.ADDED: self._write,
            FileStatus.MODIFIED: self._write,
            FileStatus.REMOVED: self._remove,
            FileStatus.RENAMED: self._rename,
        }

    async def replay_commit(self, entry: CommitDataEntry) -> ReplayOutcome:
        outcomes = await gather_or_cancel(self._replay_file(entry, change) for change in entry.files)
        return ReplayOutcome(
            written=sum(o.written for o in outcomes),
            deleted=sum(o.deleted for o in outcomes),
            ignored=sum(o.ignored for o in outcomes),
        )

    async def _replay_file(self, entry: CommitDataEntry, change: FileChange) -> ReplayOutcome:
        if not change.status.is_replayable:
            self._log.debug(
                "Ignoring {path}: status {status} is not replayed",
                path=change.filename,
                status=change.status.value,
            )
            return ReplayOutcome(ignored=1)
        return await self._handlers[change.status](entry, change)

    def _target_path(self, filename: str) -> str:
        return map_target_path(filename, self._source.path, self._target.path)

    async def _current_sha(self, path: str) -> str | None:
        return await self._client.get_content_sha(
            self._target.owner, self._target.repo, path, self._branch
        )

    async def _write(self, entry: CommitDataEntry, change: FileChange) -> ReplayOutcome:
        if change.sha is None:
            self._log.warning("Ignoring {path}: no blob SHA", path=change.filename)
            return ReplayOutcome(ignored=1)

        path = self._target_path(change.filename)
        sha = await self._current_sha(path)
        operation = "Update" if sha else "Create"
        await self._client.create_or_update_file(
            self._target.owner,
            self._target.repo,
            path,
            message=f"[Sync] {operation} {path}",
            content=entry.content_for(change),
            branch=self._branch,
            sha=sha,
        )
        self._log.debug("{operation}d {path}", operation=operation, path=path)
        return ReplayOutcome(written=1)

    async def _delete_if_present(self, path: str) -> int:
        sha = await self._current_sha(path)
        if sha is None:
            self._log.debug("{path} already absent, nothing to delete", path=path)
            return 0
        await self._client.delete_file(
            self._target.owner,
            self._target.repo,
            path,
            message=f"[Sync] Delete {path}",
            sha=sha,
            branch=self._branch,
        )
        self._log.debug("Deleted {path}", path=path)
        return 1

    async def _remove(self, entry: CommitDataEntry, change: FileChange) -> ReplayOutcome:
        deleted = await self._delete_if_present(self._target_path(change.filename))
        return ReplayOutcome(deleted=deleted)

    async def _rename(self, entry: CommitDataEntry, change: FileChange) -> ReplayOutcome:
        deleted = 0
        previous = change.previous_filename
        if previous and previous.startswith(self._source.path):
            deleted = await self._delete_if_present(self._target_path(previous))
        written = await self._write(entry, change)
        return written._replace(deleted=deleted)


class TargetSyncService:
    """Service for replaying source commits onto a target repository.

    Usage:
        service = TargetSyncService(client)
        result = await service.sync_to_target(
            commits, cache, source_config, target_config, "repoverse-sync-1700000000000"
        )
        print(result.pull_request_url)
    """

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the service.

        Args:
            client: GitHub API client used for every target request
        """
        self._client = client

    async def sync_to_target(
        self,
        commits: list[CommitInfo],
        cache: CommitDataCache,
        source: RepositoryConfig,
        target: RepositoryConfig,
        branch_name: str,
        *,
        result: TargetSyncResult | None = None,
    ) -> TargetSyncResult:
        """Replay commits onto a new branch of the target and open a PR.

        Commits are replayed strictly in the given order since a later
        commit may touch a file an earlier one created, changed, or removed.

        Args:
            commits: Distinct commits, oldest first
            cache: Source commit data (read-only)
            source: Source repository config
            target: Target repository config
            branch_name: Sync branch to create in the target
            result: Optional result to record progress into, so callers keep
                partial progress when this raises

        Returns:
            TargetSyncResult for the target

        Raises:
            GitHubClientError: If any GitHub request fails. Work already done
                (branch, files, PR) is left in place.
        """
        if result is None:
            result = TargetSyncResult(repository=target.full_name)
        result.started_at = result.started_at or datetime.now(UTC)

        if target.is_same_repository(source):
            result.status = TargetSyncStatus.SKIPPED_SOURCE
            result.completed_at = datetime.now(UTC)
            return result

        log = bind_repo(target.owner, target.repo)

        # Step 1: Branch from the target's base branch tip
        base_sha = await self._client.get_ref_sha(
            target.owner, target.repo, f"heads/{target.branch}"
        )
        await self._client.create_ref(
            target.owner, target.repo, f"refs/heads/{branch_name}", base_sha
        )
        result.branch = branch_name
        log.info(
            "Created branch {branch} from {base} ({sha})",
            branch=branch_name,
            base=target.branch,
            sha=base_sha[:7],
        )

        # Step 2: Replay commits sequentially
        replay = _TargetReplay(self._client, source, target, branch_name, log)
        for commit in commits:
            outcome = await replay.replay_commit(cache[commit.id])
            result.files_written += outcome.written
            result.files_deleted += outcome.deleted
            result.files_ignored += outcome.ignored

        # Step 3: Pull request
        pr = await self._client.create_pull_request(
            target.owner,
            target.repo,
            title=compose_pr_title(source.owner, source.repo),
            head=branch_name,
            base=target.branch,
            body=compose_pr_body(source.owner, source.repo, commits),
        )
        result.pull_request_number = pr.number
        result.pull_request_url = pr.html_url

        # Step 4: Reviewers
        if target.reviewers:
            await self._client.request_reviewers(
                target.owner, target.repo, pr.number, list(target.reviewers)
            )

        result.status = TargetSyncStatus.SYNCED
        result.completed_at = datetime.now(UTC)
        log.info("Created pull request {url}", url=pr.html_url)
        return result
