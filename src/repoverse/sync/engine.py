"""Repoverse sync engine - propagate source commits to every target repository.

Coordinates one sync run: validate the source, order the commits, cache
the source changes once, then fan out one TargetSyncService pipeline
per configured target repository.
"""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from repoverse.github.client import GitHubClient
from repoverse.logging import get_logger
from repoverse.schemas.repository import parse_repo_string

from .cache import CommitDataCache, build_commit_data_cache
from .enums import TargetSyncStatus
from .exceptions import SourceRepositoryError
from .ordering import filter_distinct_commits
from .replay import TargetSyncService
from .results import SyncRunResult, TargetSyncResult

if TYPE_CHECKING:
    from repoverse.config import SyncConfig
    from repoverse.schemas.commits import CommitInfo
    from repoverse.schemas.repository import RepositoryConfig

logger = get_logger(__name__)


class Repoverse:
    """Synchronizes a shared directory across configured repositories.

    Usage:
        config = load_sync_config("repoverse.json")
        async with Repoverse(config) as engine:
            result = await engine.synchronize("acme/models", event.commits)
            for target in result.target_results:
                print(target.repository, target.pull_request_url)

    The engine holds no state between synchronize calls beyond its config
    and client.
    """

    def __init__(
        self,
        config: SyncConfig,
        client: GitHubClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Repositories and branch naming for this engine
            client: Optional GitHub client. If not provided, one is created
                    from config.access_token (or GITHUB_TOKEN).
        """
        self._config = config
        self._client = client or GitHubClient(token=config.access_token or None)
        self._target_service = TargetSyncService(self._client)

    @property
    def config(self) -> SyncConfig:
        """The sync configuration this engine was created with."""
        return self._config

    async def close(self) -> None:
        """Close the underlying GitHub client."""
        await self._client.close()

    async def __aenter__(self) -> Repoverse:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    def resolve_source(self, source: str) -> RepositoryConfig:
        """Validate a source identifier and return its configuration.

        Args:
            source: Repository in owner/repo format

        Returns:
            RepositoryConfig of the source

        Raises:
            SourceRepositoryError: If the identifier is malformed or the
                repository is not configured
        """
        try:
            owner, repo = parse_repo_string(source)
        except ValueError:
            raise SourceRepositoryError(
                "The source repository must be in the format 'owner/repo'"
            ) from None

        repo_config = self._config.find_repository(owner, repo)
        if repo_config is None:
            raise SourceRepositoryError(
                f"Source repository {owner}/{repo} is not in the list of repositories to sync"
            )
        return repo_config

    def create_sync_branch_name(self) -> str:
        """Branch name for a sync run: prefix plus epoch milliseconds."""
        return f"{self._config.sync_branch_prefix}-{time.time_ns() // 1_000_000}"

    async def synchronize(
        self,
        source: str,
        commits: list[CommitInfo],
        *,
        raise_on_failure: bool = True,
    ) -> SyncRunResult:
        """Propagate commits from the source repository to every other target.

        Flow:
            1. Validate the source identifier (before any request)
            2. Keep distinct commits, oldest first
            3. Cache source file changes and blobs once
            4. Run one pipeline per target concurrently, commits in order
            5. Surface the first failure once every pipeline has finished

        Args:
            source: Source repository in owner/repo format
            commits: Commit notifications from the push
            raise_on_failure: If True, re-raise the first target failure
                (in configuration order). If False, failures are only
                recorded in the returned result.

        Returns:
            SyncRunResult with one TargetSyncResult per configured repository

        Raises:
            SourceRepositoryError: If the source is malformed or unconfigured
            GitHubClientError: If caching fails, or a target fails and
                raise_on_failure is True
        """
        start_time = time.monotonic()
        source_config = self.resolve_source(source)
        distinct_commits = filter_distinct_commits(commits)
        branch_name = self.create_sync_branch_name()

        result = SyncRunResult(
            source=source_config.full_name,
            branch_name=branch_name,
            commit_ids=[commit.id for commit in distinct_commits],
        )

        if not distinct_commits:
            logger.info(
                "No distinct commits from {source}, skipping sync",
                source=source_config.full_name,
            )
            result.target_results = [
                self._skipped_result(source_config, target)
                for target in self._config.repositories
            ]
            result.duration_seconds = time.monotonic() - start_time
            return result

        logger.info(
            "Syncing {count} commit(s) from {source} on branch {branch}",
            count=len(distinct_commits),
            source=source_config.full_name,
            branch=branch_name,
        )

        try:
            cache = await build_commit_data_cache(
                self._client,
                distinct_commits,
                source_config.owner,
                source_config.repo,
                source_config.path,
            )
        except Exception:
            logger.exception("Failed to cache commits from {source}", source=source)
            raise

        result.target_results = list(
            await asyncio.gather(
                *(
                    self._sync_target(distinct_commits, cache, source_config, target, branch_name)
                    for target in self._config.repositories
                )
            )
        )
        result.duration_seconds = time.monotonic() - start_time

        logger.info(
            "Sync from {source} complete: synced={synced}, failed={failed} ({duration:.1f}s)",
            source=source_config.full_name,
            synced=result.targets_synced,
            failed=result.targets_failed,
            duration=result.duration_seconds,
        )

        first_error = result.first_error
        if raise_on_failure and first_error is not None:
            raise first_error
        return result

    async def _sync_target(
        self,
        commits: list[CommitInfo],
        cache: CommitDataCache,
        source: RepositoryConfig,
        target: RepositoryConfig,
        branch_name: str,
    ) -> TargetSyncResult:
        """Run one target pipeline, recording a failure instead of raising."""
        target_result = TargetSyncResult(repository=target.full_name)
        try:
            return await self._target_service.sync_to_target(
                commits, cache, source, target, branch_name, result=target_result
            )
        except Exception as e:
            # Siblings keep running; the error is surfaced after all complete
            logger.exception("Failed to sync {target}: {error}", target=target.full_name, error=e)
            target_result.status = TargetSyncStatus.FAILED
            target_result.error = e
            target_result.completed_at = datetime.now(UTC)
            return target_result

    @staticmethod
    def _skipped_result(source: RepositoryConfig, target: RepositoryConfig) -> TargetSyncResult:
        now = datetime.now(UTC)
        status = (
            TargetSyncStatus.SKIPPED_SOURCE
            if target.is_same_repository(source)
            else TargetSyncStatus.SKIPPED_EMPTY
        )
        return TargetSyncResult(
            repository=target.full_name, status=status, started_at=now, completed_at=now
        )
