"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API
for the git primitives a sync needs: commits, blobs, refs, file
contents, and pull requests.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import ValidationError

from repoverse.config import get_settings
from repoverse.logging import get_logger
from repoverse.schemas.github_api import FileChange, GitHubBlob, GitHubPullRequestRef

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubConflictError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub API client for repository synchronization.

    Usage:
        async with GitHubClient(token="...") as client:
            files = await client.get_commit_files("acme", "models", "abc1234")
            for change in files:
                print(change.filename, change.status)

    Every request passes through a semaphore so fan-out across commits,
    files, and target repositories never exceeds max_concurrent_requests.
    """

    def __init__(
        self,
        token: str | None = None,
        max_concurrent_requests: int | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
            max_concurrent_requests: Cap on in-flight requests. If not provided,
                uses pacing.max_concurrent_requests from settings.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        settings = get_settings()
        self._token = token or settings.github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set accessToken in the sync config "
                "or the GITHUB_TOKEN environment variable."
            )
        limit = max_concurrent_requests or settings.pacing.max_concurrent_requests
        self._semaphore = asyncio.Semaphore(limit)
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(self._token)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
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

    # -------------------------------------------------------------------------
    # Commits & Blobs (source repository)
    # -------------------------------------------------------------------------
    async def get_commit_files(self, owner: str, repo: str, ref: str) -> list[FileChange]:
        """Get the files changed by a single commit.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Commit SHA or ref

        Returns:
            List of FileChange objects

        Raises:
            GitHubNotFoundError: If the commit doesn't exist
        """
        try:
            async with self._semaphore:
                resp = await self._github.rest.repos.async_get_commit(
                    owner=owner,
                    repo=repo,
                    ref=ref,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"commit {ref} in {owner}/{repo}") from e

        payload = resp.parsed_data.model_dump(exclude_unset=True)
        try:
            return [FileChange.model_validate(entry) for entry in payload.get("files") or []]
        except ValidationError as e:
            raise GitHubClientError(f"Unexpected file entry in commit {ref}: {e}") from e

    async def get_blob(self, owner: str, repo: str, sha: str) -> GitHubBlob:
        """Get a git blob by SHA.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Blob SHA

        Returns:
            GitHubBlob with (usually base64) content
        """
        try:
            async with self._semaphore:
                resp = await self._github.rest.git.async_get_blob(
                    owner=owner,
                    repo=repo,
                    file_sha=sha,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"blob {sha} in {owner}/{repo}") from e

        return GitHubBlob.model_validate(resp.parsed_data.model_dump())

    # -------------------------------------------------------------------------
    # Refs (target repositories)
    # -------------------------------------------------------------------------
    async def get_ref_sha(self, owner: str, repo: str, ref: str) -> str:
        """Get the commit SHA a ref points at.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Ref without the "refs/" prefix (e.g., "heads/main")

        Returns:
            Commit SHA
        """
        try:
            async with self._semaphore:
                resp = await self._github.rest.git.async_get_ref(
                    owner=owner,
                    repo=repo,
                    ref=ref,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"ref {ref} in {owner}/{repo}") from e

        payload = resp.parsed_data.model_dump(by_alias=True)
        return str(payload["object"]["sha"])

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> None:
        """Create a git ref.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Fully qualified ref (e.g., "refs/heads/sync-123")
            sha: Commit SHA the ref points at

        Raises:
            GitHubConflictError: If the ref already exists
        """
        try:
            async with self._semaphore:
                await self._github.rest.git.async_create_ref(
                    owner=owner,
                    repo=repo,
                    ref=ref,
                    sha=sha,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"ref {ref} in {owner}/{repo}") from e

    # -------------------------------------------------------------------------
    # File Contents (target repositories)
    # -------------------------------------------------------------------------
    async def get_content_sha(self, owner: str, repo: str, path: str, ref: str) -> str | None:
        """Get the blob SHA of a file at a ref.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in the repository
            ref: Branch, tag, or commit to read from

        Returns:
            Blob SHA, or None if the file doesn't exist at that ref
        """
        try:
            async with self._semaphore:
                resp = await self._github.rest.repos.async_get_content(
                    owner=owner,
                    repo=repo,
                    path=path,
                    ref=ref,
                )
        except RequestFailed as e:
            if e.response.status_code == 404:
                return None
            raise self._handle_error(e, f"{path} in {owner}/{repo}@{ref}") from e

        data = resp.parsed_data
        if isinstance(data, list):
            raise GitHubConflictError(f"{path} in {owner}/{repo}@{ref} is a directory")
        return str(data.sha)

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        """Create a file, or update it when the current blob SHA is given.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in the repository
            message: Commit message
            content: New file content, base64 encoded
            branch: Branch to commit to
            sha: Blob SHA of the file being replaced (None creates the file)
        """
        extra: dict[str, str] = {}
        if sha is not None:
            extra["sha"] = sha

        try:
            async with self._semaphore:
                await self._github.rest.repos.async_create_or_update_file_contents(
                    owner=owner,
                    repo=repo,
                    path=path,
                    message=message,
                    content=content,
                    branch=branch,
                    **extra,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"{path} in {owner}/{repo}@{branch}") from e

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        sha: str,
        branch: str,
    ) -> None:
        """Delete a file.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in the repository
            message: Commit message
            sha: Blob SHA of the file being deleted
            branch: Branch to commit to
        """
        try:
            async with self._semaphore:
                await self._github.rest.repos.async_delete_file(
                    owner=owner,
                    repo=repo,
                    path=path,
                    message=message,
                    sha=sha,
                    branch=branch,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"{path} in {owner}/{repo}@{branch}") from e

    # -------------------------------------------------------------------------
    # Pull Requests
    # -------------------------------------------------------------------------
    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> GitHubPullRequestRef:
        """Open a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            title: PR title
            head: Branch with the changes
            base: Branch to merge into
            body: PR description (markdown)

        Returns:
            GitHubPullRequestRef with number and URL
        """
        try:
            async with self._semaphore:
                resp = await self._github.rest.pulls.async_create(
                    owner=owner,
                    repo=repo,
                    title=title,
                    head=head,
                    base=base,
                    body=body,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"pull request {head} -> {base} in {owner}/{repo}") from e

        return GitHubPullRequestRef.model_validate(resp.parsed_data.model_dump())

    async def request_reviewers(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        reviewers: list[str],
    ) -> None:
        """Request reviews on a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: PR number
            reviewers: GitHub usernames
        """
        try:
            async with self._semaphore:
                await self._github.rest.pulls.async_request_reviewers(
                    owner=owner,
                    repo=repo,
                    pull_number=pull_number,
                    reviewers=reviewers,
                )
        except RequestFailed as e:
            raise self._handle_error(e, f"PR #{pull_number} in {owner}/{repo}") from e

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed, target: str) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden to {target}: {error}")
        elif status == 404:
            return GitHubNotFoundError(f"Not found: {target}")
        elif status in (409, 422):
            return GitHubConflictError(f"Conflict on {target} ({status}): {error}")
        else:
            return GitHubClientError(f"GitHub API error ({status}) on {target}: {error}")
