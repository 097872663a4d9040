"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest/commits/commits
"""

import base64

from pydantic import BaseModel, Field

from .enums import FileStatus


class FileChange(BaseModel):
    """File entry from the single-commit endpoint."""

    filename: str = Field(description="File path")
    previous_filename: str | None = Field(
        default=None, description="Path before a rename"
    )
    sha: str | None = Field(default=None, description="Blob SHA of the new content")
    status: FileStatus = Field(description="File status (added, modified, removed, ...)")


class GitHubBlob(BaseModel):
    """Git blob object.

    Maps to: GET /repos/{owner}/{repo}/git/blobs/{file_sha}
    """

    sha: str = Field(description="Blob SHA")
    content: str = Field(description="Blob content in the given encoding")
    encoding: str = Field(default="base64", description="Content encoding (base64, utf-8)")

    def to_base64(self) -> str:
        """Content as a single-line base64 string, as the contents API expects."""
        if self.encoding == "base64":
            # GitHub wraps base64 blob content at 60 characters
            return "".join(self.content.split())
        return base64.b64encode(self.content.encode("utf-8")).decode("ascii")


class GitHubPullRequestRef(BaseModel):
    """Identifying fields of a pull request returned on creation."""

    number: int = Field(description="PR number")
    html_url: str = Field(description="GitHub PR URL")
