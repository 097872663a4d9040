"""Pydantic schemas for repositories taking part in a sync."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_repo_string(full_name: str) -> tuple[str, str]:
    """Split an ``owner/repo`` string into its parts.

    Args:
        full_name: Repository in owner/repo format

    Returns:
        Tuple of (owner, repo)

    Raises:
        ValueError: If the string is not exactly two non-empty parts
    """
    parts = full_name.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Repository must be in 'owner/repo' format, got {full_name!r}")
    return parts[0], parts[1]


class RepositoryConfig(BaseModel):
    """One repository that contributes to or receives the synced directory."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    owner: str = Field(min_length=1, description="GitHub org or user (e.g., 'acme')")
    repo: str = Field(min_length=1, description="Repository name (e.g., 'models')")
    path: str = Field(description="Repo-relative directory prefix that is synced")
    branch: str = Field(default="main", min_length=1, description="Base branch PRs target")
    reviewers: tuple[str, ...] = Field(
        default=(),
        description="GitHub usernames to request review from",
    )

    @field_validator("path")
    @classmethod
    def _strip_leading_slash(cls, value: str) -> str:
        # GitHub file names are repo-relative and never start with "/"
        return value.lstrip("/")

    @property
    def full_name(self) -> str:
        """Repository path in owner/repo form."""
        return f"{self.owner}/{self.repo}"

    def is_same_repository(self, other: "RepositoryConfig") -> bool:
        """Check whether two configs point at the same GitHub repository."""
        return self.owner == other.owner and self.repo == other.repo
