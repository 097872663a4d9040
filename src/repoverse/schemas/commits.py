"""Pydantic schemas for commit notifications from GitHub push events.

See: https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


class CommitUser(BaseModel):
    """Git identity of a commit author or committer."""

    name: str = Field(description="Git user name")
    email: str = Field(description="Git user email")
    username: str | None = Field(
        default=None,
        description="GitHub login (absent for identities not linked to GitHub)",
    )


class CommitInfo(BaseModel):
    """A single commit within a GitHub push event."""

    id: str = Field(description="Commit SHA")
    timestamp: datetime = Field(description="Commit timestamp")
    distinct: bool = Field(
        default=True,
        description="False when the changes were already pushed in an earlier commit",
    )
    message: str = Field(description="Commit message")
    author: CommitUser = Field(description="Commit author")
    committer: CommitUser = Field(description="Commit committer")
    url: str = Field(description="Commit URL on GitHub")
    tree_id: str | None = Field(default=None, description="Tree SHA of the commit")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive and aware timestamps must stay comparable when ordering a batch
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def short_id(self) -> str:
        """Abbreviated SHA as shown by GitHub."""
        return self.id[:7]


class PushEventRepository(BaseModel):
    """Repository metadata from the push event payload."""

    full_name: str = Field(description="Repository path (owner/repo)")


class PushEvent(BaseModel):
    """The parts of a GitHub push event payload needed to run a sync."""

    repository: PushEventRepository = Field(description="Repository that was pushed to")
    commits: list[CommitInfo] = Field(default_factory=list, description="Pushed commits")
