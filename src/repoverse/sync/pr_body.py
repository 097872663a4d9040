"""Pull request title and body rendering."""

from repoverse.schemas.commits import CommitInfo, CommitUser

MERGE_BOT_USERNAME = "web-flow"
"""GitHub's committer identity for web UI commits and PR merges."""


def compose_pr_title(source_owner: str, source_repo: str) -> str:
    """Title for a sync pull request."""
    return f"Sync models directory with {source_owner}/{source_repo}"


def format_identity(user: CommitUser) -> str:
    """Render a git identity as a markdown author line.

    Identities linked to GitHub get a profile link; others fall back to
    name and email only.
    """
    if user.username:
        return (
            f"{user.name} ([@{user.username}](https://github.com/{user.username})) "
            f"<{user.email}>"
        )
    return f"{user.name} <{user.email}>"


def _include_committer(commit: CommitInfo) -> bool:
    committer = commit.committer.username
    if committer == MERGE_BOT_USERNAME:
        return False
    return committer is None or committer != commit.author.username


def compose_pr_body(source_owner: str, source_repo: str, commits: list[CommitInfo]) -> str:
    """Render the description of a sync pull request.

    Lists every commit in the given order, then every unique author and
    committer. A committer is left out when it is GitHub's merge bot or the
    same user as the commit author.

    Args:
        source_owner: Source repository owner
        source_repo: Source repository name
        commits: Commits replayed by the sync, oldest first

    Returns:
        Markdown PR body
    """
    commit_lines = [
        f"- {commit.message} ([#{commit.short_id}]({commit.url}))" for commit in commits
    ]

    # dict keeps first-seen order while deduplicating
    authors: dict[str, None] = {}
    for commit in commits:
        authors.setdefault(format_identity(commit.author))
        if _include_committer(commit):
            authors.setdefault(format_identity(commit.committer))

    return "\n".join(
        [
            "## Synchronization of the models directory",
            "This PR is auto-generated to sync the models directory with changes made in "
            f"`{source_owner}/{source_repo}`.",
            "",
            "## Commits:",
            *commit_lines,
            "",
            "## Authors:",
            *authors,
        ]
    )
