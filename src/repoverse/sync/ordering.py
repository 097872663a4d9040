"""Commit filtering and ordering."""

from repoverse.schemas.commits import CommitInfo


def filter_distinct_commits(commits: list[CommitInfo]) -> list[CommitInfo]:
    """Select distinct commits and sort them oldest first.

    Non-distinct commits carry changes already pushed by another commit
    in the same batch, so replaying them would apply the same change twice.
    A commit id listed more than once is kept at its first occurrence only.
    The sort is stable: commits sharing a timestamp keep their input order.

    Args:
        commits: Commit notifications in any order

    Returns:
        Distinct commits in ascending timestamp order (possibly empty)
    """
    unique: dict[str, CommitInfo] = {}
    for commit in commits:
        if commit.distinct:
            unique.setdefault(commit.id, commit)
    return sorted(unique.values(), key=lambda commit: commit.timestamp)
