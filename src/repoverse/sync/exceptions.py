"""Sync engine exceptions.

Provider failures surface as repoverse.github.exceptions.GitHubClientError
subclasses; only input validation errors are defined here.
"""


class SourceRepositoryError(ValueError):
    """Raised when the source repository is malformed or not configured.

    Always raised before any GitHub request is made.
    """

    pass
