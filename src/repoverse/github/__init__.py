"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client for the git primitives a sync needs
- Exceptions mapped from GitHub HTTP status codes
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubConflictError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubConflictError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
]
