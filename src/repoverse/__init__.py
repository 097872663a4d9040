"""Repoverse - keep a shared directory in sync across GitHub repositories."""

__version__ = "0.1.0"

from repoverse.config import SyncConfig, load_sync_config  # noqa: E402
from repoverse.schemas import CommitInfo, RepositoryConfig  # noqa: E402
from repoverse.sync import Repoverse, SourceRepositoryError, SyncRunResult  # noqa: E402

__all__ = [
    "CommitInfo",
    "RepositoryConfig",
    "Repoverse",
    "SourceRepositoryError",
    "SyncConfig",
    "SyncRunResult",
    "__version__",
    "load_sync_config",
]
