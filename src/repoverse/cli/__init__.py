"""Command-line interface for Repoverse."""
