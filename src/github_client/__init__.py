"""GitHub client library for the Markdown mirror.

This package provides Python abstractions over the GitHub REST API v3:
repository discovery, branch resolution, tree listing and blob fetch, plus
the listing adapter that decides which files are mirrored.
"""

from .errors import (
    SyncError,
    GitHubError,
    InvalidCredentialsError,
    RepositoryNotFoundError,
    NamespaceDiscoveryError,
    APIUnreachableError,
    APIAccessError,
)

__all__ = [
    "SyncError",
    "GitHubError",
    "InvalidCredentialsError",
    "RepositoryNotFoundError",
    "NamespaceDiscoveryError",
    "APIUnreachableError",
    "APIAccessError",
]
