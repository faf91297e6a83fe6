"""Typed exception hierarchy for GitHub-related errors.

This module defines all custom exceptions used by the GitHub client library.
All exceptions inherit from GitHubError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all github-md-mirror errors.

    Use this to catch any application-level error from the mirror tool.
    """
    pass


class GitHubError(SyncError):
    """Base exception for all GitHub-related errors."""
    pass


class InvalidCredentialsError(GitHubError):
    """Raised when the API token is missing, invalid or lacks access."""

    def __init__(self, endpoint: str, reason: Optional[str] = None):
        message = f"GitHub token is missing or invalid (endpoint: {endpoint})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.endpoint = endpoint
        self.reason = reason


class RepositoryNotFoundError(GitHubError):
    """Raised when a repository, branch, tree or blob does not exist."""

    def __init__(self, resource: str):
        super().__init__(f"Resource {resource} not found")
        self.resource = resource


class NamespaceDiscoveryError(GitHubError):
    """Raised when a namespace is neither a listable user nor organization."""

    def __init__(self, namespace: str, reason: Optional[str] = None):
        message = f"Failed to list repositories for namespace '{namespace}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.namespace = namespace
        self.reason = reason


class APIUnreachableError(GitHubError):
    """Raised when the GitHub API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(GitHubError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "GitHub API failure (after 3 retries)"):
        super().__init__(message)
