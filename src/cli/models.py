"""Data models for CLI operations.

This module defines all data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures,
following the patterns established in src/file_mapper/models.py.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Set

from src.models.repository import RepoRef


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Every repository synced
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - PARTIAL_FAILURE (2): At least one repository failed to sync
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PARTIAL_FAILURE = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SyncState:
    """Cross-run state tracked in .github-mirror/state.yaml.

    Attributes:
        last_synced_repo_ids: ``owner/repo`` ids resolved by the previous run
        last_sync_time: ISO 8601 timestamp of the previous run (None if never synced)

    Example:
        >>> state = SyncState(last_synced_repo_ids={"octocat/hello-world"})
        >>> state = SyncState()  # Never synced
    """
    last_synced_repo_ids: Set[str] = field(default_factory=set)
    last_sync_time: Optional[str] = None


@dataclass
class SyncSummary:
    """Summary of a mirror run for display to user.

    Attributes:
        repos_succeeded: Repository ids synced without a repository-level error
        repos_failed: Repository ids whose listing or reconciliation failed
        repos_removed: Repository ids deleted by cross-run cleanup
        created_count: Files created
        updated_count: Files rewritten
        unchanged_count: Files already current
        failed_file_count: Files that failed inside otherwise successful repositories
        pruned_count: Files removed by pruning

    Example:
        >>> summary = SyncSummary(repos_succeeded=["octocat/hello-world"], created_count=3)
    """
    repos_succeeded: List[str] = field(default_factory=list)
    repos_failed: List[str] = field(default_factory=list)
    repos_removed: List[str] = field(default_factory=list)
    created_count: int = 0
    updated_count: int = 0
    unchanged_count: int = 0
    failed_file_count: int = 0
    pruned_count: int = 0


@dataclass
class StripSummary:
    """Result of removing annotations from mirrored files.

    Attributes:
        stripped: Store paths whose annotations were removed
        skipped: Markdown files without mirror provenance (left untouched)
        failed: Store paths that could not be read or written
    """
    stripped: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass
class ResolutionResult:
    """Repositories selected for the current run.

    Attributes:
        repos: Manual entries first, then auto-discovered ones, no duplicate ids
        failed_namespaces: Namespaces whose discovery failed and were skipped
    """
    repos: List[RepoRef] = field(default_factory=list)
    failed_namespaces: List[str] = field(default_factory=list)

    @property
    def repo_ids(self) -> Set[str]:
        return {repo.repo_id for repo in self.repos}
