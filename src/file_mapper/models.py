"""Data models for the file mapper.

This module defines the configuration value threaded through a mirror run
and the per-repository results produced by reconciliation.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass
class AutoDefaults:
    """Filters applied to auto-discovered repositories.

    Attributes:
        include_private: Keep private repositories
        include_forks: Keep forks
        include_archived: Keep archived repositories
        repo_glob: ``*`` wildcard pattern the repository name must match
                   ("*" or empty disables name filtering)
    """
    include_private: bool = False
    include_forks: bool = False
    include_archived: bool = False
    repo_glob: str = "*"


@dataclass
class ManualRepo:
    """Explicitly configured repository.

    Attributes:
        owner: Repository owner login
        repo: Repository name
        branch: Branch override (None means "main")
    """
    owner: str
    repo: str
    branch: Optional[str] = None


@dataclass
class AnnotationOptions:
    """Toggles for the annotation pipeline.

    Attributes:
        add_frontmatter: Prepend the provenance header
        add_readonly_banner: Insert the read-only warning banner
        add_backlinks: Insert the hierarchical backlink
    """
    add_frontmatter: bool = True
    add_readonly_banner: bool = True
    add_backlinks: bool = True


@dataclass
class MirrorConfig:
    """Validated mirror configuration.

    Loaded by ConfigLoader from .github-mirror/config.yaml and passed
    explicitly to every component of a run.

    Attributes:
        base_folder: Folder (relative to vault_path) holding owner/repo trees
        vault_path: Root directory of the local store
        github_token: Token from config (GITHUB_TOKEN env var takes precedence)
        namespaces: Users or organizations to auto-discover repositories from
        auto_defaults: Filters for auto-discovered repositories
        repos: Explicitly configured repositories
        sync_interval_hours: Interval for --watch runs
        auto_sync: Sync every sync_interval_hours even without --watch
        annotations: Annotation pipeline toggles
        prune_extraneous_files: Remove files that disappeared upstream
        sync_media_files: Mirror media files alongside Markdown
    """
    base_folder: str = "Projects"
    vault_path: str = "."
    github_token: str = ""
    namespaces: List[str] = field(default_factory=list)
    auto_defaults: AutoDefaults = field(default_factory=AutoDefaults)
    repos: List[ManualRepo] = field(default_factory=list)
    sync_interval_hours: float = 1.0
    auto_sync: bool = False
    annotations: AnnotationOptions = field(default_factory=AnnotationOptions)
    prune_extraneous_files: bool = False
    sync_media_files: bool = False


@dataclass
class RepoSyncResult:
    """Outcome of reconciling one repository.

    Attributes:
        repo_id: ``owner/repo`` identity
        synced_paths: Local paths written or confirmed current (the synced-set)
        created: Paths of newly created files
        updated: Paths of rewritten files
        unchanged: Paths whose content already matched
        failed: Remote paths that could not be fetched or written
        pruned: Local paths removed by pruning
    """
    repo_id: str
    synced_paths: Set[str] = field(default_factory=set)
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    pruned: List[str] = field(default_factory=list)
