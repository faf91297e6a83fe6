"""Per-repository reconciliation of remote files into the local store.

For each syncable file the reconciler fetches the content, annotates
Markdown, and writes only when the annotated result differs from what is
already on disk. Differences in the header's ``synced_at`` value alone do not
count as a change.
"""

import logging
import posixpath
from typing import List

from src.github_client.listing import RemoteListing, calculate_backlink_target
from src.models.file_metadata import FileMetadata
from src.models.repository import RepoRef
from src.models.tree_entry import TreeEntry

from .annotation_codec import AnnotationCodec
from .local_store import LocalStore
from .models import MirrorConfig, RepoSyncResult

logger = logging.getLogger(__name__)


def repo_root_path(base_folder: str, owner: str, repo: str) -> str:
    """Local folder of a repository: ``base_folder/owner/repo``."""
    return f"{base_folder}/{owner}/{repo}"


class FileReconciler:
    """Mirrors the syncable files of one repository into the local store.

    Example:
        >>> reconciler = FileReconciler(listing, LocalStore(config.vault_path))
        >>> result = reconciler.sync_repository(repo_ref, files, config)
        >>> result.synced_paths
        {'Projects/octocat/hello-world/README.md'}
    """

    def __init__(self, listing: RemoteListing, store: LocalStore):
        self._listing = listing
        self._store = store

    def _sync_print(self, message: str) -> None:
        """Print a user-facing progress line regardless of log level."""
        print(message)

    def _log_file_action(self, action: str, local_path: str, dry_run: bool) -> None:
        """Print a file action.

        Args:
            action: '+' = created, '→' = updated
            local_path: Store path of the file
            dry_run: Prefix the line with [dry-run]
        """
        prefix = "[dry-run] " if dry_run else ""
        self._sync_print(f"  {prefix}{action} {local_path}")

    def sync_repository(
        self,
        repo_ref: RepoRef,
        files: List[TreeEntry],
        config: MirrorConfig,
        dry_run: bool = False
    ) -> RepoSyncResult:
        """Reconcile a repository's syncable files with the local tree.

        Failures on individual files are logged and recorded in
        ``result.failed``; they never abort the repository.

        Args:
            repo_ref: Repository being mirrored
            files: Syncable entries from RemoteListing
            config: Mirror configuration
            dry_run: Decide and report without writing anything

        Returns:
            RepoSyncResult with the synced-set and per-file outcomes
        """
        result = RepoSyncResult(repo_id=repo_ref.repo_id)
        repo_root = repo_root_path(config.base_folder, repo_ref.owner, repo_ref.repo)

        logger.debug(f"Reconciling {len(files)} file(s) into {repo_root}")

        for entry in files:
            local_path = f"{repo_root}/{entry.path}"
            try:
                self._sync_file(repo_ref, entry, local_path, repo_root, config, dry_run, result)
            except Exception as e:
                logger.error(f"Failed to sync {repo_ref.repo_id}:{entry.path}: {e}")
                result.failed.append(entry.path)

        logger.info(
            f"{repo_ref.repo_id}: {len(result.created)} created, "
            f"{len(result.updated)} updated, {len(result.unchanged)} unchanged, "
            f"{len(result.failed)} failed"
        )
        return result

    def _sync_file(
        self,
        repo_ref: RepoRef,
        entry: TreeEntry,
        local_path: str,
        repo_root: str,
        config: MirrorConfig,
        dry_run: bool,
        result: RepoSyncResult
    ) -> None:
        content = self._listing.fetch_content(repo_ref, entry)
        existed = self._store.is_file(local_path)

        if isinstance(content, bytes):
            # Media is written unconditionally
            self._write(local_path, content, dry_run)
        else:
            metadata = FileMetadata(
                owner=repo_ref.owner,
                repo=repo_ref.repo,
                branch=repo_ref.branch,
                path=entry.path,
                remote_url=self._listing.build_file_url(repo_ref, entry.path),
            )
            backlink_target = calculate_backlink_target(config.base_folder, repo_root, entry.path)
            processed = AnnotationCodec.process(
                content,
                metadata,
                config.annotations,
                backlink_target=backlink_target,
            )

            if existed:
                current = self._store.read_text(local_path)
                if (AnnotationCodec.normalize_for_compare(current)
                        == AnnotationCodec.normalize_for_compare(processed)):
                    logger.debug(f"Unchanged: {local_path}")
                    result.unchanged.append(local_path)
                    result.synced_paths.add(local_path)
                    return

            self._write(local_path, processed, dry_run)

        if existed:
            result.updated.append(local_path)
            self._log_file_action('→', local_path, dry_run)
        else:
            result.created.append(local_path)
            self._log_file_action('+', local_path, dry_run)
        result.synced_paths.add(local_path)

    def _write(self, local_path: str, content, dry_run: bool) -> None:
        if dry_run:
            logger.debug(f"Dry run: would write {local_path}")
            return
        self._store.ensure_folder(posixpath.dirname(local_path))
        self._store.write(local_path, content)
