"""Pruning of files that disappeared from a mirrored repository.

After a repository is reconciled, every file below its local root that was
not written or confirmed in that pass is a candidate. Only files the mirror
can show it created are deleted:

- Markdown files whose header carries provenance metadata
- Media files at least ``base/owner/repo/file`` deep (media has no header,
  so path depth is the only signal)

Anything else, including user notes without a header, is left alone.
"""

import logging
import posixpath
from typing import List, Set

from src.file_mapper.annotation_codec import AnnotationCodec
from src.file_mapper.errors import FilesystemError
from src.file_mapper.local_store import LocalStore
from src.github_client.listing import is_markdown_file, is_media_file

logger = logging.getLogger(__name__)

# Maximum folder depth walked below a repository root
MAX_RECURSION_DEPTH = 50


class PruneHandler:
    """Deletes system-created files that are no longer upstream.

    Example:
        >>> handler = PruneHandler(LocalStore('.'))
        >>> handler.prune('Projects/octocat/hello-world', result.synced_paths, 'Projects')
        ['Projects/octocat/hello-world/old.md']
    """

    def __init__(self, store: LocalStore):
        self.store = store

    def is_system_media_path(self, path: str, base_folder: str) -> bool:
        """Depth heuristic for media: ``base/owner/repo/...file``."""
        prefix = base_folder.strip('/') + '/'
        if not path.startswith(prefix):
            return False
        return len(path[len(prefix):].split('/')) >= 3

    def is_deletable(self, path: str, base_folder: str) -> bool:
        """Decide whether an unsynced file was created by the mirror.

        Raises:
            FilesystemError: If a Markdown file cannot be read
        """
        if is_markdown_file(path):
            content = self.store.read_text(path)
            return AnnotationCodec.extract_metadata(content) is not None

        if is_media_file(path):
            return self.is_system_media_path(path, base_folder)

        return False

    def prune(
        self,
        repo_root: str,
        synced_paths: Set[str],
        base_folder: str,
        dry_run: bool = False
    ) -> List[str]:
        """Prune one repository's local tree.

        Args:
            repo_root: Local folder of the repository (``base/owner/repo``)
            synced_paths: Paths written or confirmed current in this pass
            base_folder: Top-level mirror folder
            dry_run: Report without deleting

        Returns:
            Store paths of deleted (or, in dry run, deletable) files
        """
        deleted: List[str] = []
        if not self.store.is_dir(repo_root):
            return deleted

        self._prune_folder(repo_root, synced_paths, base_folder, dry_run, deleted, depth=0)

        if deleted:
            logger.info(f"Pruned {len(deleted)} file(s) from {repo_root}")
        return deleted

    def _prune_folder(
        self,
        folder: str,
        synced_paths: Set[str],
        base_folder: str,
        dry_run: bool,
        deleted: List[str],
        depth: int
    ) -> None:
        if depth > MAX_RECURSION_DEPTH:
            logger.warning(f"Not pruning below {folder}: maximum folder depth reached")
            return

        try:
            children = self.store.list_children(folder)
        except FilesystemError as e:
            logger.warning(f"Cannot list {folder} for pruning: {e}")
            return

        subfolders = []
        for child in children:
            if self.store.is_dir(child):
                subfolders.append(child)
                continue
            if child in synced_paths:
                continue

            try:
                if not self.is_deletable(child, base_folder):
                    continue
                if dry_run:
                    logger.info(f"Dry run: would prune {child}")
                else:
                    self.store.delete_file(child)
                    logger.debug(f"Pruned: {child}")
                deleted.append(child)
            except FilesystemError as e:
                logger.warning(f"Failed to prune {child}: {e}")

        for subfolder in subfolders:
            self._prune_folder(subfolder, synced_paths, base_folder, dry_run, deleted, depth + 1)

            if dry_run:
                continue
            try:
                if not self.store.list_children(subfolder):
                    self.store.delete_folder(subfolder)
                    logger.debug(f"Deleted empty folder: {posixpath.basename(subfolder)}")
            except FilesystemError as e:
                logger.warning(f"Failed to delete empty folder {subfolder}: {e}")
