"""Cross-run cleanup of repositories that fell out of scope.

A repository mirrored by an earlier run but no longer resolved (removed from
the config, filtered out, deleted upstream) has its whole local tree removed.
Two sources feed the removal set:

- the ids persisted by the previous run, minus the ids resolved now
- a two-level scan of ``base/owner/repo`` folders, minus the ids resolved now

The scan recovers trees that were mirrored before state tracking existed.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from src.file_mapper.errors import FilesystemError
from src.file_mapper.local_store import LocalStore

logger = logging.getLogger(__name__)


def split_repo_id(repo_id: str) -> Optional[Tuple[str, str]]:
    """Split ``owner/repo`` into its parts, or return None if malformed."""
    owner, _, repo = repo_id.partition('/')
    if not owner or not repo or '/' in repo or {owner, repo} & {'.', '..'}:
        return None
    return owner, repo


class CleanupHandler:
    """Removes local trees of repositories no longer in scope.

    Example:
        >>> handler = CleanupHandler(LocalStore('.'), 'Projects')
        >>> handler.cleanup(previous={'a/x', 'a/y'}, current={'a/x'})
        ['a/y']
    """

    def __init__(self, store: LocalStore, base_folder: str):
        self.store = store
        self.base_folder = base_folder

    def scan_existing(self) -> Set[str]:
        """Repository ids present on disk as ``base/owner/repo`` folders."""
        existing: Set[str] = set()
        if not self.store.is_dir(self.base_folder):
            return existing

        for owner_path in self.store.list_children(self.base_folder):
            if not self.store.is_dir(owner_path):
                continue
            owner = owner_path.rsplit('/', 1)[-1]
            for repo_path in self.store.list_children(owner_path):
                if self.store.is_dir(repo_path):
                    existing.add(f"{owner}/{repo_path.rsplit('/', 1)[-1]}")

        logger.debug(f"Found {len(existing)} repository folder(s) on disk")
        return existing

    def compute_removed(
        self,
        previous: Iterable[str],
        current: Iterable[str],
        protected_owners: Iterable[str] = ()
    ) -> List[str]:
        """Ids to remove: (previous ∪ existing on disk) − current.

        Args:
            previous: Ids persisted by the previous run
            current: Ids resolved by this run
            protected_owners: Owners whose discovery failed this run; their
                trees are kept since their scope is unknown
        """
        current_ids = set(current)
        removed = set(previous) - current_ids

        untracked = self.scan_existing() - current_ids - removed
        if untracked:
            logger.info(f"Found {len(untracked)} untracked repository folder(s) to clean up")
            removed |= untracked

        protected = {owner.lower() for owner in protected_owners}
        if protected:
            kept = {repo_id for repo_id in removed if repo_id.split('/')[0].lower() in protected}
            for repo_id in sorted(kept):
                logger.warning(f"Keeping {repo_id}: discovery for its namespace failed this run")
            removed -= kept

        return sorted(removed)

    def cleanup(
        self,
        previous: Iterable[str],
        current: Iterable[str],
        protected_owners: Iterable[str] = (),
        dry_run: bool = False
    ) -> List[str]:
        """Delete the local trees of removed repositories.

        A failure on one repository is logged and does not stop the others.

        Returns:
            Ids whose trees were deleted (or, in dry run, would be)
        """
        removed = self.compute_removed(previous, current, protected_owners)
        if not removed:
            return []

        logger.info(f"Cleaning up {len(removed)} removed repositories")

        deleted: List[str] = []
        for repo_id in removed:
            parts = split_repo_id(repo_id)
            if parts is None:
                logger.warning(f"Skipping invalid repository id: {repo_id!r}")
                continue
            owner, repo = parts

            owner_path = f"{self.base_folder}/{owner}"
            repo_path = f"{owner_path}/{repo}"

            if not self.store.is_dir(repo_path):
                logger.debug(f"No local folder for {repo_id}")
                continue

            try:
                if dry_run:
                    logger.info(f"Dry run: would delete repository folder {repo_path}")
                else:
                    self._delete_tree(repo_path)
                    logger.info(f"Deleted repository folder: {repo_path}")
                deleted.append(repo_id)
            except FilesystemError as e:
                logger.error(f"Failed to delete repository folder {repo_path}: {e}")
                continue

            if dry_run:
                continue
            try:
                if self.store.is_dir(owner_path) and not self.store.list_children(owner_path):
                    self.store.delete_folder(owner_path)
                    logger.info(f"Deleted empty owner folder: {owner_path}")
            except FilesystemError as e:
                logger.error(f"Failed to delete owner folder {owner_path}: {e}")

        return deleted

    def _delete_tree(self, folder: str) -> None:
        """Delete files first, then folders, depth first."""
        for child in self.store.list_children(folder):
            if self.store.is_dir(child):
                self._delete_tree(child)
            else:
                self.store.delete_file(child)
        self.store.delete_folder(folder)
