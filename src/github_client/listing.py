"""Remote listing adapter: which files of a repository get mirrored.

Turns a resolved repository and branch into a flat list of syncable blob
entries. Markdown always passes; media files pass only when media syncing is
enabled. Directory entries are discarded since the local folder structure is
rebuilt from file paths.

Also hosts the pure path helpers shared by the reconciler and pruning:
extension classification and backlink target computation.
"""

import logging
import posixpath
from typing import List, Union

from src.models.repository import RepoRef
from src.models.tree_entry import TreeEntry

from .api_wrapper import APIWrapper

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ('.md', '.mdx')

MEDIA_EXTENSIONS = frozenset({
    '.png', '.jpg', '.jpeg', '.gif', '.svg', '.webp', '.bmp', '.ico',
    '.mp4', '.mov', '.avi', '.webm', '.mp3', '.wav', '.pdf',
})


def is_markdown_file(path: str) -> bool:
    """True for ``.md`` and ``.mdx`` paths."""
    return path.endswith(MARKDOWN_EXTENSIONS)


def is_media_file(path: str) -> bool:
    """True for paths whose extension is in the media allow-list (case-insensitive)."""
    _, ext = posixpath.splitext(path.lower())
    return ext in MEDIA_EXTENSIONS


def is_syncable(entry: TreeEntry, include_media: bool) -> bool:
    """Classify a tree entry.

    Args:
        entry: Remote tree entry
        include_media: Whether media files are mirrored

    Returns:
        True if the entry is a blob that should be mirrored
    """
    if not entry.is_blob:
        return False
    if is_markdown_file(entry.path):
        return True
    return include_media and is_media_file(entry.path)


def calculate_backlink_target(base_folder: str, repo_root: str, remote_path: str) -> str:
    """Compute the wiki-link target a mirrored file points back to.

    The targets form a tree mirroring directory nesting that terminates at
    the base folder:

        README.md              -> base_folder
        docs/guide.md          -> repo_root/README
        docs/guides/deploy.md  -> repo_root/docs/README

    Args:
        base_folder: Top-level mirror folder (e.g., "Projects")
        repo_root: Local folder of the repository (e.g., "Projects/owner/repo")
        remote_path: Slash-separated path inside the repository

    Returns:
        Link target without extension
    """
    directories = remote_path.split('/')[:-1]

    if not directories:
        return base_folder

    parent = directories[:-1]
    if not parent:
        return f"{repo_root}/README"

    return f"{repo_root}/{'/'.join(parent)}/README"


class RemoteListing:
    """Lists the syncable files of a repository.

    Example:
        >>> listing = RemoteListing(api)
        >>> files = listing.list_syncable_files(RepoRef("octocat", "hello-world"))
    """

    def __init__(self, api: APIWrapper):
        self._api = api

    def list_syncable_files(
        self,
        repo_ref: RepoRef,
        include_media: bool = False
    ) -> List[TreeEntry]:
        """Resolve the branch head and classify the full recursive tree.

        Args:
            repo_ref: Repository and branch to list
            include_media: Also keep media files

        Returns:
            Blob entries to mirror, in tree order

        Raises:
            GitHubError: If the branch, tree or repository cannot be fetched
        """
        commit_sha = self._api.resolve_branch_head(repo_ref.owner, repo_ref.repo, repo_ref.branch)
        logger.debug(f"{repo_ref.repo_id}@{repo_ref.branch} resolved to {commit_sha}")

        entries = self._api.list_tree(repo_ref.owner, repo_ref.repo, commit_sha)
        syncable = [entry for entry in entries if is_syncable(entry, include_media)]

        logger.info(
            f"{repo_ref.repo_id}: {len(syncable)} syncable file(s) "
            f"out of {len(entries)} tree entries"
        )
        return syncable

    def build_file_url(self, repo_ref: RepoRef, path: str) -> str:
        return self._api.build_file_url(repo_ref.owner, repo_ref.repo, path, repo_ref.branch)

    def fetch_content(self, repo_ref: RepoRef, entry: TreeEntry) -> Union[bytes, str]:
        """Fetch a syncable file: bytes for media, text for Markdown."""
        binary = not is_markdown_file(entry.path) and is_media_file(entry.path)
        return self._api.fetch_blob(repo_ref.owner, repo_ref.repo, entry, binary=binary)
