"""Data models for remote repositories, tree entries and file provenance."""

from src.models.file_metadata import FileMetadata
from src.models.repository import RemoteRepository, RepoRef
from src.models.tree_entry import TreeEntry

__all__ = ['FileMetadata', 'RemoteRepository', 'RepoRef', 'TreeEntry']
