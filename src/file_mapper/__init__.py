"""File mapper library for the GitHub Markdown mirror.

This package maps remote repository files onto the local folder tree
``base_folder/owner/repo/path``: configuration loading, the annotation codec
that marks mirrored files, the local store and the per-repository reconciler.
"""

from .annotation_codec import AnnotationCodec
from .config_loader import ConfigLoader
from .errors import (
    FileMapperError,
    FilesystemError,
    ConfigError,
    AnnotationError,
)
from .file_reconciler import FileReconciler, repo_root_path
from .local_store import LocalStore
from .models import AnnotationOptions, AutoDefaults, ManualRepo, MirrorConfig, RepoSyncResult

__all__ = [
    'AnnotationCodec',
    'ConfigLoader',
    'FileMapperError',
    'FilesystemError',
    'ConfigError',
    'AnnotationError',
    'FileReconciler',
    'repo_root_path',
    'LocalStore',
    'AnnotationOptions',
    'AutoDefaults',
    'ManualRepo',
    'MirrorConfig',
    'RepoSyncResult',
]
