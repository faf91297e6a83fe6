"""Command-line interface for the GitHub Markdown mirror.

This package provides the `github-mirror` CLI tool that sequences a mirror
run: repository resolution, cross-run cleanup, per-repository reconciliation
and pruning, with progress output and exit codes.
"""

from .sync_command import SyncCommand
from .init_command import InitCommand
from .strip_command import StripCommand
from .models import ExitCode, SyncState, SyncSummary, StripSummary, ResolutionResult
from .errors import (
    CLIError,
    ConfigNotFoundError,
    InitError,
    StateError,
    StateFilesystemError,
    SyncInProgressError,
)

__all__ = [
    'SyncCommand',
    'InitCommand',
    'StripCommand',
    'ExitCode',
    'SyncState',
    'SyncSummary',
    'StripSummary',
    'ResolutionResult',
    'CLIError',
    'ConfigNotFoundError',
    'InitError',
    'StateError',
    'StateFilesystemError',
    'SyncInProgressError',
]
