"""Test helper modules for mirror testing.

This package provides utilities for unit and integration testing:
- fake_github: In-memory stand-in for the GitHub API client
- assertion_helpers: Assertions over a mirrored local tree
"""

from .fake_github import FakeGitHubAPI
from .assertion_helpers import assert_tree_equals, list_tree_files, read_tree_file

__all__ = [
    'FakeGitHubAPI',
    'assert_tree_equals',
    'list_tree_files',
    'read_tree_file',
]
