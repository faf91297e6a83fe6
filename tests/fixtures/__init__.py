"""Test fixtures for the mirror.

This package provides reusable sample documents and configuration files
for unit and integration tests.
"""

from .sample_markdown import (
    ANNOTATED_README,
    PLAIN_README,
    USER_NOTE,
    SAMPLE_CONFIG_YAML,
)

__all__ = [
    'ANNOTATED_README',
    'PLAIN_README',
    'USER_NOTE',
    'SAMPLE_CONFIG_YAML',
]
