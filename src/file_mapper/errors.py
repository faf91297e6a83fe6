"""Typed exception hierarchy for file mapper errors.

This module defines all custom exceptions used by the file mapper library.
All exceptions inherit from FileMapperError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from src.github_client.errors import SyncError


class FileMapperError(SyncError):
    """Base exception for all file mapper errors."""
    pass


class FilesystemError(FileMapperError):
    """Raised when local store operations fail (read, write, delete, permissions)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class ConfigError(FileMapperError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class AnnotationError(FileMapperError):
    """Raised when an annotation header cannot be generated."""

    def __init__(self, file_path: str, message: str):
        super().__init__(
            f"Annotation error in {file_path}: {message}"
        )
        self.file_path = file_path
        self.message = message
