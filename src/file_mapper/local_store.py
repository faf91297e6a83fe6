"""Filesystem-backed local store.

All paths handed to the store are POSIX-style and relative to its root
(the vault directory), e.g. ``Projects/octocat/hello-world/README.md``.
Every operation resolves the path and refuses anything that escapes the
root, so a crafted remote path cannot write outside the vault.
"""

import logging
import os
import tempfile
from typing import List, Union

from .errors import FilesystemError

logger = logging.getLogger(__name__)

# Maximum file size to read into memory
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB in bytes


class LocalStore:
    """Read, write and delete files below a root directory.

    Writes are atomic: content goes to a temporary file in the target
    directory first and is then moved over the destination with
    ``os.replace``.

    Example:
        >>> store = LocalStore('/home/me/vault')
        >>> store.ensure_folder('Projects/octocat/hello-world')
        >>> store.write_text('Projects/octocat/hello-world/README.md', '# Hello')
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def _resolve(self, path: str) -> str:
        """Map a store path to an absolute filesystem path.

        Raises:
            FilesystemError: If the path escapes the store root
        """
        parts = [part for part in path.split('/') if part]
        if any(part in ('.', '..') for part in parts):
            raise FilesystemError(path, 'validate', 'Relative path segments are not allowed')

        full_path = os.path.join(self.root, *parts)

        real_root = os.path.realpath(self.root)
        real_path = os.path.realpath(full_path)
        if not real_path.startswith(real_root + os.sep) and real_path != real_root:
            raise FilesystemError(
                path,
                'validate',
                f'Path traversal detected: {path} is outside store root {self.root}'
            )
        return full_path

    def exists(self, path: str) -> bool:
        return os.path.exists(self._resolve(path))

    def is_file(self, path: str) -> bool:
        return os.path.isfile(self._resolve(path))

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(self._resolve(path))

    def read_bytes(self, path: str) -> bytes:
        """Read a file as bytes.

        Raises:
            FilesystemError: If the file is missing, too large or unreadable
        """
        full_path = self._resolve(path)
        try:
            file_size = os.path.getsize(full_path)
        except OSError as e:
            raise FilesystemError(path, 'stat', str(e))

        if file_size > MAX_FILE_SIZE:
            size_mb = file_size / (1024 * 1024)
            max_mb = MAX_FILE_SIZE / (1024 * 1024)
            raise FilesystemError(
                path,
                'read',
                f'File size ({size_mb:.2f} MB) exceeds maximum allowed size ({max_mb:.0f} MB)'
            )

        try:
            with open(full_path, 'rb') as f:
                return f.read()
        except PermissionError:
            raise FilesystemError(path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(path, 'read', str(e))

    def read_text(self, path: str) -> str:
        """Read a file as UTF-8 text (undecodable bytes are replaced)."""
        return self.read_bytes(path).decode('utf-8', errors='replace')

    def write_bytes(self, path: str, content: bytes) -> None:
        """Atomically create or replace a file.

        The parent folder must already exist (see ``ensure_folder``).

        Raises:
            FilesystemError: If the file cannot be written
        """
        full_path = self._resolve(path)
        directory = os.path.dirname(full_path)

        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.mirror-', suffix='.tmp')
            with os.fdopen(fd, 'wb') as f:
                f.write(content)
            os.replace(temp_path, full_path)
            temp_path = None
        except PermissionError:
            raise FilesystemError(path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(path, 'write', str(e))
        finally:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

    def write_text(self, path: str, content: str) -> None:
        self.write_bytes(path, content.encode('utf-8'))

    def write(self, path: str, content: Union[bytes, str]) -> None:
        """Write text or bytes depending on the content type."""
        if isinstance(content, bytes):
            self.write_bytes(path, content)
        else:
            self.write_text(path, content)

    def ensure_folder(self, path: str) -> None:
        """Create a folder and any missing parents.

        Segments that already exist are left untouched.

        Raises:
            FilesystemError: If a segment exists as a file or cannot be created
        """
        current = ''
        for part in [p for p in path.split('/') if p]:
            current = f"{current}/{part}" if current else part
            full_path = self._resolve(current)
            if os.path.isdir(full_path):
                continue
            if os.path.exists(full_path):
                raise FilesystemError(current, 'create_directory', 'Path exists and is not a directory')
            try:
                os.mkdir(full_path)
                logger.debug(f"Created folder: {current}")
            except FileExistsError:
                # Created concurrently by another writer
                continue
            except OSError as e:
                raise FilesystemError(current, 'create_directory', str(e))

    def list_children(self, path: str) -> List[str]:
        """List the direct children of a folder as store paths, sorted.

        Returns an empty list when the folder does not exist.

        Raises:
            FilesystemError: If the folder cannot be listed
        """
        full_path = self._resolve(path)
        if not os.path.isdir(full_path):
            return []

        try:
            names = sorted(os.listdir(full_path))
        except OSError as e:
            raise FilesystemError(path, 'list', str(e))

        prefix = path.strip('/')
        return [f"{prefix}/{name}" if prefix else name for name in names]

    def delete_file(self, path: str) -> None:
        """Delete a file.

        Raises:
            FilesystemError: If the file cannot be removed
        """
        try:
            os.remove(self._resolve(path))
        except OSError as e:
            raise FilesystemError(path, 'delete', str(e))

    def delete_folder(self, path: str) -> None:
        """Delete an empty folder.

        Args:
            path: Folder to delete

        Raises:
            FilesystemError: If the folder cannot be removed
        """
        full_path = self._resolve(path)
        if full_path == self.root:
            raise FilesystemError(path, 'delete', 'Refusing to delete the store root')
        try:
            os.rmdir(full_path)
        except OSError as e:
            raise FilesystemError(path, 'delete', str(e))
