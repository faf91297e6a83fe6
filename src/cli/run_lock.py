"""Process-wide lock that keeps mirror runs from overlapping.

A manual run and a --watch loop started from the same directory would
otherwise write the same local tree and state file at the same time. The
lock is an fcntl advisory lock on .github-mirror/sync.lock, taken without
blocking: a second run fails fast instead of queueing.
"""

import logging
import os
from typing import Optional, TextIO

# Import fcntl for POSIX file locking (not available on Windows)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

from .errors import StateFilesystemError, SyncInProgressError

logger = logging.getLogger(__name__)


class RunLock:
    """Exclusive, non-blocking run lock.

    Example:
        >>> with RunLock('.github-mirror/sync.lock'):
        ...     sync()
    """

    DEFAULT_LOCK_PATH = os.path.join('.github-mirror', 'sync.lock')

    def __init__(self, lock_path: str = DEFAULT_LOCK_PATH):
        self.lock_path = lock_path
        self._lock_file: Optional[TextIO] = None

    @property
    def held(self) -> bool:
        return self._lock_file is not None

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            SyncInProgressError: If another process holds the lock
            StateFilesystemError: If the lock file cannot be created
        """
        lock_dir = os.path.dirname(self.lock_path)
        try:
            if lock_dir:
                os.makedirs(lock_dir, exist_ok=True)
            lock_file = open(self.lock_path, 'a')
        except OSError as e:
            raise StateFilesystemError(self.lock_path, 'open', str(e))

        if HAS_FCNTL:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except OSError:
                lock_file.close()
                raise SyncInProgressError(self.lock_path)
            logger.debug(f"Run lock acquired: {self.lock_path}")
        else:
            logger.warning(
                "File locking not available on this platform. "
                "Overlapping runs will not be detected."
            )

        lock_file.truncate(0)
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._lock_file = lock_file

    def release(self) -> None:
        if self._lock_file is None:
            return

        if HAS_FCNTL:
            try:
                fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
                logger.debug("Run lock released")
            except OSError as e:
                logger.warning(f"Failed to release lock: {e}")

        self._lock_file.close()
        self._lock_file = None

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
