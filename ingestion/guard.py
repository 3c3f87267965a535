"""
Single-instance guard built on an advisory file lock
"""

import errno
import fcntl
import os
from pathlib import Path
from typing import Optional, Union
from core.exceptions import AlreadyRunningError, FatalRunError
import logging

logger = logging.getLogger(__name__)


class SingleInstanceGuard:
    """
    Exclusive, non-blocking lock on a dedicated lock file.

    The lock belongs to the open file description, so the kernel drops it
    when the process exits for any reason. The PID written into the file is
    informational only.

    Usage:
        with SingleInstanceGuard(config.lock_file):
            ...
    """

    def __init__(self, lock_file: Union[str, Path]):
        self.lock_file = Path(lock_file)
        self._fd: Optional[int] = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """
        Take the lock or fail immediately.

        Raises:
            AlreadyRunningError: another instance holds the lock
            FatalRunError: the lock file cannot be opened
        """
        if self._fd is not None:
            return

        try:
            fd = os.open(self.lock_file, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            raise FatalRunError(
                "Cannot open lock file",
                context={"lock_file": str(self.lock_file)},
                original_exception=e
            )

        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            os.close(fd)
            if e.errno in (errno.EWOULDBLOCK, errno.EAGAIN, errno.EACCES):
                raise AlreadyRunningError(
                    "Unable to lock, another instance is probably running",
                    context={"lock_file": str(self.lock_file)},
                    original_exception=e
                )
            raise FatalRunError(
                "Cannot lock lock file",
                context={"lock_file": str(self.lock_file)},
                original_exception=e
            )

        self._fd = fd
        try:
            os.ftruncate(fd, 0)
            os.write(fd, f"{os.getpid()}\n".encode())
        except OSError as e:
            logger.debug(f"Could not record PID in {self.lock_file}: {e}")

        logger.debug(f"Acquired lock {self.lock_file}")

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug(f"Released lock {self.lock_file}")

    def __enter__(self) -> "SingleInstanceGuard":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
