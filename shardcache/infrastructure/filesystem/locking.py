"""Advisory file locking for cache entry files.

Uses `fcntl.flock`, so locks are held per open file description: two handles
on the same file exclude each other even inside one process. Closing the
handle releases the lock. POSIX only.
"""

import fcntl
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)

FILE_MODE = 0o666  # Narrowed by the process umask


def ensure_directory(path: Path) -> None:
    """Creates a directory and its parents; an existing directory is fine."""
    path.mkdir(parents=True, exist_ok=True)


def _is_current(fd: int, path: Path) -> bool:
    """True if `fd` still refers to the file currently linked at `path`."""
    opened = os.fstat(fd)
    try:
        linked = os.stat(path)
    except FileNotFoundError:
        return False
    return (opened.st_dev, opened.st_ino) == (linked.st_dev, linked.st_ino)


@contextmanager
def locked_file(path: Path, exclusive: bool, create: bool = False) -> Iterator[BinaryIO]:
    """Opens `path` and holds a shared or exclusive lock while the block runs.

    If the file was unlinked or replaced while we waited for the lock, the path
    is opened again so the caller never works on an orphaned file.

    Args:
        path: File to open.
        exclusive: Take LOCK_EX instead of LOCK_SH.
        create: Open read/write, creating the file if needed. Without it the
            file is opened read-only.

    Raises:
        FileNotFoundError: If `create` is False and the file does not exist.
        OSError: For any other open or lock failure.
    """
    flags = os.O_RDWR | os.O_CREAT if create else os.O_RDONLY
    operation = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH

    while True:
        fd = os.open(path, flags, FILE_MODE)
        try:
            fcntl.flock(fd, operation)
            if _is_current(fd, path):
                break
        except BaseException:
            os.close(fd)
            raise
        os.close(fd)
        logger.debug(f"Lock target {path} was replaced while waiting, reopening")

    handle = os.fdopen(fd, "r+b" if create else "rb")
    try:
        yield handle
    finally:
        handle.close()
