"""Pre-flight checks for write access to a path or its nearest existing ancestor.

Every check performs the real operation (opening a file for append, or creating
and deleting a hidden entry inside a directory) instead of reading permission
bits, since ACLs, mount options and network filesystems make mode bits an
unreliable predictor of what a write will actually do.

All entry points return a :class:`WriteProbe` carrying the last path that was
tested and the error that decided the outcome (``None`` when writable).
"""

from __future__ import annotations

import errno
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from typing import Iterator, Union

logger = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]

TEMP_PREFIX = ".permtest-"


class NotFileOrDirectoryError(OSError):
    """The path exists but is a socket, FIFO, device or other special entry."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path}: not a file or directory")
        self.path = path


@dataclass(frozen=True)
class WriteProbe:
    path: str
    error: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> str:
        """Raise the recorded error, or return the tested path when writable."""

        if self.error is not None:
            raise self.error
        return self.path

    def __iter__(self) -> Iterator[object]:
        # Allows ``tested, err = write(path)``.
        yield self.path
        yield self.error


def _denied(path: str) -> PermissionError:
    return PermissionError(errno.EACCES, "permission denied", path)


def _parent(path: str) -> str:
    return os.path.dirname(os.path.normpath(path)) or os.curdir


def try_temp_write(directory: PathArg) -> OSError | None:
    """Create and remove a uniquely named hidden file inside ``directory``.

    Returns the error raised while creating the entry, or ``None`` on success.
    The entry is removed before returning whatever happens after creation.
    """

    try:
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=directory)
    except OSError as exc:
        return exc
    try:
        os.close(fd)
    except OSError as exc:
        return exc
    finally:
        os.unlink(name)
    return None


def write(path: PathArg) -> WriteProbe:
    """Check whether ``path``, or its nearest existing ancestor, is writable.

    Regular files are handed to :func:`write_file` and directories to
    :func:`write_dir`. Special files produce :class:`NotFileOrDirectoryError`.
    """

    current = os.fspath(path)
    while True:
        try:
            st = os.stat(current)
        except FileNotFoundError as exc:
            parent = _parent(current)
            if parent == current:
                return WriteProbe(current, exc)
            logger.debug("%s does not exist, checking %s", current, parent)
            current = parent
            continue
        except PermissionError:
            logger.debug("stat denied for %s", current)
            return WriteProbe(current, _denied(current))
        except OSError as exc:
            return WriteProbe(current, exc)

        if stat.S_ISREG(st.st_mode):
            return write_file(current)
        if stat.S_ISDIR(st.st_mode):
            return write_dir(current)
        return WriteProbe(current, NotFileOrDirectoryError(current))


def write_file(path: PathArg) -> WriteProbe:
    """Check whether the file at ``path`` can be written.

    The file is opened for appending but never created. When it is missing,
    the question becomes whether it could be created, so a single temp-write
    probe runs in its parent directory; the outcome is still reported against
    ``path``.
    """

    path = os.fspath(path) or os.curdir
    try:
        # O_NONBLOCK keeps a FIFO without a reader from blocking the open.
        fd = os.open(path, os.O_WRONLY | os.O_APPEND | getattr(os, "O_NONBLOCK", 0))
    except PermissionError:
        logger.debug("open for append denied for %s", path)
        return WriteProbe(path, _denied(path))
    except FileNotFoundError:
        parent = _parent(path)
        logger.debug("%s does not exist, probing parent %s", path, parent)
        exc = try_temp_write(parent)
        if isinstance(exc, PermissionError):
            return WriteProbe(path, _denied(path))
        return WriteProbe(path, exc)
    except OSError as exc:
        return WriteProbe(path, exc)

    try:
        mode = os.fstat(fd).st_mode
    finally:
        os.close(fd)
    if not stat.S_ISREG(mode):
        return WriteProbe(path, NotFileOrDirectoryError(path))
    return WriteProbe(path)


def write_dir(path: PathArg) -> WriteProbe:
    """Check whether a file can be created inside the directory ``path``.

    Missing directories are skipped in favour of their nearest existing
    ancestor. A denied directory is final even when an ancestor is writable.
    """

    current = os.fspath(path) or os.curdir
    while True:
        exc = try_temp_write(current)
        if exc is None:
            return WriteProbe(current)
        if isinstance(exc, PermissionError):
            logger.debug("temp write denied in %s", current)
            return WriteProbe(current, _denied(current))
        if isinstance(exc, FileNotFoundError):
            parent = _parent(current)
            if parent == current:
                return WriteProbe(current, exc)
            logger.debug("%s does not exist, checking %s", current, parent)
            current = parent
            continue
        return WriteProbe(current, exc)
