"""File-backed shared memory segments mapped into the process."""

from __future__ import annotations

import enum
import errno
import logging
import mmap
import os
import time

try:
    import fcntl
except ImportError:  # pragma: no cover - platforms without advisory locks
    fcntl = None  # type: ignore[assignment]

_log = logging.getLogger(__name__)

_CLOEXEC = getattr(os, "O_CLOEXEC", 0)
_OMODE_CREATE = os.O_EXCL | os.O_CREAT | os.O_RDWR | _CLOEXEC
_OMODE_RO = os.O_RDONLY | _CLOEXEC
_OMODE_RW = os.O_RDWR | _CLOEXEC
_FILE_PERMISSIONS = 0o664


class AccessMode(enum.Enum):
    """How a shared memory segment is opened."""

    READ_ONLY = enum.auto()
    READ_WRITE = enum.auto()
    CREATE_READ_WRITE = enum.auto()


class SharedMemorySegment:
    """A file mapped into memory and shared with other processes.

    Opening with CREATE_READ_WRITE creates the file with the given payload size if it
    does not exist yet, and otherwise opens the existing file for reading and writing.
    Writable segments hold a shared advisory lock on the file while open, which lets
    other processes tell whether the file is still in use.
    """

    def __init__(self, path: str | os.PathLike[str], mode: AccessMode, payload_size: int) -> None:
        if payload_size < 0:
            raise ValueError("payload size must not be negative")
        self._path = os.fspath(path)
        self._fd = -1
        self._mode = AccessMode.READ_ONLY
        self._map: mmap.mmap | None = None
        self._mapped_size = 0
        try:
            self._open(mode, payload_size)
        except BaseException:
            self.close()
            raise

    def _open(self, mode: AccessMode, payload_size: int) -> None:
        created = False
        if mode is AccessMode.CREATE_READ_WRITE:
            try:
                self._fd = os.open(self._path, _OMODE_CREATE, _FILE_PERMISSIONS)
                created = True
            except FileExistsError:
                self._fd = -1
        if created:
            os.ftruncate(self._fd, payload_size)
            self._mode = AccessMode.CREATE_READ_WRITE
        else:
            read_only = mode is AccessMode.READ_ONLY
            self._fd = os.open(self._path, _OMODE_RO if read_only else _OMODE_RW)
            self._mode = AccessMode.READ_ONLY if read_only else AccessMode.READ_WRITE

        writable = mode is not AccessMode.READ_ONLY
        if writable and fcntl is not None:
            try:
                fcntl.flock(self._fd, fcntl.LOCK_SH | fcntl.LOCK_NB)
            except OSError as exc:
                _log.warning("Failed to acquire a shared advisory lock on file: %s, %s", self._path, exc.strerror)

        file_size = os.fstat(self._fd).st_size
        if file_size < payload_size:
            raise OSError(
                errno.ENOMEM,
                "Shared memory segment does not meet the minimum size requirements.",
                self._path,
            )
        if file_size == 0:
            raise OSError(errno.EINVAL, "Could not map shared memory segment.", self._path)
        access = mmap.ACCESS_WRITE if writable else mmap.ACCESS_READ
        self._map = mmap.mmap(self._fd, file_size, access=access)
        self._mapped_size = file_size

    @property
    def path(self) -> str:
        """The path of the backing file."""
        return self._path

    def is_valid(self) -> bool:
        """Return whether the segment currently holds a mapping."""
        return self._map is not None

    def __bool__(self) -> bool:
        return self.is_valid()

    @property
    def mapped_size(self) -> int:
        """The size of the mapping in bytes, 0 once closed."""
        return self._mapped_size

    @property
    def access_mode(self) -> AccessMode:
        """READ_ONLY or READ_WRITE; a created segment reports READ_WRITE."""
        return AccessMode.READ_ONLY if self._mode is AccessMode.READ_ONLY else AccessMode.READ_WRITE

    @property
    def created(self) -> bool:
        """Whether the backing file was created when this segment was opened."""
        return self._mode is AccessMode.CREATE_READ_WRITE

    @property
    def data(self) -> mmap.mmap | None:
        """The mapped memory, or None once the segment is closed.

        Views taken of it must be released before the segment is closed.
        """
        return self._map

    def touch(self) -> None:
        """Update the file's access time, and its modification time if writable."""
        if self._fd == -1:
            _log.error("Failed to update file times")
            return
        try:
            now = time.time_ns()
            if self.access_mode is AccessMode.READ_ONLY:
                mtime = os.fstat(self._fd).st_mtime_ns
                times = (now, mtime)
            else:
                times = (now, now)
            target: int | str = self._fd if os.utime in os.supports_fd else self._path
            os.utime(target, ns=times)
        except OSError:
            _log.error("Failed to update file times")

    def close(self) -> None:
        """Unmap the memory, release the lock and close the file."""
        if self._map is not None:
            self._map.close()
            self._map = None
        self._mapped_size = 0
        if self._fd != -1:
            if fcntl is not None:
                try:
                    fcntl.flock(self._fd, fcntl.LOCK_UN)
                except OSError:
                    pass
            try:
                os.close(self._fd)
            except OSError:
                pass
            self._fd = -1

    def __enter__(self) -> SharedMemorySegment:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self._path!r}, mode={self.access_mode.name}, "
            f"mapped_size={self._mapped_size}, created={self.created})"
        )