"""Waiting for and signalling changes of 32-bit values in shared buffers.

Waiters in this process are woken directly by wake_one and wake_all; changes made
by other processes are noticed by polling the value at short intervals.
"""

from __future__ import annotations

import struct
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from .timing import Clock, Duration, Timepoint, current_time

_U32 = struct.Struct("=I")
_U32_MASK = 0xFFFFFFFF
_POLL_INTERVAL = 0.001


@dataclass
class _WaitPoint:
    condition: threading.Condition = field(default_factory=threading.Condition)
    users: int = 0


_registry: dict[tuple[int, int], _WaitPoint] = {}
_registry_lock = threading.Lock()


def _key(buffer: object, offset: int) -> tuple[int, int]:
    root = buffer
    while isinstance(root, memoryview) and root.obj is not None:
        root = root.obj
    return id(root), offset


def _read(buffer: object, offset: int) -> int:
    if offset < 0:
        raise ValueError("offset must not be negative")
    try:
        return _U32.unpack_from(buffer, offset)[0]
    except struct.error as exc:
        raise ValueError(f"no 32-bit value at offset {offset}: {exc}") from exc


@contextmanager
def _wait_point(key: tuple[int, int]) -> Iterator[_WaitPoint]:
    with _registry_lock:
        point = _registry.setdefault(key, _WaitPoint())
        point.users += 1
    try:
        yield point
    finally:
        with _registry_lock:
            point.users -= 1
            if point.users == 0:
                _registry.pop(key, None)


def wait_until_deadline(buffer: object, offset: int, expected: int, deadline: Timepoint) -> bool:
    """Wait until the value at `offset` differs from `expected` or the realtime deadline passes.

    Return True if the value changed, False on timeout.
    """
    expected &= _U32_MASK
    _read(buffer, offset)
    with _wait_point(_key(buffer, offset)) as point, point.condition:
        while True:
            now = current_time(Clock.REALTIME)
            if now >= deadline:
                return False
            if _read(buffer, offset) != expected:
                return True
            remaining = (deadline - now).in_seconds()
            point.condition.wait(min(remaining, _POLL_INTERVAL))


def wait_until_changed(buffer: object, offset: int, expected: int, timeout: Duration | int) -> bool:
    """Wait up to `timeout` (a Duration or nanoseconds) for the value at `offset` to change."""
    if not isinstance(timeout, Duration):
        timeout = Duration(timeout)
    return wait_until_deadline(buffer, offset, expected, current_time(Clock.REALTIME) + timeout)


def _notify(buffer: object, offset: int, count: int | None) -> None:
    _read(buffer, offset)
    with _registry_lock:
        point = _registry.get(_key(buffer, offset))
    if point is None:
        return
    with point.condition:
        if count is None:
            point.condition.notify_all()
        else:
            point.condition.notify(count)


def wake_one(buffer: object, offset: int) -> None:
    """Wake a single waiter on the value at `offset`."""
    _notify(buffer, offset, 1)


def wake_all(buffer: object, offset: int) -> None:
    """Wake every waiter on the value at `offset`."""
    _notify(buffer, offset, None)