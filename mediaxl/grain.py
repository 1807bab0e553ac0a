"""Grain headers and views of payload regions in ring buffers."""

from __future__ import annotations

import enum
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field

GRAIN_FLAG_INVALID = 0x00000001
"""Marks a grain whose payload must not be used; it still advances the ring buffer."""

GRAIN_INFO_VERSION = 1
USER_DATA_SIZE = 4068

_LAYOUT = struct.Struct(f"=IIIIiII{USER_DATA_SIZE}s")
GRAIN_INFO_SIZE = _LAYOUT.size


class PayloadLocation(enum.IntEnum):
    """Where the payload of a grain lives."""

    HOST_MEMORY = 0
    DEVICE_MEMORY = 1


@dataclass(frozen=True)
class WrappedBufferSlice:
    """A byte range in a ring buffer, split in two where it wraps around."""

    fragments: tuple[memoryview, memoryview]

    def __post_init__(self) -> None:
        first, second = self.fragments
        object.__setattr__(self, "fragments", (memoryview(first).cast("B"), memoryview(second).cast("B")))

    def __len__(self) -> int:
        return sum(fragment.nbytes for fragment in self.fragments)

    def tobytes(self) -> bytes:
        """Return the bytes of both fragments joined in order."""
        return b"".join(fragment.tobytes() for fragment in self.fragments)


def _check_range(offset: int, size: int) -> None:
    if offset < 0 or size < 0:
        raise ValueError("fragment offsets and sizes must not be negative")


@dataclass(frozen=True)
class WrappedMultiBufferSlice:
    """The same wrapped range in each of `count` ring buffers spaced `stride` bytes apart.

    `fragments` holds (offset, size) pairs relative to the start of the first buffer.
    """

    memory: memoryview
    fragments: tuple[tuple[int, int], tuple[int, int]]
    stride: int
    count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "memory", memoryview(self.memory).cast("B"))
        if self.stride < 0 or self.count < 0:
            raise ValueError("stride and count must not be negative")
        if self.count == 0:
            return
        last_base = (self.count - 1) * self.stride
        for offset, size in self.fragments:
            _check_range(offset, size)
            if last_base + offset + size > self.memory.nbytes:
                raise ValueError("slice extends past the end of the memory region")

    def buffers(self) -> Iterator[WrappedBufferSlice]:
        """Yield the wrapped slice of each buffer in turn."""
        for index in range(self.count):
            base = index * self.stride
            first, second = (
                self.memory[base + offset : base + offset + size] for offset, size in self.fragments
            )
            yield WrappedBufferSlice((first, second))


@dataclass
class GrainInfo:
    """Header describing one grain of a discrete flow."""

    flags: int = 0
    payload_location: PayloadLocation = PayloadLocation.HOST_MEMORY
    device_index: int = -1
    grain_size: int = 0
    committed_size: int = 0
    user_data: bytes = field(default=b"", repr=False)
    version: int = GRAIN_INFO_VERSION
    size: int = GRAIN_INFO_SIZE

    def is_complete(self) -> bool:
        """Return whether every byte of the payload has been committed."""
        return self.committed_size == self.grain_size

    def is_invalid(self) -> bool:
        """Return whether the grain is flagged as invalid."""
        return bool(self.flags & GRAIN_FLAG_INVALID)

    def pack(self) -> bytes:
        """Return the header in its shared memory layout."""
        if len(self.user_data) > USER_DATA_SIZE:
            raise ValueError(f"user data exceeds {USER_DATA_SIZE} bytes")
        try:
            return _LAYOUT.pack(
                self.version,
                self.size,
                self.flags,
                int(self.payload_location),
                self.device_index,
                self.grain_size,
                self.committed_size,
                bytes(self.user_data),
            )
        except struct.error as exc:
            raise ValueError(f"grain info field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> GrainInfo:
        """Read a header from its shared memory layout."""
        if len(data) < GRAIN_INFO_SIZE:
            raise ValueError(f"grain info needs {GRAIN_INFO_SIZE} bytes, got {len(data)}")
        version, size, flags, location, device, grain_size, committed, user_data = _LAYOUT.unpack_from(data, 0)
        return cls(
            flags=flags,
            payload_location=PayloadLocation(location),
            device_index=device,
            grain_size=grain_size,
            committed_size=committed,
            user_data=bytes(user_data),
            version=version,
            size=size,
        )