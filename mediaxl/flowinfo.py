"""The binary flow header kept in shared memory, and its text report."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass, field

from .dataformat import DataFormat, is_continuous_data_format, is_discrete_data_format
from .rational import Rational
from .timebase import get_time, timestamp_to_index

FLOW_INFO_VERSION = 1
FLOW_INFO_SIZE = 4096
USER_DATA_SIZE = 3840

_HEADER = struct.Struct("=II")
_COMMON = struct.Struct("=16sQQII80x")
_DISCRETE = struct.Struct("=qqIIQ96x")
_CONTINUOUS = struct.Struct("=qqIIIIQ88x")

_COMMON_OFFSET = _HEADER.size
_MEDIA_OFFSET = _COMMON_OFFSET + _COMMON.size
_MEDIA_SIZE = max(_DISCRETE.size, _CONTINUOUS.size)
_USER_DATA_OFFSET = _MEDIA_OFFSET + _MEDIA_SIZE

_U64_MASK = 2**64 - 1

_FORMAT_NAMES = {
    DataFormat.UNSPECIFIED: "UNSPECIFIED",
    DataFormat.VIDEO: "Video",
    DataFormat.AUDIO: "Audio",
    DataFormat.DATA: "Data",
    DataFormat.MUX: "Multiplexed",
}


def _zero_rate() -> Rational:
    return Rational(0, 0)


@dataclass
class CommonFlowInfo:
    """Metadata shared by flows of every data format."""

    id: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    last_write_time: int = 0
    last_read_time: int = 0
    format: int = DataFormat.UNSPECIFIED
    flags: int = 0


@dataclass
class DiscreteFlowInfo:
    """Header data of flows made of discrete grains."""

    grain_rate: Rational = field(default_factory=_zero_rate)
    grain_count: int = 0
    sync_counter: int = 0
    head_index: int = 0


@dataclass
class ContinuousFlowInfo:
    """Header data of flows made of continuous samples."""

    sample_rate: Rational = field(default_factory=_zero_rate)
    channel_count: int = 0
    buffer_length: int = 0
    commit_batch_size: int = 0
    sync_batch_size: int = 0
    head_index: int = 0


@dataclass
class FlowInfo:
    """The complete flow header with its format specific part."""

    common: CommonFlowInfo = field(default_factory=CommonFlowInfo)
    media: DiscreteFlowInfo | ContinuousFlowInfo = field(default_factory=DiscreteFlowInfo)
    user_data: bytes = b""
    version: int = FLOW_INFO_VERSION
    size: int = FLOW_INFO_SIZE

    def pack(self) -> bytes:
        """Return the header in its shared memory layout."""
        if len(self.user_data) > USER_DATA_SIZE:
            raise ValueError(f"user data exceeds {USER_DATA_SIZE} bytes")
        buffer = bytearray(FLOW_INFO_SIZE)
        common = self.common
        media = self.media
        try:
            _HEADER.pack_into(buffer, 0, self.version, self.size)
            _COMMON.pack_into(
                buffer,
                _COMMON_OFFSET,
                common.id.bytes,
                common.last_write_time,
                common.last_read_time,
                int(common.format),
                common.flags,
            )
            if isinstance(media, ContinuousFlowInfo):
                _CONTINUOUS.pack_into(
                    buffer,
                    _MEDIA_OFFSET,
                    media.sample_rate.numerator,
                    media.sample_rate.denominator,
                    media.channel_count,
                    media.buffer_length,
                    media.commit_batch_size,
                    media.sync_batch_size,
                    media.head_index,
                )
            else:
                _DISCRETE.pack_into(
                    buffer,
                    _MEDIA_OFFSET,
                    media.grain_rate.numerator,
                    media.grain_rate.denominator,
                    media.grain_count,
                    media.sync_counter,
                    media.head_index,
                )
        except struct.error as exc:
            raise ValueError(f"flow info field out of range: {exc}") from exc
        buffer[_USER_DATA_OFFSET : _USER_DATA_OFFSET + len(self.user_data)] = self.user_data
        return bytes(buffer)

    @classmethod
    def unpack(cls, data: bytes) -> FlowInfo:
        """Read a header from its shared memory layout."""
        if len(data) < FLOW_INFO_SIZE:
            raise ValueError(f"flow info needs {FLOW_INFO_SIZE} bytes, got {len(data)}")
        version, size = _HEADER.unpack_from(data, 0)
        raw_id, last_write, last_read, fmt, flags = _COMMON.unpack_from(data, _COMMON_OFFSET)
        common = CommonFlowInfo(uuid.UUID(bytes=bytes(raw_id)), last_write, last_read, fmt, flags)
        media: DiscreteFlowInfo | ContinuousFlowInfo
        if is_continuous_data_format(fmt):
            num, den, channels, length, commit, sync, head = _CONTINUOUS.unpack_from(data, _MEDIA_OFFSET)
            media = ContinuousFlowInfo(Rational(num, den), channels, length, commit, sync, head)
        else:
            num, den, count, counter, head = _DISCRETE.unpack_from(data, _MEDIA_OFFSET)
            media = DiscreteFlowInfo(Rational(num, den), count, counter, head)
        user_data = bytes(data[_USER_DATA_OFFSET:FLOW_INFO_SIZE])
        return cls(common, media, user_data, version, size)


def _format_name(fmt: int) -> str:
    try:
        return _FORMAT_NAMES[DataFormat(fmt)]
    except ValueError:
        return "UNKNOWN"


def _row(label: str, value: object) -> str:
    return f"\t{label:>18}: {value}"


def format_flow_info(info: FlowInfo, now: int | None = None) -> str:
    """Return a readable report of a flow header; `now` defaults to the current TAI time."""
    if now is None:
        now = get_time()
    common = info.common
    media = info.media
    lines = [
        f"- Flow [{common.id}]",
        _row("Version", info.version),
        _row("Struct size", info.size),
        _row("Last write time", common.last_write_time),
        _row("Last read time", common.last_read_time),
        _row("Format", _format_name(common.format)),
        _row("Flags", f"{common.flags:08x}"),
    ]
    if isinstance(media, ContinuousFlowInfo):
        rate = media.sample_rate
    else:
        rate = media.grain_rate

    if is_discrete_data_format(common.format) and isinstance(media, DiscreteFlowInfo):
        lines += [
            _row("Grain rate", f"{rate.numerator}/{rate.denominator}"),
            _row("Grain count", media.grain_count),
            _row("Head index", media.head_index),
        ]
    elif is_continuous_data_format(common.format) and isinstance(media, ContinuousFlowInfo):
        lines += [
            _row("Sample rate", f"{rate.numerator}/{rate.denominator}"),
            _row("Channel count", media.channel_count),
            _row("Buffer length", media.buffer_length),
            _row("Commit batch size", media.commit_batch_size),
            _row("Sync batch size", media.sync_batch_size),
            _row("Head index", media.head_index),
        ]

    current_index = timestamp_to_index(rate, now)
    lines += [
        _row("Latency (grains)", (current_index - media.head_index) & _U64_MASK),
        _row("Latency (ns)", (now - common.last_write_time) & _U64_MASK),
    ]
    return "\n".join(lines) + "\n"