"""Clocks, points in time and durations with nanosecond resolution."""

from __future__ import annotations

import enum
import os
import time
from dataclasses import dataclass

_NS_PER_SECOND = 1_000_000_000
_NS_PER_MILLISECOND = 1_000_000
_NS_PER_MICROSECOND = 1_000


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """Divide rounding toward zero; the remainder takes the dividend's sign."""
    quotient = abs(value) // abs(divisor)
    if (value < 0) != (divisor < 0):
        quotient = -quotient
    return quotient, value - quotient * divisor


class Clock(enum.Enum):
    """The clocks available on the system."""

    MONOTONIC = enum.auto()
    REALTIME = enum.auto()
    TAI = enum.auto()
    PROCESS_CPU_TIME = enum.auto()
    THREAD_CPU_TIME = enum.auto()


_CLOCK_ID_NAMES = {
    Clock.MONOTONIC: "CLOCK_MONOTONIC",
    Clock.REALTIME: "CLOCK_REALTIME",
    Clock.TAI: "CLOCK_TAI",
    Clock.PROCESS_CPU_TIME: "CLOCK_PROCESS_CPUTIME_ID",
    Clock.THREAD_CPU_TIME: "CLOCK_THREAD_CPUTIME_ID",
}

_CLOCK_FALLBACKS = {
    Clock.MONOTONIC: time.monotonic_ns,
    Clock.REALTIME: time.time_ns,
    Clock.TAI: time.time_ns,
    Clock.PROCESS_CPU_TIME: time.process_time_ns,
    Clock.THREAD_CPU_TIME: time.thread_time_ns,
}


def _clock_id(clock: Clock) -> int | None:
    clock_id = getattr(time, _CLOCK_ID_NAMES[clock], None)
    if clock_id is None and clock is Clock.TAI:
        clock_id = getattr(time, "CLOCK_REALTIME", None)
    return clock_id


@dataclass(frozen=True, order=True)
class TimeSpec:
    """A time value split into whole seconds and nanoseconds."""

    tv_sec: int = 0
    tv_nsec: int = 0


@dataclass(frozen=True, order=True)
class Timepoint:
    """A point in time, in nanoseconds since the clock's epoch."""

    value: int = 0

    def __bool__(self) -> bool:
        return self.value != 0

    def __add__(self, other: object) -> Timepoint:
        if isinstance(other, Duration):
            return Timepoint(max(self.value + other.value, 0))
        return NotImplemented

    def __sub__(self, other: object) -> Timepoint | Duration:
        if isinstance(other, Timepoint):
            return Duration(self.value - other.value)
        if isinstance(other, Duration):
            return Timepoint(max(self.value - other.value, 0))
        return NotImplemented

    def as_timespec(self) -> TimeSpec:
        """Return this point in time as seconds and nanoseconds."""
        seconds, nanoseconds = _trunc_divmod(self.value, _NS_PER_SECOND)
        return TimeSpec(seconds, nanoseconds)

    @classmethod
    def from_timespec(cls, timespec: TimeSpec) -> Timepoint:
        """Build a point in time from seconds and nanoseconds."""
        return cls(timespec.tv_sec * _NS_PER_SECOND + timespec.tv_nsec)


@dataclass(frozen=True, order=True)
class Duration:
    """A span of time in nanoseconds."""

    value: int = 0

    def __bool__(self) -> bool:
        return self.value != 0

    def __add__(self, other: object) -> Duration:
        if isinstance(other, Duration):
            return Duration(self.value + other.value)
        return NotImplemented

    def __sub__(self, other: object) -> Duration:
        if isinstance(other, Duration):
            return Duration(self.value - other.value)
        return NotImplemented

    def __mul__(self, other: object) -> Duration:
        if isinstance(other, int) and not isinstance(other, bool):
            return Duration(self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Duration:
        if isinstance(other, int) and not isinstance(other, bool):
            return Duration(_trunc_divmod(self.value, other)[0])
        return NotImplemented

    def in_seconds(self) -> float:
        return self.value / _NS_PER_SECOND

    def in_milliseconds(self) -> float:
        return self.value / _NS_PER_MILLISECOND

    def in_microseconds(self) -> float:
        return self.value / _NS_PER_MICROSECOND

    def in_nanoseconds(self) -> float:
        return float(self.value)

    @classmethod
    def from_seconds(cls, seconds: float) -> Duration:
        return cls(int(seconds * _NS_PER_SECOND))

    @classmethod
    def from_milliseconds(cls, milliseconds: float) -> Duration:
        return cls(int(milliseconds * _NS_PER_MILLISECOND))

    @classmethod
    def from_microseconds(cls, microseconds: float) -> Duration:
        return cls(int(microseconds * _NS_PER_MICROSECOND))

    def as_timespec(self) -> TimeSpec:
        """Return this duration as seconds and nanoseconds."""
        seconds, nanoseconds = _trunc_divmod(self.value, _NS_PER_SECOND)
        return TimeSpec(seconds, nanoseconds)

    @classmethod
    def from_timespec(cls, timespec: TimeSpec) -> Duration:
        """Build a duration from seconds and nanoseconds."""
        return cls(timespec.tv_sec * _NS_PER_SECOND + timespec.tv_nsec)


def current_time(clock: Clock) -> Timepoint:
    """Return the current time of the given clock, or a zero Timepoint on failure."""
    clock_id = _clock_id(clock)
    try:
        if clock_id is not None and hasattr(time, "clock_gettime_ns"):
            return Timepoint(time.clock_gettime_ns(clock_id))
        return Timepoint(_CLOCK_FALLBACKS[clock]())
    except OSError:
        return Timepoint()


def current_time_utc() -> Timepoint:
    """Return the current UTC time in nanoseconds since the Unix epoch."""
    return Timepoint(time.time_ns())


def sleep(duration: Duration, clock: Clock = Clock.REALTIME) -> Duration:
    """Sleep for the given duration and return the part of it not slept."""
    if duration.value > 0:
        time.sleep(duration.value / _NS_PER_SECOND)
    return Duration()


def sleep_until(timepoint: Timepoint, clock: Clock = Clock.REALTIME) -> int:
    """Sleep until the clock reaches the given point in time; return 0 on success."""
    now = current_time(clock)
    if timepoint > now:
        remaining = timepoint - now
        time.sleep(remaining.value / _NS_PER_SECOND)
    return 0


def yield_thread() -> None:
    """Give up the rest of the current thread's time slice."""
    if hasattr(os, "sched_yield"):
        os.sched_yield()
    else:
        time.sleep(0)