"""Conversions between TAI timestamps and ring buffer indices."""

from __future__ import annotations

from .rational import Rational
from .timing import Clock, Duration, current_time, sleep

UNDEFINED_INDEX = 2**64 - 1
"""Returned wherever an index or time cannot be computed."""

_U64_MASK = 2**64 - 1
_NS_PER_SECOND = 1_000_000_000


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // abs(divisor)
    return -quotient if (value < 0) != (divisor < 0) else quotient


def _usable(edit_rate: Rational | None) -> bool:
    return edit_rate is not None and edit_rate.denominator != 0 and edit_rate.numerator != 0


def get_time() -> int:
    """Return the current TAI time in nanoseconds since the epoch, or 0 on failure."""
    return current_time(Clock.TAI).value


def timestamp_to_index(edit_rate: Rational | None, timestamp: int) -> int:
    """Return the index containing the timestamp, or UNDEFINED_INDEX for an unusable rate."""
    if not _usable(edit_rate):
        return UNDEFINED_INDEX
    numerator = timestamp * edit_rate.numerator + 500_000_000 * edit_rate.denominator
    return _trunc_div(numerator, _NS_PER_SECOND * edit_rate.denominator) & _U64_MASK


def index_to_timestamp(edit_rate: Rational | None, index: int) -> int:
    """Return the timestamp at which the index begins, or UNDEFINED_INDEX for an unusable rate."""
    if not _usable(edit_rate):
        return UNDEFINED_INDEX
    numerator = index * edit_rate.denominator * _NS_PER_SECOND + _trunc_div(edit_rate.numerator, 2)
    return _trunc_div(numerator, edit_rate.numerator) & _U64_MASK


def get_current_index(edit_rate: Rational | None) -> int:
    """Return the index for the current TAI time, or UNDEFINED_INDEX."""
    if not _usable(edit_rate):
        return UNDEFINED_INDEX
    now = get_time()
    return timestamp_to_index(edit_rate, now) if now else UNDEFINED_INDEX


def get_ns_until_index(index: int, edit_rate: Rational | None) -> int:
    """Return the nanoseconds left until the index begins; 0 if it already has."""
    if not _usable(edit_rate):
        return UNDEFINED_INDEX
    target = index_to_timestamp(edit_rate, index)
    now = get_time()
    return target - now if now != 0 and target >= now else 0


def sleep_for_ns(ns: int) -> None:
    """Sleep for the given number of nanoseconds."""
    sleep(Duration(ns), Clock.TAI)