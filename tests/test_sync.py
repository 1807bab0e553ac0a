import struct
import threading
import time

import pytest

from mediaxl.sync import wait_until_changed, wait_until_deadline, wake_all, wake_one
from mediaxl.timing import Clock, Duration, Timepoint, current_time


def _counter(value=0):
    return bytearray(struct.pack("=I", value))


def _set(buffer, value):
    struct.pack_into("=I", buffer, 0, value)


def test_returns_true_when_value_already_differs():
    buffer = _counter(5)
    assert wait_until_changed(buffer, 0, 4, Duration.from_seconds(1.0)) is True


def test_times_out_when_value_unchanged():
    buffer = _counter(5)
    start = time.monotonic()
    assert wait_until_changed(buffer, 0, 5, Duration.from_milliseconds(30)) is False
    assert time.monotonic() - start >= 0.025


def test_integer_timeout_in_nanoseconds():
    buffer = _counter(1)
    assert wait_until_changed(buffer, 0, 1, 10_000_000) is False


def test_deadline_in_past_times_out_even_if_changed():
    buffer = _counter(9)
    assert wait_until_deadline(buffer, 0, 1, Timepoint(1)) is False


def test_deadline_in_future_sees_change():
    buffer = _counter(2)
    deadline = current_time(Clock.REALTIME) + Duration.from_seconds(1.0)
    assert wait_until_deadline(buffer, 0, 1, deadline) is True


def _change_later(buffer, value, wake):
    def run():
        time.sleep(0.05)
        _set(buffer, value)
        wake(buffer, 0)

    thread = threading.Thread(target=run)
    thread.start()
    return thread


@pytest.mark.parametrize("wake", [wake_one, wake_all])
def test_wake_after_change_releases_waiter(wake):
    buffer = _counter(0)
    thread = _change_later(buffer, 1, wake)
    result = wait_until_changed(buffer, 0, 0, Duration.from_seconds(5.0))
    thread.join()
    assert result is True


def test_wake_all_releases_several_waiters():
    buffer = _counter(0)
    results = []

    def waiter():
        results.append(wait_until_changed(buffer, 0, 0, Duration.from_seconds(5.0)))

    waiters = [threading.Thread(target=waiter) for _ in range(3)]
    for thread in waiters:
        thread.start()
    time.sleep(0.05)
    _set(buffer, 7)
    wake_all(buffer, 0)
    for thread in waiters:
        thread.join()
    assert results == [True, True, True]
    assert wait_until_changed(buffer, 0, 0, Duration.from_milliseconds(10)) is True
    assert wait_until_changed(buffer, 0, 7, Duration.from_milliseconds(10)) is False


def test_change_without_wake_is_noticed():
    buffer = _counter(0)

    def run():
        time.sleep(0.05)
        _set(buffer, 3)

    thread = threading.Thread(target=run)
    thread.start()
    result = wait_until_changed(buffer, 0, 0, Duration.from_seconds(5.0))
    thread.join()
    assert result is True


def test_signed_expected_matches_unsigned_value():
    buffer = _counter(0xFFFFFFFF)
    assert wait_until_changed(buffer, 0, -1, Duration.from_milliseconds(10)) is False


def test_works_through_memoryview_with_offset():
    buffer = bytearray(8)
    struct.pack_into("=I", buffer, 4, 11)
    view = memoryview(buffer)
    assert wait_until_changed(view, 4, 11, Duration.from_milliseconds(10)) is False
    assert wait_until_changed(view, 4, 10, Duration.from_milliseconds(10)) is True


def test_out_of_range_offset_raises():
    with pytest.raises(ValueError):
        wait_until_changed(_counter(), 2, 0, Duration.from_milliseconds(10))


def test_negative_offset_raises():
    with pytest.raises(ValueError):
        wait_until_changed(_counter(), -1, 0, Duration.from_milliseconds(10))


def test_wake_out_of_range_raises():
    with pytest.raises(ValueError):
        wake_all(_counter(), 4)
    with pytest.raises(ValueError):
        wake_one(_counter(), 4)


def test_wake_without_waiters_leaves_value_unchanged():
    buffer = _counter(4)
    wake_all(buffer, 0)
    wake_one(buffer, 0)
    assert wait_until_changed(buffer, 0, 4, Duration.from_milliseconds(10)) is False