# mediaxl

Building blocks for exchanging media flows (video, audio and data) between
processes on one host. A flow is a ring buffer of *grains* (discrete flows) or
*samples* (continuous flows) kept in a file-backed shared memory segment, with
a fixed-size binary header describing it. The package depends only on the
standard library.

## What is in the package

- **`mediaxl.timing`**: `Timepoint` and `Duration`, integer nanosecond values
  with arithmetic and comparisons, conversion to and from `TimeSpec`
  (seconds and nanoseconds), and `Duration.from_seconds` /
  `from_milliseconds` / `from_microseconds` and `in_seconds` /
  `in_milliseconds` / `in_microseconds` / `in_nanoseconds`. Adding to or
  subtracting from a `Timepoint` never goes below zero. `current_time(clock)`
  reads one of the `Clock` members (`MONOTONIC`, `REALTIME`, `TAI`,
  `PROCESS_CPU_TIME`, `THREAD_CPU_TIME`); where the system has no TAI clock,
  the realtime clock is used. Also `current_time_utc()`, `sleep()`,
  `sleep_until()` and `yield_thread()`.
- **`mediaxl.rational`**: `Rational(numerator, denominator)`. Equality
  compares by cross multiplication, so `Rational(30000, 1001) ==
  Rational(60000, 2002)`; instances are not hashable. `is_valid()` checks for
  a non-zero denominator.
- **`mediaxl.dataformat`**: `DataFormat` (`UNSPECIFIED`, `VIDEO`, `AUDIO`,
  `DATA`, `MUX`) and `is_valid_data_format`, `is_supported_data_format`
  (video, audio, data), `is_discrete_data_format` (video, data) and
  `is_continuous_data_format` (audio).
- **`mediaxl.status`**: the `Status` codes, the `MxlError` exception (its
  `status` attribute holds the `Status`; it refuses `Status.OK`), `Version`
  and `get_version()`, which returns `0.7.1.0`.
- **`mediaxl.timebase`**: conversion between TAI timestamps (nanoseconds) and
  ring-buffer indices at an edit rate: `get_time()`, `get_current_index()`,
  `timestamp_to_index()`, `index_to_timestamp()`, `get_ns_until_index()` and
  `sleep_for_ns()`. With a missing rate, or one whose numerator or denominator
  is zero, these return `UNDEFINED_INDEX` (`2**64 - 1`).
- **`mediaxl.flowinfo`**: `FlowInfo` with `CommonFlowInfo` and either
  `DiscreteFlowInfo` or `ContinuousFlowInfo`. `pack()` produces the
  4096-byte header layout and `FlowInfo.unpack()` reads it back; fields out of
  range raise `ValueError`. `format_flow_info(info, now)` returns a readable
  report including latency in grains and nanoseconds.
- **`mediaxl.grain`**: `GrainInfo` headers with `pack()` / `unpack()`,
  `is_complete()` and `is_invalid()` (the `GRAIN_FLAG_INVALID` flag),
  `PayloadLocation`, and the slice types `WrappedBufferSlice` and
  `WrappedMultiBufferSlice`, whose `buffers()` yields one wrapped slice per
  ring buffer.
- **`mediaxl.sync`**: `wait_until_changed(buffer, offset, expected, timeout)`
  and `wait_until_deadline(...)` wait for a 32-bit value in a buffer to differ
  from `expected`, returning `False` on timeout; `wake_one()` and `wake_all()`
  wake waiters in the same process. Changes made by other processes are seen
  by polling about once a millisecond.
- **`mediaxl.sharedmem`**: `SharedMemorySegment(path, mode, payload_size)`
  maps a file opened through an `AccessMode`. `CREATE_READ_WRITE` creates the
  file at `payload_size` bytes, or opens it if it already exists; writable
  segments hold a shared advisory lock while open. A file smaller than
  `payload_size`, or empty, raises `OSError`. It offers `data`, `mapped_size`,
  `access_mode`, `created`, `is_valid()`, `touch()`, `close()` and use as a
  context manager.

## Installation

```
pip install .
```

## Examples

Convert between timestamps and grain indices:

```python
from mediaxl.rational import Rational
from mediaxl.timebase import get_current_index, index_to_timestamp, get_ns_until_index, sleep_for_ns

rate = Rational(30000, 1001)
index = get_current_index(rate)
print(index, index_to_timestamp(rate, index))

# Wait until the next grain is due.
sleep_for_ns(get_ns_until_index(index + 1, rate))
```

Work with durations and clocks:

```python
from mediaxl.timing import Clock, Duration, current_time, sleep

start = current_time(Clock.MONOTONIC)
sleep(Duration.from_milliseconds(5), Clock.MONOTONIC)
elapsed = current_time(Clock.MONOTONIC) - start
print(elapsed.in_milliseconds())
```

Map a shared segment and describe the flow header it holds:

```python
from mediaxl.sharedmem import AccessMode, SharedMemorySegment
from mediaxl.flowinfo import FlowInfo, format_flow_info

with SharedMemorySegment("/dev/shm/example.data", AccessMode.READ_ONLY, 0) as segment:
    info = FlowInfo.unpack(segment.data)
    print(format_flow_info(info, now=0))
```

## What the package does not do

It provides the pieces a flow is built from, not flows themselves. There is
no domain or instance object, no flow reader or writer that opens grains or
samples in a ring buffer, no creation or removal of flows from a JSON flow
definition, no garbage collection of stale flows, and no command-line tool
for listing or inspecting flows. Waiting in `mediaxl.sync` uses in-process
conditions and polling rather than operating-system futexes.

## Running the tests

```
pip install ".[test]"
pytest
```