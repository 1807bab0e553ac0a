import errno
import fcntl
import os

import pytest

from mediaxl.sharedmem import AccessMode, SharedMemorySegment


@pytest.fixture
def seg_path(tmp_path):
    return tmp_path / "segment.data"


def _exclusive_lock_available(path):
    fd = os.open(path, os.O_RDONLY)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        return False
    else:
        fcntl.flock(fd, fcntl.LOCK_UN)
        return True
    finally:
        os.close(fd)


def test_create_new_file(seg_path):
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 64) as seg:
        assert seg.created is True
        assert seg.access_mode is AccessMode.READ_WRITE
        assert seg.mapped_size == 64
        assert seg.is_valid()
        assert os.path.getsize(seg_path) == 64


def test_create_on_existing_opens_read_write(seg_path):
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 32):
        pass
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 32) as seg:
        assert seg.created is False
        assert seg.access_mode is AccessMode.READ_WRITE


def test_existing_larger_file_maps_whole_file(seg_path):
    seg_path.write_bytes(bytes(100))
    with SharedMemorySegment(seg_path, AccessMode.READ_WRITE, 10) as seg:
        assert seg.mapped_size == 100
        assert len(seg.data) == 100


def test_data_shared_between_segments(seg_path):
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 16) as writer:
        with SharedMemorySegment(seg_path, AccessMode.READ_ONLY, 16) as reader:
            writer.data[0:5] = b"hello"
            assert reader.data[0:5] == b"hello"
    assert seg_path.read_bytes()[:5] == b"hello"


def test_read_only_cannot_write(seg_path):
    seg_path.write_bytes(bytes(8))
    with SharedMemorySegment(seg_path, AccessMode.READ_ONLY, 8) as seg:
        assert seg.access_mode is AccessMode.READ_ONLY
        assert seg.created is False
        with pytest.raises(TypeError):
            seg.data[0:1] = b"x"


def test_missing_file_raises(seg_path):
    with pytest.raises(FileNotFoundError):
        SharedMemorySegment(seg_path, AccessMode.READ_ONLY, 8)


def test_too_small_file_raises(seg_path):
    seg_path.write_bytes(bytes(4))
    with pytest.raises(OSError) as info:
        SharedMemorySegment(seg_path, AccessMode.READ_WRITE, 8)
    assert info.value.errno == errno.ENOMEM


def test_negative_payload_rejected(seg_path):
    with pytest.raises(ValueError):
        SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, -1)


def test_close_invalidates(seg_path):
    seg = SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 16)
    seg.close()
    assert not seg.is_valid()
    assert not seg
    assert seg.mapped_size == 0
    assert seg.data is None


def test_context_manager_closes(seg_path):
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 16) as seg:
        assert bool(seg) is True
    assert seg.is_valid() is False


def test_writer_holds_shared_lock(seg_path):
    seg = SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 16)
    assert _exclusive_lock_available(seg_path) is False
    seg.close()
    assert _exclusive_lock_available(seg_path) is True


def test_reader_holds_no_lock(seg_path):
    seg_path.write_bytes(bytes(16))
    with SharedMemorySegment(seg_path, AccessMode.READ_ONLY, 16):
        assert _exclusive_lock_available(seg_path) is True


def test_touch_read_write_updates_both_times(seg_path):
    old = 1_000_000_000_000_000_000
    with SharedMemorySegment(seg_path, AccessMode.CREATE_READ_WRITE, 16) as seg:
        os.utime(seg_path, ns=(old, old))
        seg.touch()
    st = os.stat(seg_path)
    assert st.st_atime_ns > old
    assert st.st_mtime_ns > old


def test_touch_read_only_keeps_mtime(seg_path):
    old = 1_000_000_000_000_000_000
    seg_path.write_bytes(bytes(16))
    os.utime(seg_path, ns=(old, old))
    with SharedMemorySegment(seg_path, AccessMode.READ_ONLY, 16) as seg:
        seg.touch()
    st = os.stat(seg_path)
    assert st.st_atime_ns > old
    assert st.st_mtime_ns == old