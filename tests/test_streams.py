import gc

import pytest
from conftest import BUCKET
from objectfs.client.exceptions import ReadError, StoreError, WriteError
from objectfs.fs.streams import ObjectReader, ObjectWriter

class BrokenStream:
    """Underlying read stream that fails mid-transfer."""

    def read(self, size=-1):
        raise ConnectionResetError("connection reset by peer")

    def close(self):
        pass

def test_writer_uploads_on_close(store):
    writer = ObjectWriter(store, BUCKET, "k")
    writer.write(b"hello ")
    writer.write(b"world")
    assert writer.size == 11
    assert store.keys(BUCKET) == []

    writer.close()
    assert writer.closed
    assert store.get_object(BUCKET, "k") == b"hello world"
    writer.close()
    assert store.request_count["put"] == 1

def test_empty_writer_creates_empty_object(store):
    with ObjectWriter(store, BUCKET, "empty"):
        pass
    assert store.get_object(BUCKET, "empty") == b""

def test_positional_writes(store):
    """Test writes at offsets, read-back and truncation of the buffer."""
    writer = ObjectWriter(store, BUCKET, "k", data=b"abc")
    assert writer.write_at(b"XY", 5) == 2
    assert writer.size == 7
    assert writer.read_at(0, 7) == b"abc\x00\x00XY"

    writer.write_at(b"B", 1)
    writer.truncate(4)
    assert writer.size == 4
    writer.close()
    assert store.get_object(BUCKET, "k") == b"aBc\x00"

def test_sync_keeps_writer_open(store):
    writer = ObjectWriter(store, BUCKET, "k")
    writer.write(b"part1")
    writer.sync()
    assert store.get_object(BUCKET, "k") == b"part1"
    assert not writer.closed

    writer.write(b"part2")
    writer.close()
    assert store.get_object(BUCKET, "k") == b"part1part2"

def test_abort_discards(store):
    writer = ObjectWriter(store, BUCKET, "k")
    writer.write(b"data")
    writer.abort()
    assert writer.closed
    assert store.keys(BUCKET) == []

def test_exception_in_with_block_aborts(store):
    with pytest.raises(RuntimeError):
        with ObjectWriter(store, BUCKET, "k") as writer:
            writer.write(b"partial")
            raise RuntimeError("boom")
    assert store.keys(BUCKET) == []

def test_write_after_close(store):
    writer = ObjectWriter(store, BUCKET, "k")
    writer.close()
    with pytest.raises(ValueError):
        writer.write(b"late")

def test_upload_failure_keeps_previous_content(faulty_store):
    faulty_store.put_object(BUCKET, "k", b"old")
    faulty_store.fail("put", "k", StoreError("quota exceeded", operation="PUT"))

    writer = ObjectWriter(faulty_store, BUCKET, "k")
    writer.write(b"new")
    with pytest.raises(WriteError):
        writer.close()
    assert writer.closed
    assert faulty_store.get_object(BUCKET, "k") == b"old"

def test_reader_failure_is_read_error():
    reader = ObjectReader(BrokenStream(), "k", offset=10)
    assert reader.tell() == 10
    with pytest.raises(ReadError):
        reader.read(5)
    reader.close()
    assert reader.closed

def test_dropped_writer_is_discarded(fs, store):
    """Test that a writer garbage-collected without close() uploads nothing."""
    writer = fs.open_for_write("/w")
    writer.write(b"partial")
    del writer
    gc.collect()
    assert store.keys(BUCKET) == []
