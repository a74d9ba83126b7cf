import errno
import os
import stat

import pytest
from conftest import BUCKET, write_file
from objectfs import ObjectFileSystem

try:
    import fuse  # noqa: F401
except (ImportError, OSError):
    pytest.skip("fusepy or libfuse is not available", allow_module_level=True)

from fuse import FuseOSError
from objectfs.client.exceptions import (
    AlreadyExistsError,
    DirectoryNotEmptyError,
    InvalidPathError,
    NotFoundError,
    StoreError,
)
from objectfs.fuse import ObjectFuse, get_mount_options, to_fuse_error

@pytest.fixture
def ops(fs):
    """Fixture to provide FUSE operations over the test filesystem."""
    ops = ObjectFuse(fs)
    yield ops
    ops.destroy("/")

def write_through(ops, path, data):
    fh = ops.create(path, 0o644)
    ops.write(path, data, 0, fh)
    ops.release(path, fh)

def test_error_translation():
    assert to_fuse_error(NotFoundError("gone")).errno == errno.ENOENT
    assert to_fuse_error(AlreadyExistsError("there")).errno == errno.EEXIST
    assert to_fuse_error(DirectoryNotEmptyError("full")).errno == errno.ENOTEMPTY
    assert to_fuse_error(InvalidPathError("bad")).errno == errno.EINVAL
    assert to_fuse_error(StoreError("down")).errno == errno.EIO

def test_getattr(ops, fs):
    assert stat.S_ISDIR(ops.getattr("/")["st_mode"])

    write_file(fs, "/file", b"12345")
    attrs = ops.getattr("/file")
    assert stat.S_ISREG(attrs["st_mode"])
    assert attrs["st_size"] == 5

    with pytest.raises(FuseOSError) as excinfo:
        ops.getattr("/missing")
    assert excinfo.value.errno == errno.ENOENT

def test_create_write_release(ops, store):
    """Test that content written through a handle is uploaded on release."""
    fh = ops.create("/new", 0o644)
    assert ops.write("/new", b"hello", 0, fh) == 5
    assert ops.getattr("/new", fh)["st_size"] == 5
    assert ops.read("/new", 5, 0, fh) == b"hello"
    assert store.keys(BUCKET) == []

    ops.release("/new", fh)
    assert store.get_object(BUCKET, "new") == b"hello"

def test_fsync_uploads(ops, store):
    fh = ops.create("/synced", 0o644)
    ops.write("/synced", b"abc", 0, fh)
    ops.fsync("/synced", 0, fh)
    assert store.get_object(BUCKET, "synced") == b"abc"
    ops.release("/synced", fh)

def test_open_and_read(ops):
    write_through(ops, "/data", b"0123456789")

    fh = ops.open("/data", os.O_RDONLY)
    assert ops.read("/data", 4, 3, fh) == b"3456"
    ops.release("/data", fh)

    with pytest.raises(FuseOSError) as excinfo:
        ops.open("/missing", os.O_RDONLY)
    assert excinfo.value.errno == errno.ENOENT

def test_open_for_write_keeps_content(ops, store):
    write_through(ops, "/doc", b"hello world")

    fh = ops.open("/doc", os.O_WRONLY)
    ops.write("/doc", b"HELLO", 0, fh)
    ops.release("/doc", fh)
    assert store.get_object(BUCKET, "doc") == b"HELLO world"

    fh = ops.open("/doc", os.O_WRONLY | os.O_TRUNC)
    ops.write("/doc", b"new", 0, fh)
    ops.release("/doc", fh)
    assert store.get_object(BUCKET, "doc") == b"new"

def test_truncate(ops, store):
    write_through(ops, "/t", b"abcdef")
    ops.truncate("/t", 3)
    assert store.get_object(BUCKET, "t") == b"abc"
    ops.truncate("/t", 5)
    assert store.get_object(BUCKET, "t") == b"abc\x00\x00"

def test_directories(ops, store):
    """Test mkdir, readdir, rmdir and unlink."""
    assert ops.mkdir("/dir", 0o755) == 0
    with pytest.raises(FuseOSError) as excinfo:
        ops.mkdir("/dir", 0o755)
    assert excinfo.value.errno == errno.EEXIST

    write_through(ops, "/dir/file", b"x")
    assert sorted(ops.readdir("/dir", None)) == [".", "..", "file"]
    assert "dir" in ops.readdir("/", None)

    with pytest.raises(FuseOSError) as excinfo:
        ops.rmdir("/dir")
    assert excinfo.value.errno == errno.ENOTEMPTY
    with pytest.raises(FuseOSError) as excinfo:
        ops.unlink("/dir")
    assert excinfo.value.errno == errno.EISDIR
    with pytest.raises(FuseOSError) as excinfo:
        ops.rmdir("/dir/file")
    assert excinfo.value.errno == errno.ENOTDIR

    ops.unlink("/dir/file")
    ops.rmdir("/dir")
    assert store.keys(BUCKET) == []

def test_rename_replaces_existing_file(ops, store):
    write_through(ops, "/a", b"A")
    write_through(ops, "/b", b"B")

    ops.rename("/a", "/b")
    assert store.keys(BUCKET) == ["b"]
    assert store.get_object(BUCKET, "b") == b"A"

def test_permission_calls_are_accepted(ops):
    write_through(ops, "/f", b"x")
    assert ops.chmod("/f", 0o600) == 0
    assert ops.chown("/f", 1000, 1000) == 0

def test_mount_options():
    options = get_mount_options()
    assert options["foreground"] is True
    assert "allow_other" not in options
    assert get_mount_options(foreground=False, allow_other=True)["allow_other"] is True

def test_failed_rename_keeps_destination(faulty_store):
    faulty_store.put_object(BUCKET, "a", b"A")
    faulty_store.put_object(BUCKET, "b", b"B")
    faulty_store.fail("copy", "a", StoreError("throttled", operation="COPY"))
    ops = ObjectFuse(ObjectFileSystem(faulty_store, BUCKET))

    with pytest.raises(FuseOSError) as excinfo:
        ops.rename("/a", "/b")
    assert excinfo.value.errno == errno.EIO
    assert faulty_store.get_object(BUCKET, "b") == b"B"
    assert faulty_store.get_object(BUCKET, "a") == b"A"
