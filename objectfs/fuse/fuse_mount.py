# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE mount of an ObjectFileSystem.

This module exposes an ObjectFileSystem as a local filesystem. FUSE
operations are translated to facade calls; the facade's typed errors are
translated to errno values.

Usage:
    from objectfs import InMemoryObjectStore, ObjectFileSystem
    from objectfs.fuse import mount

    fs = ObjectFileSystem(InMemoryObjectStore(), "my-bucket")
    mount(fs, "/mnt/objectfs")

    # Now you can work with the files as if they were local
    ls /mnt/objectfs
"""

from fuse import FUSE, FuseOSError, Operations
import errno
import itertools
import os
import stat
import time
from threading import Lock

from ..client.exceptions import (
    AlreadyExistsError,
    DirectoryNotEmptyError,
    InvalidPathError,
    NotFoundError,
    ObjectFSError,
)
from ..fs.paths import path_to_key
from ..utils import logger, time_function, trace_op
from .mount_utils import unmount, setup_signal_handlers, get_mount_options

ERRNO_BY_ERROR = (
    (NotFoundError, errno.ENOENT),
    (AlreadyExistsError, errno.EEXIST),
    (DirectoryNotEmptyError, errno.ENOTEMPTY),
    (InvalidPathError, errno.EINVAL),
)

def to_fuse_error(e):
    """
    Map an objectfs error to a FuseOSError.

    Args:
        e (Exception): Error raised by the filesystem facade

    Returns:
        FuseOSError: ENOENT, EEXIST, ENOTEMPTY, EINVAL, or EIO for everything else
    """
    for error_cls, code in ERRNO_BY_ERROR:
        if isinstance(e, error_cls):
            return FuseOSError(code)
    return FuseOSError(errno.EIO)


class ObjectFuse(Operations):
    """
    FUSE operations backed by an ObjectFileSystem.

    Files opened for writing get an ObjectWriter per file handle; content
    is uploaded on release (and on fsync). Reads through a write handle see
    the buffered content, other reads go to the store.

    Attributes:
        fs (ObjectFileSystem): Filesystem being served
        writers (dict): Open ObjectWriter per file handle
    """

    def __init__(self, filesystem):
        logger.info(f"Initializing ObjectFuse with bucket: {filesystem.bucket}")
        self.fs = filesystem
        self.writers = {}
        self._lock = Lock()
        self._handles = itertools.count(1)

    def _new_handle(self, writer=None):
        with self._lock:
            fh = next(self._handles)
            if writer is not None:
                self.writers[fh] = writer
            return fh

    def _writer_for_path(self, path):
        key = path_to_key(path)
        with self._lock:
            for writer in self.writers.values():
                if writer.key == key:
                    return writer
        return None

    def getattr(self, path, fh=None):
        """
        Get file attributes.

        Args:
            path (str): Path to the file or directory
            fh (int, optional): File handle

        Returns:
            dict: File attributes

        Raises:
            FuseOSError: ENOENT if the path does not exist, EIO on store failure
        """
        trace_op("getattr", path, fh=fh)
        start_time = time.time()
        now = time.time()
        base_stat = {
            'st_uid': os.getuid(),
            'st_gid': os.getgid(),
            'st_atime': now,
            'st_mtime': now,
            'st_ctime': now,
            'st_blksize': 4096,
            'st_rdev': 0,
        }

        writer = self.writers.get(fh) if fh else self._writer_for_path(path)
        if writer is not None and not writer.closed:
            size = writer.size
            time_function("getattr (open writer)", start_time)
            return {**base_stat,
                    'st_mode': stat.S_IFREG | 0o644,
                    'st_size': size,
                    'st_nlink': 1,
                    'st_blocks': (size + 511) // 512}

        try:
            status = self.fs.get_status(path)
        except ObjectFSError as e:
            if not isinstance(e, NotFoundError):
                logger.error(f"getattr error for {path}: {e}")
            time_function("getattr (error)", start_time)
            raise to_fuse_error(e)

        mtime = status.last_modified_ms / 1000.0 if status.last_modified_ms is not None else now
        if status.is_directory:
            result = {**base_stat,
                      'st_mode': stat.S_IFDIR | 0o755,
                      'st_nlink': 2,
                      'st_size': 4096,
                      'st_blocks': 8,
                      'st_mtime': mtime}
        else:
            result = {**base_stat,
                      'st_mode': stat.S_IFREG | 0o644,
                      'st_size': status.size,
                      'st_nlink': 1,
                      'st_blocks': (status.size + 511) // 512,
                      'st_mtime': mtime}
        time_function("getattr", start_time)
        return result

    def readdir(self, path, fh):
        """
        List directory contents.

        Returns:
            list: Entry names, including '.' and '..'
        """
        trace_op("readdir", path, fh=fh)
        start_time = time.time()
        try:
            entries = self.fs.list(path)
        except ObjectFSError as e:
            logger.error(f"Error in readdir for {path}: {e}")
            raise to_fuse_error(e)
        names = ['.', '..']
        seen = set()
        for entry in entries:
            if entry.name not in seen:
                seen.add(entry.name)
                names.append(entry.name)
        logger.debug(f"readdir returning {len(names)} entries for {path}")
        time_function("readdir", start_time)
        return names

    def mkdir(self, path, mode):
        """Create a directory marker; EEXIST if the directory already exists."""
        trace_op("mkdir", path, mode=oct(mode))
        try:
            created = self.fs.mkdirs(path, create_parent=False)
        except ObjectFSError as e:
            logger.error(f"Error creating directory {path}: {e}")
            raise to_fuse_error(e)
        if not created:
            raise FuseOSError(errno.EEXIST)
        return 0

    def rmdir(self, path):
        """Remove an empty directory."""
        trace_op("rmdir", path)
        try:
            if not self.fs.get_status(path).is_directory:
                raise FuseOSError(errno.ENOTDIR)
            self.fs.delete(path, recursive=False)
        except ObjectFSError as e:
            logger.error(f"Error removing directory {path}: {e}")
            raise to_fuse_error(e)
        return 0

    def unlink(self, path):
        """Delete a file."""
        trace_op("unlink", path)
        try:
            if self.fs.get_status(path).is_directory:
                raise FuseOSError(errno.EISDIR)
            self.fs.delete(path)
        except ObjectFSError as e:
            logger.error(f"unlink: Error deleting {path}: {e}")
            raise to_fuse_error(e)
        return 0

    def rename(self, old, new):
        """
        Rename a file or directory.

        An existing destination file is replaced, as rename(2) does. The
        source is copied over it, so a failed copy leaves the destination intact.
        """
        trace_op("rename", new, old=old)
        try:
            self.fs.rename(old, new, overwrite=True)
        except ObjectFSError as e:
            logger.error(f"rename: Failed to rename {old} to {new}: {e}")
            raise to_fuse_error(e)
        return 0

    def create(self, path, mode, fi=None):
        """
        Create a new file.

        Returns:
            int: File handle of the new write buffer
        """
        trace_op("create", path, mode=oct(mode))
        try:
            writer = self.fs.open_for_write(path)
        except ObjectFSError as e:
            logger.error(f"create: Error creating {path}: {e}")
            raise to_fuse_error(e)
        fh = self._new_handle(writer)
        logger.debug(f"create: {path} opened for writing as fh={fh}")
        return fh

    def open(self, path, flags):
        """
        Open a file.

        Write opens get a write buffer, seeded with the current content
        unless O_TRUNC is set.

        Returns:
            int: File handle
        """
        trace_op("open", path, flags=flags)
        start_time = time.time()
        is_readonly = (flags & os.O_ACCMODE) == os.O_RDONLY
        try:
            if is_readonly:
                if not self.fs.is_file(path):
                    raise FuseOSError(errno.ENOENT)
                return self._new_handle()

            data = b""
            if not flags & os.O_TRUNC and self.fs.is_file(path):
                with self.fs.open_for_read(path) as reader:
                    data = reader.read()
            fh = self._new_handle(self.fs.open_for_write(path, data=data))
            time_function("open (write)", start_time)
            return fh
        except ObjectFSError as e:
            logger.error(f"open: Error opening {path}: {e}")
            raise to_fuse_error(e)

    def read(self, path, size, offset, fh):
        """
        Read file contents at an offset.

        Returns:
            bytes: Up to size bytes
        """
        trace_op("read", path, size=size, offset=offset, fh=fh)
        writer = self.writers.get(fh)
        if writer is not None:
            return writer.read_at(offset, size)
        try:
            with self.fs.open_for_read(path, offset) as reader:
                return reader.read(size)
        except ObjectFSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise to_fuse_error(e)

    def write(self, path, data, offset, fh):
        """
        Write data into the file handle's buffer.

        Returns:
            int: Number of bytes written
        """
        trace_op("write", path, offset=offset, size=len(data))
        writer = self.writers.get(fh)
        if writer is None:
            logger.error(f"write: {path} is not open for writing (fh={fh})")
            raise FuseOSError(errno.EBADF)
        return writer.write_at(data, offset)

    def truncate(self, path, length, fh=None):
        """Truncate or zero-extend a file."""
        trace_op("truncate", path, length=length, fh=fh)
        writer = self.writers.get(fh) if fh else self._writer_for_path(path)
        if writer is not None:
            writer.truncate(length)
            return 0
        try:
            data = b""
            if length > 0:
                with self.fs.open_for_read(path) as reader:
                    data = reader.read(length)
            data += b"\x00" * (length - len(data))
            with self.fs.open_for_write(path, data=data):
                pass
        except ObjectFSError as e:
            logger.error(f"Error truncating {path}: {e}")
            raise to_fuse_error(e)
        return 0

    def flush(self, path, fh):
        return 0

    def fsync(self, path, datasync, fh):
        """Upload the buffered content of a write handle."""
        trace_op("fsync", path, datasync=datasync, fh=fh)
        writer = self.writers.get(fh)
        if writer is not None:
            try:
                writer.sync()
            except ObjectFSError as e:
                logger.error(f"fsync: Error syncing {path}: {e}")
                raise to_fuse_error(e)
        return 0

    def release(self, path, fh):
        """
        Release a file handle, uploading its write buffer if it has one.

        Returns:
            int: 0 on success
        """
        trace_op("release", path, fh=fh)
        with self._lock:
            writer = self.writers.pop(fh, None)
        if writer is not None:
            try:
                writer.close()
            except ObjectFSError as e:
                logger.error(f"release: Error uploading {path}: {e}")
                raise to_fuse_error(e)
        return 0

    def chmod(self, path, mode):
        """Accepted and ignored: the store has no permission model."""
        self.fs.set_mode(path, mode)
        return 0

    def chown(self, path, uid, gid):
        """Accepted and ignored: the store has no ownership model."""
        self.fs.set_owner(path, str(uid), str(gid))
        return 0

    def statfs(self, path):
        """
        Get filesystem statistics.

        Object stores have no fixed capacity; report 5TB, all free.
        """
        trace_op("statfs", path)
        block_size = 4096
        total_blocks = 1250000000
        return {
            'f_bsize': block_size,
            'f_frsize': block_size,
            'f_blocks': total_blocks,
            'f_bfree': total_blocks,
            'f_bavail': total_blocks,
            'f_files': 1000000000,
            'f_ffree': 999999999,
            'f_favail': 999999999,
            'f_flag': 0,
            'f_namemax': 255,
        }

    def destroy(self, path):
        """Upload any write buffers still open at unmount."""
        with self._lock:
            writers = list(self.writers.items())
            self.writers.clear()
        for fh, writer in writers:
            try:
                writer.close()
            except ObjectFSError as e:
                logger.error(f"Error during write buffer cleanup for {writer.key}: {e}")


def mount(filesystem, mountpoint: str, foreground: bool = True, allow_other: bool = False):
    """
    Mount an ObjectFileSystem at the specified mountpoint.

    Args:
        filesystem (ObjectFileSystem): Filesystem to serve
        mountpoint (str): Local directory where the filesystem should be mounted
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.
    """
    logger.info(f"Mounting bucket {filesystem.bucket} at {mountpoint}")
    start_time = time.time()

    if os.path.exists(mountpoint):
        if not os.path.isdir(mountpoint):
            raise NotADirectoryError(f"{mountpoint} exists but is not a directory")
    else:
        logger.info(f"Mountpoint {mountpoint} does not exist, creating it...")
        os.makedirs(mountpoint, mode=0o755)

    options = get_mount_options(foreground, allow_other)
    setup_signal_handlers(mountpoint, unmount)

    try:
        logger.info(f"Starting FUSE mount with options: {options}")
        FUSE(ObjectFuse(filesystem), mountpoint, nothreads=False, **options)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, unmounting...")
        unmount(mountpoint)
    finally:
        time_function("mount", start_time)
