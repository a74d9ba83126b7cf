# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Object read and write streams.

ObjectReader wraps the store's range-read stream so reads can start at a
byte offset without fetching the preceding bytes. ObjectWriter buffers
written data in a SpooledTemporaryFile and uploads it as one object on
close; nothing written is visible in the store before then.
"""

import io
import tempfile
import time

from ..client.errors import normalize_error
from ..client.exceptions import ReadError, WriteError
from ..utils import logger, time_function

# Spool to disk once a write buffer exceeds 64MB in RAM
DEFAULT_SPOOL_MAX_SIZE = 64 * 1024 * 1024


class ObjectReader(io.RawIOBase):
    """
    Read-only stream over an object, starting at a byte offset.
    
    Attributes:
        key (str): Object key
        offset (int): Byte offset the stream was opened at
    """

    def __init__(self, stream, key, offset=0):
        super().__init__()
        self._stream = stream
        self.key = key
        self.offset = offset
        self._position = 0

    def readable(self):
        return True

    def readinto(self, b):
        try:
            data = self._stream.read(len(b))
        except Exception as e:
            err = normalize_error(e, "GET", self.key)
            logger.error(f"read: Failed reading {self.key} at {self.tell()}: {err}")
            raise ReadError(f"Failed to read {self.key}: {err.message}", key=self.key) from e
        n = len(data)
        b[:n] = data
        self._position += n
        return n

    def tell(self):
        return self.offset + self._position

    def close(self):
        if not self.closed:
            try:
                self._stream.close()
            finally:
                super().close()


class ObjectWriter(io.RawIOBase):
    """
    Write sink that uploads the buffered content as one object on close.
    
    Sequential writes append; write_at() supports the positional writes
    of the FUSE mount. Leaving a `with` block through an exception aborts
    the upload.
    
    Attributes:
        key (str): Object key written on close
        size (int): Current size of the buffered content
    """

    def __init__(self, client, bucket, key, data=b"", spool_max_size=DEFAULT_SPOOL_MAX_SIZE):
        super().__init__()
        self.client = client
        self.bucket = bucket
        self.key = key
        self._spool = tempfile.SpooledTemporaryFile(max_size=spool_max_size, mode='w+b')
        if data:
            self._spool.write(data)

    def writable(self):
        return True

    def readable(self):
        return False

    def write(self, b):
        if self.closed:
            raise ValueError(f"write to closed writer for {self.key}")
        return self._spool.write(b)

    def write_at(self, data, offset):
        """Write data at a byte offset, zero-filling any gap; returns the byte count."""
        if self.closed:
            raise ValueError(f"write to closed writer for {self.key}")
        self._spool.seek(offset)
        n = self._spool.write(data)
        self._spool.seek(0, io.SEEK_END)
        return n

    def read_at(self, offset, size):
        """Read back buffered, not yet uploaded, content."""
        if self.closed:
            raise ValueError(f"read from closed writer for {self.key}")
        self._spool.seek(offset)
        data = self._spool.read(size)
        self._spool.seek(0, io.SEEK_END)
        return data

    def truncate(self, size=None):
        if size is None:
            size = self._spool.tell()
        self._spool.truncate(size)
        self._spool.seek(0, io.SEEK_END)
        return size

    @property
    def size(self):
        position = self._spool.tell()
        self._spool.seek(0, io.SEEK_END)
        size = self._spool.tell()
        self._spool.seek(position)
        return size

    def tell(self):
        return self._spool.tell()

    def _upload(self):
        size = self.size
        self._spool.seek(0)
        try:
            self.client.put_object(self.bucket, self.key, self._spool, content_length=size)
        except Exception as e:
            err = normalize_error(e, "PUT", self.key)
            logger.error(f"write: Failed to upload {self.key}: {err}")
            raise WriteError(f"Failed to write {self.key}: {err.message}", key=self.key) from e
        finally:
            self._spool.seek(0, io.SEEK_END)
        return size

    def sync(self):
        """Upload the content buffered so far and keep the writer open."""
        if self.closed:
            raise ValueError(f"sync of closed writer for {self.key}")
        start_time = time.time()
        size = self._upload()
        logger.info(f"write: Synced {size} bytes to {self.key} in {time.time() - start_time:.4f} seconds")

    def abort(self):
        """Discard the buffered content without uploading."""
        if not self.closed:
            logger.info(f"write: Discarding {self.size} buffered bytes for {self.key}")
            self._spool.close()
            super().close()

    def close(self):
        """
        Upload the buffered content and close the writer.
        
        Raises:
            WriteError: If the upload failed; the object is left as it was
        """
        if self.closed:
            return
        start_time = time.time()
        try:
            size = self._upload()
            logger.info(f"write: Uploaded {size} bytes to {self.key} in {time.time() - start_time:.4f} seconds")
        finally:
            self._spool.close()
            super().close()
            time_function("ObjectWriter.close", start_time)

    def __del__(self):
        # io.IOBase.__del__ would close(), publishing a partial buffer
        if not self.closed and hasattr(self, '_spool'):
            logger.warning(f"write: Writer for {self.key} dropped without close(), discarding")
            self.abort()

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.abort()
        else:
            self.close()
