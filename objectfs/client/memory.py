# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
In-memory store collaborator.

InMemoryObjectStore keeps buckets as dictionaries of key -> (bytes,
last-modified) and serves paginated, delimited listings the way S3-style
stores do. It backs the test suite and local experiments with the
filesystem layer and FUSE mount.
"""

from datetime import datetime, timezone
from io import BytesIO
from threading import Lock

from .exceptions import NotFoundError, StoreError
from .store import ObjectStoreClient
from .types import ClientConfiguration, ListObjectsOptions, ListObjectsOutput, ObjectMetadata
from ..utils import logger

# Per-request cap on listing entries, matching common object stores
MAX_LIST_KEYS = 1000


class InMemoryObjectStore(ObjectStoreClient):
    """
    Thread-safe in-memory object store.
    
    Attributes:
        config (ClientConfiguration): Connection settings (recorded, unused)
        request_count (dict): Number of calls per operation name
    """

    backend_name = "memory"

    def __init__(self, config: ClientConfiguration = None):
        self.config = config or ClientConfiguration()
        self._buckets = {}
        self._lock = Lock()
        self.request_count = {}

    def _bucket(self, bucket):
        return self._buckets.setdefault(bucket, {})

    def _count(self, operation):
        self.request_count[operation] = self.request_count.get(operation, 0) + 1

    def get_object(self, bucket, key):
        with self._lock:
            self._count("get")
            entry = self._bucket(bucket).get(key)
            if entry is None:
                raise NotFoundError(f"NoSuchKey: {key}", key=key)
            return entry[0]

    def put_object(self, bucket, key, data, content_length=None):
        if isinstance(data, (bytes, bytearray, memoryview)):
            body = bytes(data)
        else:
            body = data.read() if content_length is None else data.read(content_length)
        if content_length is not None and len(body) != content_length:
            raise StoreError(
                f"Content length mismatch for {key}: expected {content_length}, got {len(body)}",
                operation="PUT", key=key)
        with self._lock:
            self._count("put")
            self._bucket(bucket)[key] = (body, datetime.now(timezone.utc))
        logger.debug(f"InMemoryObjectStore: put {key} ({len(body)} bytes)")

    def delete_object(self, bucket, key):
        with self._lock:
            self._count("delete")
            if self._bucket(bucket).pop(key, None) is None:
                raise NotFoundError(f"NoSuchKey: {key}", key=key)

    def copy_object(self, bucket, src_key, dst_key):
        with self._lock:
            self._count("copy")
            objects = self._bucket(bucket)
            entry = objects.get(src_key)
            if entry is None:
                raise NotFoundError(f"NoSuchKey: {src_key}", key=src_key)
            objects[dst_key] = (entry[0], datetime.now(timezone.utc))

    def head_object(self, bucket, key):
        with self._lock:
            self._count("head")
            entry = self._bucket(bucket).get(key)
            if entry is None:
                raise NotFoundError(f"NoSuchKey: {key}", key=key)
            return ObjectMetadata(content_length=len(entry[0]), last_modified=entry[1])

    def list_objects(self, bucket, options=None):
        options = options or ListObjectsOptions()
        max_keys = MAX_LIST_KEYS if options.max_keys is None else min(options.max_keys, MAX_LIST_KEYS)
        if max_keys < 1:
            raise StoreError(f"Invalid max_keys {options.max_keys}", operation="LIST")
        prefix = options.prefix or ""
        delimiter = options.delimiter or ""

        with self._lock:
            self._count("list")
            keys = sorted(k for k in self._bucket(bucket) if k.startswith(prefix))

        # Collapse keys below the delimiter into common prefixes, keeping key order
        entries = []
        for key in keys:
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[:rest.index(delimiter) + len(delimiter)]
                if not entries or entries[-1] != (common, True):
                    entries.append((common, True))
            else:
                entries.append((key, False))

        # The continuation token is the last entry served; resume strictly after it
        token = options.continuation_token
        if token is not None:
            entries = [e for e in entries if e[0] > token]

        page = entries[:max_keys]
        truncated = len(entries) > max_keys
        return ListObjectsOutput(
            keys=tuple(name for name, is_prefix in page if not is_prefix),
            common_prefixes=tuple(name for name, is_prefix in page if is_prefix),
            next_continuation_token=page[-1][0] if truncated else None,
        )

    def open_range(self, bucket, key, offset=0):
        data = self.get_object(bucket, key)
        return BytesIO(data[offset:])

    def keys(self, bucket):
        """Return a sorted snapshot of all keys in a bucket."""
        with self._lock:
            return sorted(self._bucket(bucket))

    def close(self):
        logger.debug(f"InMemoryObjectStore closed after {sum(self.request_count.values())} requests")
