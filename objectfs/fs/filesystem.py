# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem facade over an object store.

ObjectFileSystem presents a bucket as a hierarchical filesystem. It maps
paths to keys and delegates to the directory emulator, the listing
iterator, the status resolver and the rename emulator; it holds no
store-specific logic of its own.

Usage:
    store = InMemoryObjectStore()
    fs = ObjectFileSystem(store, "my-bucket")

    fs.mkdirs("/data/raw")
    with fs.create("/data/raw/part-0") as out:
        out.write(b"hello")
    fs.rename("/data/raw", "/data/staged")
    for entry in fs.list("/data"):
        print(entry.name, entry.is_directory)
"""

import time
from dataclasses import dataclass
from typing import List, Optional

from ..client.errors import normalize_error
from ..client.exceptions import (
    AlreadyExistsError,
    DeleteError,
    DirectoryNotEmptyError,
    InvalidPathError,
    NotFoundError,
    ObjectFSError,
    PartialDeleteError,
    ReadError,
)
from ..config import FileSystemOptions
from ..utils import logger, time_function, trace_op
from .cancel import check_cancelled
from .directories import DirectoryEmulator
from .listing import ObjectListing
from .paths import (
    PATH_SEPARATOR,
    basename,
    directory_prefix,
    is_ancestor,
    key_to_path,
    parent_key,
    path_to_key,
    root_key,
)
from .rename import RenameEmulator
from .status import ObjectStatusResolver
from .streams import ObjectReader, ObjectWriter

# The store has no ACL model; these are reported for every path
DEFAULT_OWNER = ""
DEFAULT_GROUP = ""
DEFAULT_FILE_SYSTEM_MODE = 0o777

@dataclass(frozen=True)
class FileStatus:
    """
    Status of a file or directory.

    Attributes:
        path (str): Normalized absolute path
        name (str): Last path segment ("" for the root)
        is_directory (bool): True for directories
        size (int): Object size in bytes (0 for directories)
        last_modified_ms (int): Epoch millis, None for directories without a marker
        owner (str): Fixed default owner
        group (str): Fixed default group
        mode (int): Fixed default mode
    """
    path: str
    name: str
    is_directory: bool
    size: int
    last_modified_ms: Optional[int]
    owner: str = DEFAULT_OWNER
    group: str = DEFAULT_GROUP
    mode: int = DEFAULT_FILE_SYSTEM_MODE

@dataclass(frozen=True)
class DirectoryEntry:
    """One listing entry, named relative to the listed directory."""
    name: str
    is_directory: bool


class ObjectFileSystem:
    """
    Hierarchical filesystem view of one bucket.

    Safe for concurrent use: besides the collaborator handle and bucket
    name, set once here, instances hold no mutable state.

    Attributes:
        client (ObjectStoreClient): Store collaborator
        bucket (str): Bucket name
        options (FileSystemOptions): Listing chunk length, folder suffix, root URI
    """

    def __init__(self, client, bucket, options=None):
        if not bucket:
            raise ValueError("A bucket name is required")
        self.client = client
        self.bucket = bucket
        self.options = options or FileSystemOptions()
        self.status_resolver = ObjectStatusResolver(client, bucket)
        self.directories = DirectoryEmulator(client, bucket, self.status_resolver,
                                             folder_suffix=self.options.folder_suffix)
        self.renamer = RenameEmulator(client, bucket, self.directories,
                                      listing_chunk_length=self.options.listing_chunk_length)
        self._closed = False
        logger.info(f"ObjectFileSystem ready on {getattr(client, 'backend_name', 'object')} bucket {bucket}")

    @property
    def under_fs_type(self):
        return getattr(self.client, 'backend_name', 'object')

    def _key(self, path):
        if self._closed:
            raise ObjectFSError(f"Filesystem on bucket {self.bucket} is closed", code="ERR_CLOSED")
        key = path_to_key(path, self.options.root_uri)
        # Marker keys are reserved for directories
        for segment in key.split(PATH_SEPARATOR):
            if self.directories.is_directory_marker(segment):
                raise InvalidPathError(
                    f"Path segment '{segment}' ends with the reserved suffix {self.options.folder_suffix}",
                    path=path)
        return key

    def listing(self, path, recursive=False, cancel=None):
        """
        Start a raw chunked listing below a directory path.

        Returns:
            ObjectListing: Lazy iterator of ListingChunk
        """
        return ObjectListing(self.client, self.bucket, directory_prefix(self._key(path)),
                             recursive=recursive, max_keys=self.options.listing_chunk_length,
                             cancel=cancel)

    def is_file(self, path):
        """True if an object exists at the path's key."""
        key = self._key(path)
        if key == root_key():
            return False
        return self.status_resolver.status_of(key) is not None

    def is_directory(self, path):
        """True if the path has a directory marker or descendant keys."""
        return self.directories.directory_exists(self._key(path))

    def exists(self, path):
        """
        True if the path is a file or a directory.

        Raises:
            InvalidPathError: If the path is malformed
            StatusQueryError, ListingError: If existence could not be determined
        """
        trace_op("exists", path)
        return self.is_file(path) or self.is_directory(path)

    def get_status(self, path):
        """
        Get the status of a file or directory.

        A key that is both an object and a directory prefix resolves as a file.

        Returns:
            FileStatus: The status

        Raises:
            NotFoundError: If the path does not exist
            StatusQueryError, ListingError: If the store failed
        """
        trace_op("get_status", path)
        start_time = time.time()
        key = self._key(path)
        if key == root_key():
            return FileStatus(path=PATH_SEPARATOR, name="", is_directory=True, size=0, last_modified_ms=None)

        status = self.status_resolver.status_of(key)
        if status is not None:
            time_function("get_status (file)", start_time)
            return FileStatus(path=key_to_path(key), name=basename(key), is_directory=False,
                              size=status.size, last_modified_ms=status.last_modified_epoch_millis)

        marker = self.directories.marker_status(key)
        if marker is not None or self.directories.has_children(key):
            time_function("get_status (directory)", start_time)
            return FileStatus(path=key_to_path(key), name=basename(key), is_directory=True, size=0,
                              last_modified_ms=marker.last_modified_epoch_millis if marker else None)

        time_function("get_status (not found)", start_time)
        raise NotFoundError(f"No such file or directory: {key_to_path(key)}", key=key)

    def list(self, path, recursive=False, cancel=None) -> List[DirectoryEntry]:
        """
        List a directory.

        Marker objects show up as directories with the suffix stripped.
        Recursive listings name entries by their path relative to the listed
        directory and include the intermediate directories.

        Args:
            path (str): Directory path
            recursive (bool, optional): List all descendants. Defaults to False.
            cancel (CancellationToken, optional): Checked between chunks

        Returns:
            list: DirectoryEntry values in store order, without duplicates

        Raises:
            NotFoundError: If the directory does not exist (or is a file)
            ListingError: If a listing chunk failed
        """
        trace_op("list", path, recursive=recursive)
        start_time = time.time()
        key = self._key(path)
        prefix = directory_prefix(key)
        entries = {}

        def add(name, is_directory):
            if recursive:
                # Synthesize every intermediate directory
                parts = name.split(PATH_SEPARATOR)
                for i in range(1, len(parts)):
                    entries.setdefault((PATH_SEPARATOR.join(parts[:i]), True), None)
            entries.setdefault((name, is_directory), None)

        for chunk in self.listing(path, recursive=recursive, cancel=cancel):
            for common_prefix in chunk.common_prefixes:
                name = common_prefix[len(prefix):].strip(PATH_SEPARATOR)
                if name:
                    add(name, True)
            for object_key in chunk.object_keys:
                name = object_key[len(prefix):]
                if not name or name.endswith(PATH_SEPARATOR):
                    # Placeholder objects named "<dir>/" written by other tools
                    name = name.strip(PATH_SEPARATOR)
                    if name:
                        add(name, True)
                    continue
                if self.directories.is_directory_marker(name):
                    name = self.directories.strip_marker_suffix(name)
                    if name:
                        add(name, True)
                    continue
                add(name, False)

        if not entries and key != root_key() and self.directories.marker_status(key) is None:
            raise NotFoundError(f"No such directory: {key_to_path(key)}", key=key)

        result = [DirectoryEntry(name=name, is_directory=is_dir) for name, is_dir in entries]
        logger.debug(f"list: {len(result)} entries under {key_to_path(key)}")
        time_function("list", start_time)
        return result

    def _delete_key(self, key):
        try:
            self.client.delete_object(self.bucket, key)
        except Exception as e:
            err = normalize_error(e, "DELETE", key)
            if isinstance(err, NotFoundError):
                raise NotFoundError(f"No such file or directory: {key_to_path(key)}", key=key) from e
            logger.error(f"delete: Failed to delete {key}: {err}")
            raise DeleteError(f"Failed to delete {key}: {err.message}", key=key) from e

    def delete(self, path, recursive=False, cancel=None):
        """
        Delete a file or a directory.

        Deleting a path that does not exist raises NotFoundError and never
        touches other keys. Recursive deletes remove descendants one object
        at a time, then the marker.

        Args:
            path (str): File or directory path
            recursive (bool, optional): Delete a non-empty directory with its contents
            cancel (CancellationToken, optional): Checked before each object delete

        Raises:
            NotFoundError: If the path does not exist
            DirectoryNotEmptyError: If the directory has children and recursive is False
            DeleteError: If the store rejected a delete
            PartialDeleteError: If a recursive delete stopped partway
        """
        trace_op("delete", path, recursive=recursive)
        start_time = time.time()
        key = self._key(path)
        if key == root_key():
            raise InvalidPathError("Refusing to delete the filesystem root", path=path)

        if self.status_resolver.status_of(key) is not None:
            self._delete_key(key)
            logger.info(f"delete: Deleted file {key}")
            time_function("delete (file)", start_time)
            return

        marker = self.directories.marker_status(key)
        has_children = self.directories.has_children(key, cancel=cancel)
        if marker is None and not has_children:
            raise NotFoundError(f"No such file or directory: {key_to_path(key)}", key=key)
        if has_children and not recursive:
            raise DirectoryNotEmptyError(f"Directory {key_to_path(key)} is not empty", key=key)

        deleted = []
        if has_children:
            listing = ObjectListing(self.client, self.bucket, directory_prefix(key), recursive=True,
                                    max_keys=self.options.listing_chunk_length, cancel=cancel)
            try:
                for chunk in listing:
                    for child in chunk.object_keys:
                        check_cancelled(cancel, f"delete of {key}")
                        try:
                            self._delete_key(child)
                        except NotFoundError:
                            logger.warning(f"delete: {child} vanished before it could be deleted")
                            continue
                        deleted.append(child)
            except ObjectFSError as e:
                if not deleted:
                    raise
                failed = e.key if isinstance(e, DeleteError) else None
                raise PartialDeleteError(
                    f"Recursive delete of {key_to_path(key)} stopped after {len(deleted)} objects: {e.message}",
                    key=key, deleted=deleted, failed_key=failed) from e

        if marker is not None:
            try:
                self._delete_key(self.directories.marker_key_for(key))
            except NotFoundError:
                logger.debug(f"delete: Marker for {key} already gone")
            except DeleteError as e:
                if not deleted:
                    raise
                raise PartialDeleteError(
                    f"Deleted the contents of {key_to_path(key)} but not its marker: {e.message}",
                    key=key, deleted=deleted, failed_key=e.key) from e

        logger.info(f"delete: Deleted directory {key} ({len(deleted)} objects)")
        time_function("delete (directory)", start_time)

    def rename(self, src, dst, cancel=None, overwrite=False):
        """
        Rename a file or directory with copy + delete.

        With overwrite set, a file may replace an existing destination file;
        the copy lands over it, so the destination is never removed first.

        Args:
            src (str): Existing path
            dst (str): New path; must not exist unless overwrite applies
            cancel (CancellationToken, optional): Checked between objects of a directory rename
            overwrite (bool, optional): Let a file replace an existing file. Defaults to False.

        Returns:
            RenameResult: The completed move

        Raises:
            NotFoundError: If src does not exist
            AlreadyExistsError: If dst exists (and is not a file replaced by a file)
            InvalidPathError: If src is the root or dst lies inside src
            CopyError: If nothing was moved
            PartialRenameError: If the store is left with both or mixed copies
        """
        trace_op("rename", src, dst=dst)
        logger.info(f"rename: Starting rename operation from {src} to {dst}")
        start_time = time.time()
        src_key = self._key(src)
        dst_key = self._key(dst)
        if src_key == root_key() or dst_key == root_key():
            raise InvalidPathError("Cannot rename to or from the filesystem root", path=src)
        if src_key == dst_key:
            raise InvalidPathError(f"Source and destination are the same: {key_to_path(src_key)}", path=dst)
        if is_ancestor(src_key, dst_key):
            raise InvalidPathError(f"Cannot move {key_to_path(src_key)} into itself ({key_to_path(dst_key)})",
                                   path=dst)
        src_is_file = self.status_resolver.status_of(src_key) is not None
        dst_is_file = self.is_file(dst)
        if dst_is_file and overwrite and src_is_file:
            logger.debug(f"rename: Replacing existing file {key_to_path(dst_key)}")
        elif dst_is_file or self.is_directory(dst):
            raise AlreadyExistsError(f"Rename destination {key_to_path(dst_key)} already exists", key=dst_key)

        if src_is_file:
            result = self.renamer.rename_file(src_key, dst_key)
        elif self.directories.directory_exists(src_key):
            result = self.renamer.rename_directory(src_key, dst_key, cancel=cancel)
        else:
            raise NotFoundError(f"Rename source {key_to_path(src_key)} does not exist", key=src_key)

        time_function("rename", start_time)
        return result

    def open_for_read(self, path, offset=0):
        """
        Open a file for reading at a byte offset.

        The offset is served by the store's range read; preceding bytes are
        not downloaded.

        Returns:
            ObjectReader: Readable binary stream

        Raises:
            NotFoundError: If the file does not exist
            ReadError: If the store failed to open the object
        """
        trace_op("open_for_read", path, offset=offset)
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        key = self._key(path)
        if key == root_key():
            raise InvalidPathError("Cannot open the root directory for reading", path=path)
        try:
            stream = self.client.open_range(self.bucket, key, offset)
        except Exception as e:
            err = normalize_error(e, "GET", key)
            if isinstance(err, NotFoundError):
                raise NotFoundError(f"No such file: {key_to_path(key)}", key=key) from e
            logger.error(f"open_for_read: Failed to open {key} at {offset}: {err}")
            raise ReadError(f"Failed to open {key}: {err.message}", key=key) from e
        return ObjectReader(stream, key, offset)

    def open_for_write(self, path, data=b""):
        """
        Open a write sink for a file.

        Content is uploaded when the writer is closed; until then readers
        keep seeing the previous object, if any.

        Args:
            path (str): File path
            data (bytes, optional): Initial buffered content

        Returns:
            ObjectWriter: Writable binary stream
        """
        trace_op("open_for_write", path)
        key = self._key(path)
        if key == root_key():
            raise InvalidPathError("Cannot write to the root directory", path=path)
        return ObjectWriter(self.client, self.bucket, key, data=data)

    def create(self, path, create_parent=False):
        """
        Create a file, optionally writing markers for missing parent directories first.

        Returns:
            ObjectWriter: Writable binary stream, uploaded on close
        """
        key = self._key(path)
        parent = parent_key(key)
        if create_parent and parent:
            self.mkdirs(key_to_path(parent), create_parent=True)
        return self.open_for_write(path)

    def mkdirs(self, path, create_parent=True):
        """
        Create a directory marker.

        Args:
            path (str): Directory path
            create_parent (bool, optional): Also create missing ancestors. Defaults to True.

        Returns:
            bool: True if created, False if the directory already existed

        Raises:
            AlreadyExistsError: If a file occupies the path
            NotFoundError: If the parent is missing and create_parent is False
            WriteError: If a marker write failed
        """
        trace_op("mkdirs", path, create_parent=create_parent)
        start_time = time.time()
        key = self._key(path)
        if key == root_key():
            return False
        if self.status_resolver.status_of(key) is not None:
            raise AlreadyExistsError(f"A file exists at {key_to_path(key)}", key=key)
        if self.directories.directory_exists(key):
            logger.debug(f"mkdirs: {key} already exists")
            return False

        parent = parent_key(key)
        if parent and not self.directories.directory_exists(parent):
            if not create_parent:
                raise NotFoundError(f"Parent directory {key_to_path(parent)} does not exist", key=parent)
            self.mkdirs(key_to_path(parent), create_parent=True)

        self.directories.create_directory_marker(key)
        time_function("mkdirs", start_time)
        return True

    # No ACL integration: fixed defaults and accepted-but-ignored setters

    def get_owner(self, path):
        return DEFAULT_OWNER

    def get_group(self, path):
        return DEFAULT_GROUP

    def get_mode(self, path):
        return DEFAULT_FILE_SYSTEM_MODE

    def set_owner(self, path, user, group):
        logger.debug(f"set_owner requested for {path} ({user}:{group}) - NO-OP")

    def set_mode(self, path, mode):
        logger.debug(f"set_mode requested for {path} ({oct(mode)}) - NO-OP")

    def close(self):
        """Release the filesystem; the store collaborator stays owned by the caller."""
        if not self._closed:
            self._closed = True
            logger.info(f"ObjectFileSystem on bucket {self.bucket} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
