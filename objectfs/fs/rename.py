# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Rename by copy-then-delete.

Object stores have no rename, so a move is a copy followed by a delete of
the source. Outcomes:

- success: destination present, source gone (RenameResult returned)
- clean failure: the copy failed, nothing changed (CopyError)
- partial failure: some objects moved, or a copy landed but its source
  delete failed, leaving both (PartialRenameError)

Directory renames apply the same per-object protocol to every descendant
key and move the directory's own marker last, so the source directory
keeps existing until all of its children have moved.
"""

import time
from dataclasses import dataclass
from typing import Tuple

from ..client.errors import normalize_error
from ..client.exceptions import (
    CopyError,
    DeleteError,
    ListingError,
    NotFoundError,
    OperationCancelledError,
    PartialRenameError,
    StatusQueryError,
)
from ..config import DEFAULT_LISTING_CHUNK_LENGTH
from ..utils import logger, time_function, trace_op
from .cancel import check_cancelled
from .listing import ObjectListing
from .paths import directory_prefix

@dataclass(frozen=True)
class RenameResult:
    """
    Completed rename.
    
    Attributes:
        src_key (str): Renamed key or directory key
        dst_key (str): New key or directory key
        renamed (tuple): (source, destination) pairs of every object moved
    """
    src_key: str
    dst_key: str
    renamed: Tuple[Tuple[str, str], ...]


class RenameEmulator:
    """
    Moves objects and directory trees with copy + delete.
    
    Attributes:
        client (ObjectStoreClient): Store collaborator
        bucket (str): Bucket name
        directories (DirectoryEmulator): Marker handling for directory renames
        listing_chunk_length (int): Page size for descendant listings
    """

    def __init__(self, client, bucket, directories, listing_chunk_length=DEFAULT_LISTING_CHUNK_LENGTH):
        self.client = client
        self.bucket = bucket
        self.directories = directories
        self.listing_chunk_length = listing_chunk_length

    def copy_object(self, src_key, dst_key):
        """
        Copy one object, server-side when the store supports it.
        
        Falls back to get_object + put_object when the collaborator's
        copy_object raises NotImplementedError.
        
        Raises:
            NotFoundError: If src_key does not exist
            CopyError: If the copy failed
        """
        start_time = time.time()
        try:
            try:
                self.client.copy_object(self.bucket, src_key, dst_key)
                logger.info(f"rename: Copied {src_key} to {dst_key} in {time.time() - start_time:.4f} seconds")
            except NotImplementedError:
                logger.debug(f"rename: No server-side copy, reading {src_key} to write {dst_key}")
                data = self.client.get_object(self.bucket, src_key)
                self.client.put_object(self.bucket, dst_key, data, content_length=len(data))
                logger.info(f"rename: Copied {src_key} to {dst_key} by read+write in "
                            f"{time.time() - start_time:.4f} seconds")
        except Exception as e:
            err = normalize_error(e, "COPY", src_key)
            if isinstance(err, NotFoundError):
                raise NotFoundError(f"Rename source {src_key} does not exist", key=src_key) from e
            logger.error(f"rename: Failed to copy {src_key} to {dst_key}: {err}")
            raise CopyError(f"Failed to copy {src_key} to {dst_key}: {err.message}",
                            src_key=src_key, dst_key=dst_key) from e

    def delete_source(self, src_key):
        """
        Delete the source of a completed copy.
        
        Raises:
            DeleteError: If the delete failed (a vanished source is fine)
        """
        try:
            self.client.delete_object(self.bucket, src_key)
        except Exception as e:
            err = normalize_error(e, "DELETE", src_key)
            if isinstance(err, NotFoundError):
                logger.warning(f"rename: Source {src_key} already gone after copy")
                return
            logger.error(f"rename: Failed to delete source {src_key}: {err}")
            raise DeleteError(f"Failed to delete {src_key}: {err.message}", key=src_key) from e

    def rename_file(self, src_key, dst_key):
        """
        Move a single object.
        
        Args:
            src_key (str): Existing object key
            dst_key (str): New object key
            
        Returns:
            RenameResult: The completed move
            
        Raises:
            NotFoundError: If src_key does not exist
            CopyError: If the copy failed; both keys untouched
            PartialRenameError: If the copy succeeded but the source delete
                failed; both keys present
        """
        trace_op("rename_file", src_key, dst=dst_key)
        start_time = time.time()
        self.copy_object(src_key, dst_key)
        try:
            self.delete_source(src_key)
        except DeleteError as e:
            raise PartialRenameError(
                f"Copied {src_key} to {dst_key} but could not delete the source: {e.message}",
                src_key=src_key, dst_key=dst_key, failed_key=src_key,
                source_present=True, destination_present=True) from e
        time_function("rename_file", start_time)
        return RenameResult(src_key=src_key, dst_key=dst_key, renamed=((src_key, dst_key),))

    def rename_directory(self, src_key, dst_key, cancel=None):
        """
        Move a directory tree: every descendant key, then the marker.
        
        Not atomic. A failure or cancellation after at least one object has
        moved raises PartialRenameError listing the moved pairs and the key
        that was being processed, so callers can resume or clean up.
        
        Args:
            src_key (str): Existing directory key
            dst_key (str): New directory key
            cancel (CancellationToken, optional): Checked before each object
            
        Returns:
            RenameResult: The completed move
            
        Raises:
            CopyError, ListingError, OperationCancelledError: If nothing moved yet
            PartialRenameError: If the tree is left half-moved
        """
        trace_op("rename_directory", src_key, dst=dst_key)
        start_time = time.time()
        src_prefix = directory_prefix(src_key)
        dst_prefix = directory_prefix(dst_key)
        renamed = []

        def move(key, new_key):
            try:
                self.copy_object(key, new_key)
            except NotFoundError:
                logger.warning(f"rename: {key} vanished before it could be copied, skipping")
                return
            except CopyError as e:
                if not renamed:
                    raise
                raise PartialRenameError(
                    f"Directory rename {src_key} -> {dst_key} stopped at {key}: {e.message}",
                    src_key=src_key, dst_key=dst_key, renamed=renamed, failed_key=key,
                    source_present=True, destination_present=False) from e
            try:
                self.delete_source(key)
            except DeleteError as e:
                raise PartialRenameError(
                    f"Directory rename {src_key} -> {dst_key} copied {key} but could not delete it: {e.message}",
                    src_key=src_key, dst_key=dst_key, renamed=renamed, failed_key=key,
                    source_present=True, destination_present=True) from e
            renamed.append((key, new_key))

        listing = ObjectListing(self.client, self.bucket, src_prefix, recursive=True,
                                max_keys=self.listing_chunk_length, cancel=cancel)
        try:
            for chunk in listing:
                for key in chunk.object_keys:
                    check_cancelled(cancel, f"rename of {src_key}")
                    move(key, dst_prefix + key[len(src_prefix):])

            check_cancelled(cancel, f"rename of {src_key}")
            if self.directories.marker_status(src_key) is not None:
                move(self.directories.marker_key_for(src_key), self.directories.marker_key_for(dst_key))
        except (ListingError, StatusQueryError, OperationCancelledError) as e:
            if not renamed:
                raise
            raise PartialRenameError(
                f"Directory rename {src_key} -> {dst_key} interrupted after {len(renamed)} objects: {e.message}",
                src_key=src_key, dst_key=dst_key, renamed=renamed,
                source_present=True, destination_present=False) from e

        logger.info(f"rename: Moved directory {src_key} to {dst_key} ({len(renamed)} objects)")
        time_function("rename_directory", start_time)
        return RenameResult(src_key=src_key, dst_key=dst_key, renamed=tuple(renamed))
