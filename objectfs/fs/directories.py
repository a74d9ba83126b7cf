# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Directory emulation on a flat key space.

A directory exists either explicitly, as a zero-length marker object whose
key is the directory key plus the folder suffix ("a/b_$folder$"), or
implicitly, because some key lies below its prefix ("a/b/c"). The marker
suffix is part of the on-store format: other tools reading the bucket must
recognize it to see empty directories.
"""

import time

from ..client.errors import normalize_error
from ..client.exceptions import InvalidPathError, WriteError
from ..config import FOLDER_SUFFIX
from ..utils import logger, time_function, trace_op
from .listing import ObjectListing
from .paths import directory_prefix, root_key


class DirectoryEmulator:
    """
    Directory semantics over an object store.
    
    Attributes:
        client (ObjectStoreClient): Store collaborator
        bucket (str): Bucket name
        folder_suffix (str): Reserved suffix of marker keys
    """

    def __init__(self, client, bucket, status_resolver, folder_suffix=FOLDER_SUFFIX):
        self.client = client
        self.bucket = bucket
        self.status = status_resolver
        self.folder_suffix = folder_suffix

    def is_directory_marker(self, key):
        """True iff key ends with the folder suffix."""
        return key.endswith(self.folder_suffix)

    def marker_key_for(self, key):
        """
        Marker key of a directory key.
        
        Raises:
            InvalidPathError: For the root, which has no marker
        """
        if key == root_key():
            raise InvalidPathError("The root directory has no marker object", path=key)
        return key + self.folder_suffix

    def strip_marker_suffix(self, key):
        """Directory key a marker key stands for."""
        return key[:-len(self.folder_suffix)] if self.is_directory_marker(key) else key

    def create_directory_marker(self, key):
        """
        Write the zero-length marker object for a directory.
        
        Args:
            key (str): Directory key
            
        Raises:
            WriteError: If the store rejected the write
        """
        marker = self.marker_key_for(key)
        trace_op("create_directory_marker", key, marker=marker)
        start_time = time.time()
        try:
            self.client.put_object(self.bucket, marker, b"", content_length=0)
        except Exception as e:
            err = normalize_error(e, "PUT", marker)
            logger.error(f"Failed to create directory marker {marker}: {err}")
            raise WriteError(f"Failed to create directory marker {marker}: {err.message}", key=marker) from e
        logger.info(f"Created directory marker {marker}")
        time_function("create_directory_marker", start_time)

    def marker_status(self, key):
        """Status of the directory's marker object, or None."""
        if key == root_key():
            return None
        return self.status.status_of(self.marker_key_for(key))

    def has_children(self, key, cancel=None):
        """
        True if at least one key lies below the directory prefix.
        
        Issues a single listing request capped at one result; an empty first
        page counts as no children even if it carries a continuation token.
        """
        listing = ObjectListing(self.client, self.bucket, directory_prefix(key),
                                recursive=False, max_keys=1, cancel=cancel)
        chunk = next(listing)
        return bool(chunk.object_keys or chunk.common_prefixes)

    def directory_exists(self, key):
        """
        True if the marker exists or the prefix has descendants.
        
        The marker lookup (one head request) runs first; the bounded listing
        only runs when no marker is found.
        
        Raises:
            StatusQueryError: If the marker lookup failed
            ListingError: If the fallback listing failed
        """
        if key == root_key():
            return True
        start_time = time.time()
        if self.marker_status(key) is not None:
            time_function("directory_exists (marker)", start_time)
            return True
        exists = self.has_children(key)
        time_function("directory_exists (listing)", start_time)
        return exists
