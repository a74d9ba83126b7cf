# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""Single-object status lookups."""

import time
from dataclasses import dataclass
from datetime import timezone

from ..client.errors import normalize_error
from ..client.exceptions import NotFoundError, StatusQueryError
from ..utils import logger, time_function

@dataclass(frozen=True)
class ObjectStatus:
    """Size and modification time of one object, fetched fresh from the store."""
    size: int
    last_modified_epoch_millis: int


def _epoch_millis(last_modified):
    if last_modified.tzinfo is None:
        last_modified = last_modified.replace(tzinfo=timezone.utc)
    return int(last_modified.timestamp() * 1000)


class ObjectStatusResolver:
    """
    Resolves the status of a single key with one head_object call.
    
    A missing key is a normal outcome and yields None. Any other store
    failure raises StatusQueryError, meaning existence is unknown.
    """

    def __init__(self, client, bucket):
        self.client = client
        self.bucket = bucket

    def status_of(self, key):
        """
        Fetch the status of an object.
        
        Args:
            key (str): Object key
            
        Returns:
            ObjectStatus: The status, or None if the key does not exist
            
        Raises:
            StatusQueryError: If the store failed or returned malformed metadata
        """
        start_time = time.time()
        try:
            metadata = self.client.head_object(self.bucket, key)
        except Exception as e:
            err = normalize_error(e, "HEAD", key)
            if isinstance(err, NotFoundError):
                logger.debug(f"status_of: {key} not found")
                time_function("status_of (not found)", start_time)
                return None
            logger.error(f"status_of: head_object failed for {key}: {err}")
            raise StatusQueryError(f"Failed to query status of {key}: {err.message}", key=key) from e

        try:
            size = int(metadata.content_length)
            mtime = _epoch_millis(metadata.last_modified)
        except (AttributeError, TypeError, ValueError) as e:
            raise StatusQueryError(f"Malformed metadata for {key}: {metadata!r}", key=key) from e
        if size < 0:
            raise StatusQueryError(f"Malformed metadata for {key}: negative size {size}", key=key)

        time_function("status_of", start_time)
        return ObjectStatus(size=size, last_modified_epoch_millis=mtime)
