# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Chunked listing.

ObjectListing turns the store's paginated list_objects call into a lazy
sequence of ListingChunk values. Each chunk costs exactly one store request
and the next request is only issued when the caller asks for the next
chunk, so early-exit callers (existence checks) pay for one page only.
"""

import time
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from ..client.errors import normalize_error
from ..client.exceptions import ListingError, OperationCancelledError
from ..client.types import ListObjectsOptions
from ..config import DEFAULT_LISTING_CHUNK_LENGTH
from ..utils import logger, time_function, trace_op
from .cancel import check_cancelled
from .paths import PATH_SEPARATOR

@dataclass(frozen=True)
class ListingChunk:
    """
    Result of one list request.
    
    Attributes:
        object_keys (tuple): Keys returned individually, in store order
        common_prefixes (tuple): Grouped prefixes (non-recursive listings only)
        continuation (str): Token for the next chunk, or None when exhausted
    """
    object_keys: Tuple[str, ...]
    common_prefixes: Tuple[str, ...]
    continuation: Optional[str]


class ObjectListing:
    """
    Lazy listing session over one prefix.
    
    Iterating yields ListingChunk objects until the store reports no
    continuation. A session is not restartable: iterate the same object to
    resume, create a new one to start over. If a request fails the iterator
    raises ListingError and is finished afterwards.
    
    Attributes:
        prefix (str): Key prefix being listed
        recursive (bool): Flat listing of all descendants when True, one level otherwise
        max_keys (int): Page size requested per call
        chunks_fetched (int): Number of store requests issued so far
    """

    def __init__(self, client, bucket, prefix, recursive=False,
                 max_keys=DEFAULT_LISTING_CHUNK_LENGTH, cancel=None):
        if max_keys < 1:
            raise ValueError(f"max_keys must be positive, got {max_keys}")
        self.client = client
        self.bucket = bucket
        self.prefix = prefix
        self.recursive = recursive
        self.max_keys = max_keys
        self.cancel = cancel
        self.chunks_fetched = 0
        self._token = None
        self._done = False

    @property
    def delimiter(self):
        # Grouping by separator emulates one level of depth
        return "" if self.recursive else PATH_SEPARATOR

    @property
    def exhausted(self):
        return self._done

    def __iter__(self) -> Iterator[ListingChunk]:
        return self

    def __next__(self) -> ListingChunk:
        if self._done:
            raise StopIteration
        try:
            check_cancelled(self.cancel, f"listing {self.prefix!r}")
        except OperationCancelledError:
            self._done = True
            raise

        trace_op("list_chunk", self.prefix, recursive=self.recursive, chunk=self.chunks_fetched)
        start_time = time.time()
        options = ListObjectsOptions(
            prefix=self.prefix,
            delimiter=self.delimiter,
            max_keys=self.max_keys,
            continuation_token=self._token,
        )
        try:
            result = self.client.list_objects(self.bucket, options)
        except Exception as e:
            self._done = True
            err = normalize_error(e, "LIST", self.prefix)
            logger.error(f"Failed to list prefix '{self.prefix}' (chunk {self.chunks_fetched}): {err}")
            raise ListingError(f"Failed to list prefix '{self.prefix}': {err.message}", prefix=self.prefix) from e
        self.chunks_fetched += 1

        if result is None or result.keys is None or result.common_prefixes is None:
            self._done = True
            raise ListingError(f"Malformed listing response for prefix '{self.prefix}'", prefix=self.prefix)

        next_token = result.next_continuation_token
        if next_token is not None and next_token == self._token:
            self._done = True
            raise ListingError(
                f"Listing of prefix '{self.prefix}' returned a continuation token that did not advance",
                prefix=self.prefix)

        chunk = ListingChunk(
            object_keys=tuple(result.keys),
            common_prefixes=tuple(result.common_prefixes),
            continuation=next_token,
        )
        self._token = next_token
        if next_token is None:
            self._done = True
        logger.debug(f"Listed {len(chunk.object_keys)} keys and {len(chunk.common_prefixes)} prefixes "
                     f"under '{self.prefix}' (chunk {self.chunks_fetched})")
        time_function("list_chunk", start_time)
        return chunk

    def iter_keys(self) -> Iterator[str]:
        """Yield every object key of the remaining chunks."""
        for chunk in self:
            yield from chunk.object_keys


def list_chunks(client, bucket, prefix, recursive=False,
                max_keys=DEFAULT_LISTING_CHUNK_LENGTH, cancel=None) -> ObjectListing:
    """
    Start a new listing session.
    
    Args:
        client (ObjectStoreClient): Store collaborator
        bucket (str): Bucket to list
        prefix (str): Key prefix to list
        recursive (bool, optional): List all descendants flat. Defaults to False.
        max_keys (int, optional): Page size. Defaults to 1000.
        cancel (CancellationToken, optional): Checked before every chunk request
        
    Returns:
        ObjectListing: Lazy iterator of ListingChunk
    """
    return ObjectListing(client, bucket, prefix, recursive=recursive, max_keys=max_keys, cancel=cancel)
