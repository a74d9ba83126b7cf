# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Store collaborator contract.

Any backend plugged under the filesystem layer implements ObjectStoreClient.
The layer relies only on these byte-addressed key operations; authentication,
request signing, transport retries and TLS belong to the implementation.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union

from .types import ListObjectsOptions, ListObjectsOutput, ObjectMetadata


class ObjectStoreClient(ABC):
    """
    Abstract base class for object store collaborators.
    
    Implementations signal a missing key by raising NotFoundError (or a
    gRPC NOT_FOUND error); any other exception is treated as a store failure.
    """

    backend_name = "object"

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """
        Retrieve the full content of an object.
        
        Raises:
            NotFoundError: If the key does not exist.
        """

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: Union[bytes, BinaryIO],
                   content_length: Optional[int] = None) -> None:
        """
        Store an object, replacing any previous content. Zero-length data is valid.
        
        Args:
            bucket (str): Bucket name
            key (str): Object key
            data (bytes or file object): Content, or a readable binary stream positioned at its start
            content_length (int, optional): Number of bytes to store when data is a stream
        """

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """
        Delete an object.
        
        Raises:
            NotFoundError: If the key does not exist.
        """

    @abstractmethod
    def copy_object(self, bucket: str, src_key: str, dst_key: str) -> None:
        """
        Server-side copy of src_key to dst_key.
        
        Implementations without a native copy raise NotImplementedError and
        callers fall back to get_object + put_object.
        
        Raises:
            NotFoundError: If src_key does not exist.
        """

    @abstractmethod
    def head_object(self, bucket: str, key: str) -> ObjectMetadata:
        """
        Get object metadata without the content.
        
        Raises:
            NotFoundError: If the key does not exist.
        """

    @abstractmethod
    def list_objects(self, bucket: str, options: ListObjectsOptions) -> ListObjectsOutput:
        """
        Return one page of keys under options.prefix.
        
        With a delimiter, keys containing it past the prefix are grouped into
        common_prefixes. next_continuation_token is None on the last page.
        """

    @abstractmethod
    def open_range(self, bucket: str, key: str, offset: int = 0) -> BinaryIO:
        """
        Open a stream over an object starting at byte offset, without fetching preceding bytes.
        
        Raises:
            NotFoundError: If the key does not exist.
        """

    def close(self) -> None:
        """Release connections held by the collaborator."""
