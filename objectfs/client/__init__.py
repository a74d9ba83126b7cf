# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Store-facing side of objectfs: the collaborator contract, its data types,
the error taxonomy and an in-memory reference collaborator.
"""
from .exceptions import (
    ObjectFSError,
    InvalidPathError,
    NotFoundError,
    AlreadyExistsError,
    DirectoryNotEmptyError,
    StoreError,
    StatusQueryError,
    ListingError,
    WriteError,
    ReadError,
    DeleteError,
    PartialDeleteError,
    CopyError,
    PartialRenameError,
    OperationCancelledError,
)
from .types import ClientConfiguration, ListObjectsOptions, ListObjectsOutput, ObjectMetadata
from .store import ObjectStoreClient
from .memory import InMemoryObjectStore

__all__ = [
    "ObjectStoreClient",
    "InMemoryObjectStore",
    "ClientConfiguration",
    "ListObjectsOptions",
    "ListObjectsOutput",
    "ObjectMetadata",
    "ObjectFSError",
    "InvalidPathError",
    "NotFoundError",
    "AlreadyExistsError",
    "DirectoryNotEmptyError",
    "StoreError",
    "StatusQueryError",
    "ListingError",
    "WriteError",
    "ReadError",
    "DeleteError",
    "PartialDeleteError",
    "CopyError",
    "PartialRenameError",
    "OperationCancelledError",
]
