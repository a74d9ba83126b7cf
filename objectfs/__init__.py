# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
objectfs: present a flat, key-based object store as a hierarchical filesystem.

Subpackages:
    client: Store collaborator contract, error taxonomy, in-memory store
    fs: Path translation, directory emulation, listing, rename and the ObjectFileSystem facade
    fuse: FUSE mount of an ObjectFileSystem (requires libfuse)
"""
from .client import ClientConfiguration, InMemoryObjectStore, ObjectStoreClient
from .config import FileSystemOptions
from .fs import CancellationToken, ObjectFileSystem

__version__ = "0.1.0"

__all__ = [
    "ObjectFileSystem",
    "ObjectStoreClient",
    "InMemoryObjectStore",
    "ClientConfiguration",
    "FileSystemOptions",
    "CancellationToken",
    "__version__",
]
