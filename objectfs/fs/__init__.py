# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Hierarchical filesystem layer over a flat object store.

Components, leaf first: path/key translation (paths), single-object status
(status), chunked listing (listing), directory emulation (directories),
copy+delete rename (rename), read/write streams (streams) and the
ObjectFileSystem facade composing them (filesystem).
"""
from .cancel import CancellationToken
from .directories import DirectoryEmulator
from .filesystem import DirectoryEntry, FileStatus, ObjectFileSystem
from .listing import ListingChunk, ObjectListing, list_chunks
from .paths import key_to_path, normalize, path_to_key, root_key
from .rename import RenameEmulator, RenameResult
from .status import ObjectStatus, ObjectStatusResolver
from .streams import ObjectReader, ObjectWriter

__all__ = [
    "ObjectFileSystem",
    "FileStatus",
    "DirectoryEntry",
    "DirectoryEmulator",
    "ObjectListing",
    "ListingChunk",
    "list_chunks",
    "ObjectStatusResolver",
    "ObjectStatus",
    "RenameEmulator",
    "RenameResult",
    "ObjectReader",
    "ObjectWriter",
    "CancellationToken",
    "path_to_key",
    "key_to_path",
    "normalize",
    "root_key",
]
