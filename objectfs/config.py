# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem layer configuration.

FileSystemOptions carries the settings the filesystem layer itself uses.
Store connection settings (timeouts, connection limits) live in
ClientConfiguration and are consumed by the store collaborator only.

Environment variables:
    OBJECTFS_LISTING_CHUNK_LENGTH: Keys requested per listing call (default 1000)
    OBJECTFS_FOLDER_SUFFIX: Suffix of directory marker objects (default "_$folder$")
    OBJECTFS_ROOT_URI: Filesystem root prefix stripped from incoming paths (default "")
"""

import os
from dataclasses import dataclass

# Suffix for an empty object to flag it as a directory
FOLDER_SUFFIX = "_$folder$"

# Store per-request cap on listing results
DEFAULT_LISTING_CHUNK_LENGTH = 1000

@dataclass(frozen=True)
class FileSystemOptions:
    """
    Settings for an ObjectFileSystem.
    
    Attributes:
        listing_chunk_length (int): Maximum keys requested per listing call
        folder_suffix (str): Reserved key suffix marking directory placeholders
        root_uri (str): Filesystem-style root prefix (e.g. "mem://bucket") stripped from paths
    """
    listing_chunk_length: int = DEFAULT_LISTING_CHUNK_LENGTH
    folder_suffix: str = FOLDER_SUFFIX
    root_uri: str = ""

    def __post_init__(self):
        if self.listing_chunk_length < 1:
            raise ValueError(f"listing_chunk_length must be positive, got {self.listing_chunk_length}")
        if not self.folder_suffix or '/' in self.folder_suffix:
            raise ValueError(f"Invalid folder suffix: {self.folder_suffix!r}")

    @classmethod
    def from_env(cls, environ=None):
        """
        Build options from OBJECTFS_* environment variables.
        
        Args:
            environ (dict, optional): Mapping to read instead of os.environ
            
        Returns:
            FileSystemOptions: Options with defaults for unset variables
        """
        environ = os.environ if environ is None else environ
        return cls(
            listing_chunk_length=int(environ.get('OBJECTFS_LISTING_CHUNK_LENGTH', DEFAULT_LISTING_CHUNK_LENGTH)),
            folder_suffix=environ.get('OBJECTFS_FOLDER_SUFFIX', FOLDER_SUFFIX),
            root_uri=environ.get('OBJECTFS_ROOT_URI', ''),
        )
