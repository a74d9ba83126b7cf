# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

@dataclass(frozen=True)
class ObjectMetadata:
    """Metadata for an object, as returned by head_object."""
    content_length: int
    last_modified: datetime
    etag: Optional[str] = None

@dataclass(frozen=True)
class ListObjectsOptions:
    """Options for one list_objects request."""
    prefix: str = ""
    delimiter: str = ""
    max_keys: Optional[int] = None
    continuation_token: Optional[str] = None

@dataclass(frozen=True)
class ListObjectsOutput:
    """One page of a list_objects response."""
    keys: Tuple[str, ...] = ()
    common_prefixes: Tuple[str, ...] = ()
    next_continuation_token: Optional[str] = None

@dataclass(frozen=True)
class ClientConfiguration:
    """Connection settings handed to a store collaborator, opaque to the filesystem layer."""
    connect_timeout_ms: int = 50000
    socket_timeout_ms: int = 50000
    connection_ttl_ms: int = -1
    max_connections: int = 1024
    extra: dict = field(default_factory=dict)
