# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from typing import Optional, Sequence, Tuple


class ObjectFSError(Exception):
    """Base exception for objectfs errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN", key: Optional[str] = None):
        self.code = code
        self.message = message
        self.key = key
        super().__init__(f"{code}: {message}")

class InvalidPathError(ObjectFSError):
    """Path is malformed or unsupported; rejected before any store call."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="ERR_INVALID_PATH")
        self.path = path

class NotFoundError(ObjectFSError):
    """Target key or prefix does not exist."""
    def __init__(self, message: str = "Object does not exist", key: Optional[str] = None):
        super().__init__(message, code="ERR_NOT_FOUND", key=key)

class AlreadyExistsError(ObjectFSError):
    """Target path is already occupied."""
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, code="ERR_ALREADY_EXISTS", key=key)

class DirectoryNotEmptyError(ObjectFSError):
    """Non-recursive delete of a directory that still has children."""
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, code="ERR_NOT_EMPTY", key=key)

class StoreError(ObjectFSError):
    """Store collaborator failed (transport, auth, quota, malformed response)."""
    def __init__(self, message: str, operation: str = None, code: str = None, key: Optional[str] = None):
        if code is None:
            code = "ERR_STORE"
            if operation:
                code = f"ERR_STORE_{operation.upper()}"
        super().__init__(message, code=code, key=key)
        self.operation = operation

class StatusQueryError(ObjectFSError):
    """Status lookup failed; existence is unknown."""
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, code="ERR_STATUS_QUERY", key=key)

class ListingError(ObjectFSError):
    """A listing chunk request failed."""
    def __init__(self, message: str, prefix: Optional[str] = None):
        super().__init__(message, code="ERR_LISTING", key=prefix)
        self.prefix = prefix

class WriteError(ObjectFSError):
    """Object write failed."""
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, code="ERR_WRITE", key=key)

class ReadError(ObjectFSError):
    """Object read failed."""
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, code="ERR_READ", key=key)

class DeleteError(ObjectFSError):
    """Object delete failed."""
    def __init__(self, message: str, key: Optional[str] = None, code: str = "ERR_DELETE"):
        super().__init__(message, code=code, key=key)

class PartialDeleteError(DeleteError):
    """Recursive delete stopped partway; `deleted` keys are gone, `failed_key` and later ones remain."""
    def __init__(self, message: str, key: Optional[str] = None,
                 deleted: Sequence[str] = (), failed_key: Optional[str] = None):
        super().__init__(message, key=key, code="ERR_PARTIAL_DELETE")
        self.deleted = tuple(deleted)
        self.failed_key = failed_key

class CopyError(ObjectFSError):
    """Object copy failed; source and destination untouched."""
    def __init__(self, message: str, src_key: Optional[str] = None, dst_key: Optional[str] = None):
        super().__init__(message, code="ERR_COPY", key=src_key)
        self.src_key = src_key
        self.dst_key = dst_key

class PartialRenameError(ObjectFSError):
    """
    Rename left the store in a mixed state that needs cleanup or a retry.

    Attributes:
        src_key (str): Key (or directory prefix) being renamed
        dst_key (str): Destination key (or directory prefix)
        renamed (tuple): (source, destination) key pairs fully moved
        failed_key (str): Source key whose move did not complete
        source_present (bool): Whether failed_key still exists at the source
        destination_present (bool): Whether the copy of failed_key exists at the destination
    """
    def __init__(self, message: str, src_key: str, dst_key: str,
                 renamed: Sequence[Tuple[str, str]] = (), failed_key: Optional[str] = None,
                 source_present: bool = True, destination_present: bool = False):
        super().__init__(message, code="ERR_PARTIAL_RENAME", key=src_key)
        self.src_key = src_key
        self.dst_key = dst_key
        self.renamed = tuple(renamed)
        self.failed_key = failed_key
        self.source_present = source_present
        self.destination_present = destination_present

class OperationCancelledError(ObjectFSError):
    """A multi-step traversal was abandoned through its cancellation token."""
    def __init__(self, message: str = "Operation cancelled", key: Optional[str] = None):
        super().__init__(message, code="ERR_CANCELLED", key=key)
