# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Path <-> key translation.

Hierarchical paths ("/a/b/c") map onto flat object keys ("a/b/c"). Keys
never start with the separator and the whole bucket is the root, whose key
is the empty string. Nothing here touches the store.
"""

from ..client.exceptions import InvalidPathError

PATH_SEPARATOR = '/'

def _segments(path, root_uri=""):
    if not isinstance(path, str):
        raise InvalidPathError(f"Path must be a string, got {type(path).__name__}", path=path)
    if '\x00' in path:
        raise InvalidPathError("Path contains a NUL character", path=path)
    root = root_uri.rstrip(PATH_SEPARATOR)
    if root and (path == root or path.startswith(root + PATH_SEPARATOR)):
        path = path[len(root):]
    if '://' in path:
        raise InvalidPathError(f"Path {path} is outside the filesystem root {root_uri or PATH_SEPARATOR}", path=path)
    segments = [s for s in path.split(PATH_SEPARATOR) if s]
    for segment in segments:
        if segment in ('.', '..'):
            raise InvalidPathError(f"Relative segment '{segment}' not supported in {path}", path=path)
    return segments

def root_key() -> str:
    """Key of the filesystem root: the empty prefix covering the whole bucket."""
    return ""

def path_to_key(path: str, root_uri: str = "") -> str:
    """
    Convert a filesystem path to an object key.
    
    Strips root_uri when present, drops leading separators and collapses
    repeated ones. The result never carries a trailing separator.
    
    Args:
        path (str): Filesystem path, e.g. "/a//b/" or "mem://bucket/a/b"
        root_uri (str, optional): Root prefix to strip. Defaults to "".
        
    Returns:
        str: The object key, e.g. "a/b"
        
    Raises:
        InvalidPathError: If the path is not a string, contains NUL, "." or
            ".." segments, or is a URI outside root_uri
    """
    return PATH_SEPARATOR.join(_segments(path, root_uri))

def key_to_path(key: str) -> str:
    """
    Convert an object key (as returned by listing) to an absolute filesystem path.
    
    Args:
        key (str): Object key or common prefix, e.g. "a/b" or "a/b/"
        
    Returns:
        str: Absolute path, e.g. "/a/b"; the root key maps to "/"
    """
    return PATH_SEPARATOR + key.strip(PATH_SEPARATOR)

def normalize(path: str, root_uri: str = "") -> str:
    """Canonical absolute form of a path: key_to_path(path_to_key(path))."""
    return PATH_SEPARATOR + PATH_SEPARATOR.join(_segments(path, root_uri))

def directory_prefix(key: str) -> str:
    """Listing prefix for the children of a directory key ("" for the root)."""
    return key + PATH_SEPARATOR if key else ""

def parent_key(key: str):
    """Key of the parent directory, or None for the root."""
    if not key:
        return None
    idx = key.rfind(PATH_SEPARATOR)
    return key[:idx] if idx >= 0 else root_key()

def basename(key: str) -> str:
    """Last segment of a key or prefix."""
    return key.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]

def join(parent: str, name: str) -> str:
    """Join a parent key and a child name into a key."""
    return directory_prefix(parent) + name.strip(PATH_SEPARATOR)

def is_ancestor(ancestor_key: str, key: str) -> bool:
    """True if key lies strictly below ancestor_key."""
    return key.startswith(directory_prefix(ancestor_key)) and key != ancestor_key
