# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE mount of an ObjectFileSystem.

Importing this package requires fusepy and a libfuse installation.
"""
from .fuse_mount import ObjectFuse, mount, to_fuse_error
from .mount_utils import unmount, get_mount_options, setup_signal_handlers

__all__ = ["ObjectFuse", "mount", "unmount", "to_fuse_error", "get_mount_options", "setup_signal_handlers"]
