# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Mount utilities for the objectfs FUSE filesystem.

This module provides unmounting, signal handling and mount options for
serving an ObjectFileSystem through FUSE.
"""

import sys
import signal
import subprocess
import time
from ..utils import logger, time_function

def unmount(mountpoint):
    """
    Unmount the filesystem using fusermount (Linux).
    
    Args:
        mountpoint (str): Path where the filesystem is mounted
        
    Returns:
        bool: True if the mountpoint was unmounted, False otherwise
    """
    logger.info(f"Unmounting filesystem at {mountpoint}")
    start_time = time.time()
    
    # Normalize mountpoint (remove trailing slash)
    mountpoint = mountpoint.rstrip('/')
    try:
        cp = subprocess.run(["mountpoint", "-q", mountpoint])
        if cp.returncode != 0:
            logger.warning(f"{mountpoint} is not mounted, nothing to unmount.")
            return False
        subprocess.run(["fusermount", "-u", mountpoint], check=True)
        logger.info(f"Unmounted {mountpoint} gracefully.")
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error(f"Error during unmounting: {e}")
        return False
    finally:
        time_function("unmount", start_time)

def setup_signal_handlers(mountpoint, unmount_func):
    """
    Set up signal handlers for graceful unmounting.
    
    Installs handlers for SIGINT and SIGTERM so the filesystem is unmounted
    (and open write buffers released) when the process is terminated.
    
    Args:
        mountpoint (str): Path where the filesystem is mounted
        unmount_func (callable): Function to call for unmounting
        
    Returns:
        callable: The signal handler function
    """
    def signal_handler(sig, frame):
        logger.info(f"Signal {sig} received, unmounting...")
        unmount_func(mountpoint)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    
    return signal_handler

def get_mount_options(foreground=True, allow_other=False):
    """
    Get standard mount options for FUSE.
    
    Attribute and entry caching stay short: the bucket may be changed by
    other writers and every lookup should reflect the store.
    
    Args:
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount. 
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.
        
    Returns:
        dict: Dictionary of mount options
    """
    ATTR_TIMEOUT = 1  # seconds
    
    options = {
        'foreground': foreground,
        'default_permissions': True,
        'rw': True,
        'big_writes': True,
        'hard_remove': True,
        'entry_timeout': ATTR_TIMEOUT,
        'negative_timeout': ATTR_TIMEOUT,
        'attr_timeout': ATTR_TIMEOUT,
    }
    
    # Only add allow_other if explicitly requested
    if allow_other:
        options['allow_other'] = True
        
    return options
