# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved
'''
This example demonstrates how to mount an ObjectFileSystem with FUSE and work
with it through ordinary file operations.

The bucket is served from an in-memory store, so the mount needs no
credentials and its contents disappear on unmount.

Setup:
    # Install objectfs
    pip install objectfs

    # Install FUSE on your system
    # On Ubuntu/Debian:
    sudo apt-get install fuse

    # On macOS (using Homebrew):
    brew install macfuse

Usage:
    # Mount in one terminal (runs in the foreground)
    python fuse_operations.py mount /mnt/objectfs

    # Exercise the mount from another terminal
    python fuse_operations.py demo /mnt/objectfs

    # Unmount when done
    fusermount -u /mnt/objectfs

Troubleshooting:
    # Enable debug logging and per-operation traces
    export OBJECTFS_LOG_LEVEL=DEBUG
    export OBJECTFS_TRACE_OPS=1
'''
import sys
import os

def serve(mountpoint):
    from objectfs import InMemoryObjectStore, ObjectFileSystem
    from objectfs.fuse import mount

    fs = ObjectFileSystem(InMemoryObjectStore(), "example-bucket")
    mount(fs, mountpoint)

def demo(mountpoint):
    directory = os.path.join(mountpoint, "docs")
    example_file = os.path.join(directory, "example.txt")

    # Create a directory
    try:
        os.makedirs(directory, exist_ok=True)
        print(f"Directory created: {directory}")
    except OSError as e:
        print(f"mkdir failed: {e}")

    # Write to a file
    try:
        with open(example_file, 'w') as f:
            f.write("Hello FUSE")
        print(f"File created and written: {example_file}")
    except OSError as e:
        print(f"Write operation failed: {e}")

    # Read from the file
    try:
        with open(example_file, 'r') as f:
            content = f.read()
        print(f"Content read from file: {content}")
    except OSError as e:
        print(f"Read operation failed: {e}")

    # Rename, then delete the file
    try:
        renamed = os.path.join(directory, "renamed.txt")
        os.rename(example_file, renamed)
        print(f"File renamed: {renamed}")
        os.remove(renamed)
        print(f"File removed: {renamed}")
    except OSError as e:
        print(f"Rename/delete operation failed: {e}")

def main():
    if len(sys.argv) != 3 or sys.argv[1] not in ("mount", "demo"):
        print("Usage: python fuse_operations.py mount|demo <mountpoint>")
        sys.exit(1)

    if sys.argv[1] == "mount":
        serve(sys.argv[2])
    else:
        demo(sys.argv[2])

if __name__ == '__main__':
    main()
