# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from objectfs import InMemoryObjectStore, ObjectFileSystem
from objectfs.client.exceptions import DirectoryNotEmptyError, PartialRenameError

def main():
    # Any ObjectStoreClient works here; the in-memory store needs no credentials
    store = InMemoryObjectStore()
    fs = ObjectFileSystem(store, "my-test-bucket")

    try:
        # Create a directory tree
        fs.mkdirs("/data/raw")
        print("Created directory: /data/raw")

        # Write a file
        with fs.create("/data/raw/hello.txt") as out:
            out.write(b"Hello, World!")
        print("Wrote file: /data/raw/hello.txt")

        # Get file status
        status = fs.get_status("/data/raw/hello.txt")
        print(f"File size: {status.size} bytes")
        print(f"Last modified: {status.last_modified_ms} ms since epoch")

        # Read from an offset
        with fs.open_for_read("/data/raw/hello.txt", offset=7) as reader:
            print(f"Read from offset 7: {reader.read().decode()}")

        # List a directory
        print("Entries under /data:")
        for entry in fs.list("/data", recursive=True):
            print(f"- {entry.name}{'/' if entry.is_directory else ''}")

        # Rename a directory
        try:
            result = fs.rename("/data/raw", "/data/staged")
            print(f"Renamed /data/raw to /data/staged ({len(result.renamed)} objects moved)")
        except PartialRenameError as e:
            print(f"Rename stopped partway, moved: {e.renamed}, failed at: {e.failed_key}")

        # Delete the tree
        try:
            fs.delete("/data")
        except DirectoryNotEmptyError:
            print("/data is not empty, deleting recursively")
            fs.delete("/data", recursive=True)
        print(f"Keys left in the bucket: {store.keys('my-test-bucket')}")

    finally:
        fs.close()
        store.close()

if __name__ == "__main__":
    main()
