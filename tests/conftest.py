import pytest
import grpc
from objectfs import InMemoryObjectStore, ObjectFileSystem, FileSystemOptions

BUCKET = "test-bucket"

class FaultyStore(InMemoryObjectStore):
    """In-memory store that raises configured errors for chosen operations and keys."""

    def __init__(self):
        super().__init__()
        self.failures = {}

    def fail(self, operation, key=None, error=None):
        """Make `operation` raise `error` for `key` (any key when None)."""
        self.failures[(operation, key)] = error if error is not None else grpc_error(grpc.StatusCode.UNAVAILABLE)

    def _maybe_fail(self, operation, key):
        error = self.failures.get((operation, key)) or self.failures.get((operation, None))
        if error is not None:
            raise error

    def get_object(self, bucket, key):
        self._maybe_fail("get", key)
        return super().get_object(bucket, key)

    def put_object(self, bucket, key, data, content_length=None):
        self._maybe_fail("put", key)
        return super().put_object(bucket, key, data, content_length)

    def delete_object(self, bucket, key):
        self._maybe_fail("delete", key)
        return super().delete_object(bucket, key)

    def copy_object(self, bucket, src_key, dst_key):
        self._maybe_fail("copy", src_key)
        return super().copy_object(bucket, src_key, dst_key)

    def head_object(self, bucket, key):
        self._maybe_fail("head", key)
        return super().head_object(bucket, key)

    def list_objects(self, bucket, options=None):
        self._maybe_fail("list", options.prefix if options else None)
        return super().list_objects(bucket, options)

    def open_range(self, bucket, key, offset=0):
        self._maybe_fail("open_range", key)
        return super().open_range(bucket, key, offset)

class FakeRpcError(grpc.RpcError):
    """gRPC error carrying a status code and details, as raised by stubs."""

    def __init__(self, code, details=""):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details

def grpc_error(code, details="simulated failure"):
    return FakeRpcError(code, details)

def write_file(fs, path, data=b""):
    """Write a whole file through the filesystem facade."""
    with fs.create(path) as out:
        out.write(data)

@pytest.fixture
def store():
    """Fixture to provide an empty in-memory store."""
    store = InMemoryObjectStore()
    yield store
    store.close()

@pytest.fixture
def faulty_store():
    """Fixture to provide an in-memory store with fault injection."""
    store = FaultyStore()
    yield store
    store.close()

@pytest.fixture
def fs(store):
    """Fixture to provide a filesystem over the in-memory store."""
    with ObjectFileSystem(store, BUCKET) as fs:
        yield fs

@pytest.fixture
def faulty_fs(faulty_store):
    """Fixture to provide a filesystem over the fault-injecting store."""
    with ObjectFileSystem(faulty_store, BUCKET) as fs:
        yield fs

@pytest.fixture
def small_chunk_fs(store):
    """Fixture to provide a filesystem that lists two keys per request."""
    with ObjectFileSystem(store, BUCKET, FileSystemOptions(listing_chunk_length=2)) as fs:
        yield fs
