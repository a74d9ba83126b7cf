from datetime import datetime, timezone

import grpc
import pytest
from conftest import BUCKET, grpc_error
from objectfs.client.exceptions import StatusQueryError, StoreError
from objectfs.client.types import ObjectMetadata
from objectfs.fs.status import ObjectStatusResolver

class StaticHead:
    """Collaborator whose head_object always returns the same metadata."""

    def __init__(self, metadata):
        self.metadata = metadata

    def head_object(self, bucket, key):
        return self.metadata

def test_status_of_existing_object(store):
    store.put_object(BUCKET, "a/b", b"hello")
    status = ObjectStatusResolver(store, BUCKET).status_of("a/b")

    assert status.size == 5
    expected = int(store.head_object(BUCKET, "a/b").last_modified.timestamp() * 1000)
    assert status.last_modified_epoch_millis == expected

def test_status_of_zero_length_object(store):
    store.put_object(BUCKET, "empty", b"")
    assert ObjectStatusResolver(store, BUCKET).status_of("empty").size == 0

def test_missing_object_is_none(store):
    assert ObjectStatusResolver(store, BUCKET).status_of("missing") is None

def test_grpc_not_found_is_none(faulty_store):
    faulty_store.fail("head", "k", grpc_error(grpc.StatusCode.NOT_FOUND, "no such key"))
    assert ObjectStatusResolver(faulty_store, BUCKET).status_of("k") is None

@pytest.mark.parametrize("error", [
    StoreError("quota exceeded", operation="HEAD"),
    grpc_error(grpc.StatusCode.UNAVAILABLE, "connection refused"),
    RuntimeError("unexpected"),
])
def test_store_failure_is_not_absence(faulty_store, error):
    """Test that failures other than not-found raise instead of reporting absence."""
    faulty_store.put_object(BUCKET, "k", b"data")
    faulty_store.fail("head", "k", error)
    with pytest.raises(StatusQueryError) as excinfo:
        ObjectStatusResolver(faulty_store, BUCKET).status_of("k")
    assert excinfo.value.key == "k"

def test_naive_timestamp_is_utc():
    resolver = ObjectStatusResolver(StaticHead(ObjectMetadata(3, datetime(2024, 1, 1))), BUCKET)
    assert resolver.status_of("k").last_modified_epoch_millis == 1704067200000

    aware = ObjectStatusResolver(StaticHead(ObjectMetadata(3, datetime(2024, 1, 1, tzinfo=timezone.utc))), BUCKET)
    assert aware.status_of("k").last_modified_epoch_millis == 1704067200000

@pytest.mark.parametrize("metadata", [
    None,
    ObjectMetadata(-1, datetime(2024, 1, 1)),
    ObjectMetadata(1, None),
])
def test_malformed_metadata(metadata):
    with pytest.raises(StatusQueryError):
        ObjectStatusResolver(StaticHead(metadata), BUCKET).status_of("k")

@pytest.mark.parametrize("error", [
    grpc_error(grpc.StatusCode.UNAVAILABLE, "DNS resolution failed: host not found"),
    grpc_error(grpc.StatusCode.PERMISSION_DENIED, "Access denied for site/404.html"),
])
def test_unreachable_store_is_not_absence(faulty_store, error):
    faulty_store.fail("head", "k", error)
    with pytest.raises(StatusQueryError):
        ObjectStatusResolver(faulty_store, BUCKET).status_of("k")
