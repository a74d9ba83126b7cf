import grpc
import pytest
from conftest import grpc_error
from objectfs.client.errors import convert_rpc_error, normalize_error
from objectfs.client.exceptions import NotFoundError, ObjectFSError, StoreError

def test_not_found_status():
    err = convert_rpc_error(grpc_error(grpc.StatusCode.NOT_FOUND, "missing"), "HEAD", "a/b")
    assert isinstance(err, NotFoundError)
    assert err.key == "a/b"
    assert err.code == "ERR_NOT_FOUND"

def test_not_found_detail_on_unknown_status():
    err = convert_rpc_error(grpc_error(grpc.StatusCode.UNKNOWN, "NoSuchKey: a/b"), "GET", "a/b")
    assert isinstance(err, NotFoundError)

@pytest.mark.parametrize("status, code", [
    (grpc.StatusCode.DEADLINE_EXCEEDED, "ERR_TIMEOUT"),
    (grpc.StatusCode.RESOURCE_EXHAUSTED, "ERR_RATE_LIMIT"),
    (grpc.StatusCode.UNAVAILABLE, "ERR_UNAVAILABLE"),
    (grpc.StatusCode.INTERNAL, "ERR_INTERNAL"),
    (grpc.StatusCode.UNAUTHENTICATED, "ERR_AUTH"),
    (grpc.StatusCode.PERMISSION_DENIED, "ERR_AUTH"),
])
def test_transport_status_codes(status, code):
    err = convert_rpc_error(grpc_error(status, "boom"), "LIST")
    assert isinstance(err, StoreError)
    assert not isinstance(err, NotFoundError)
    assert err.code == code
    assert "boom" in err.message

def test_other_status_uses_operation_code():
    err = convert_rpc_error(grpc_error(grpc.StatusCode.INVALID_ARGUMENT, "bad request"), "put", "k")
    assert isinstance(err, StoreError)
    assert err.code == "ERR_STORE_PUT"
    assert err.operation == "put"

def test_normalize_error():
    """Test that every collaborator error becomes an objectfs error."""
    original = NotFoundError("gone", key="k")
    assert normalize_error(original) is original

    wrapped = normalize_error(ValueError("bad value"), "GET", "k")
    assert isinstance(wrapped, StoreError)
    assert "ValueError" in wrapped.message
    assert wrapped.key == "k"

    converted = normalize_error(grpc_error(grpc.StatusCode.NOT_FOUND), "HEAD", "k")
    assert isinstance(converted, NotFoundError)

def test_error_string_format():
    err = ObjectFSError("something failed", code="ERR_TEST")
    assert str(err) == "ERR_TEST: something failed"
    assert err.message == "something failed"

@pytest.mark.parametrize("status, details", [
    (grpc.StatusCode.UNAVAILABLE, "DNS resolution failed: host not found"),
    (grpc.StatusCode.PERMISSION_DENIED, "Access denied for site/404.html"),
    (grpc.StatusCode.INVALID_ARGUMENT, "bucket not found in request"),
])
def test_status_code_wins_over_details(status, details):
    """Test that a set status code is trusted over not-found wording in the details."""
    err = convert_rpc_error(grpc_error(status, details), "HEAD", "site/404.html")
    assert isinstance(err, StoreError)
    assert not isinstance(err, NotFoundError)
