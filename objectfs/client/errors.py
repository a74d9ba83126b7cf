# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Store error translation.

Store collaborators may fail with objectfs exceptions, with raw gRPC errors
(gRPC-backed clients), or with arbitrary exceptions. This module folds all
of them into the objectfs taxonomy so the filesystem layer only has to tell
"not found" from "store failure".

Functions:
    convert_rpc_error: Convert a gRPC error to an objectfs exception.
    normalize_error: Convert any collaborator exception to an objectfs exception.
"""
import grpc
from .exceptions import ObjectFSError, NotFoundError, StoreError

TRANSPORT_STATUS_CODES = {
    grpc.StatusCode.DEADLINE_EXCEEDED: ("Request timed out", "ERR_TIMEOUT"),
    grpc.StatusCode.RESOURCE_EXHAUSTED: ("Rate limit exceeded", "ERR_RATE_LIMIT"),
    grpc.StatusCode.UNAVAILABLE: ("Service unavailable", "ERR_UNAVAILABLE"),
    grpc.StatusCode.INTERNAL: ("Internal server error", "ERR_INTERNAL"),
    grpc.StatusCode.UNAUTHENTICATED: ("Authentication failed", "ERR_AUTH"),
    grpc.StatusCode.PERMISSION_DENIED: ("Access denied", "ERR_AUTH"),
}

def convert_rpc_error(e: grpc.RpcError, operation: str = None, key: str = None) -> ObjectFSError:
    """
    Convert a gRPC error to the matching objectfs error.
    
    NOT_FOUND status (or a "not found"/"NoSuchKey" detail from stores that
    report everything as UNKNOWN) becomes NotFoundError. Transport status
    codes keep a specific error code; everything else is a generic StoreError.
    
    Args:
        e (grpc.RpcError): The gRPC error to convert.
        operation (str, optional): The store operation being performed. Defaults to None.
        key (str, optional): The key the operation targeted. Defaults to None.
        
    Returns:
        ObjectFSError: The converted error.
    """
    error_msg = str(e.details() if hasattr(e, 'details') else str(e))
    error_code = e.code() if hasattr(e, 'code') else None

    if error_code == grpc.StatusCode.NOT_FOUND:
        return NotFoundError(error_msg or "Object does not exist", key=key)
    if error_code in TRANSPORT_STATUS_CODES:
        message, code = TRANSPORT_STATUS_CODES[error_code]
        return StoreError(f"{message}: {error_msg}", operation=operation, code=code, key=key)

    # Only stores that report everything as UNKNOWN need the details sniffed
    if error_code in (None, grpc.StatusCode.UNKNOWN) and \
            any(x in error_msg.lower() for x in ["nosuchkey", "not found", "404"]):
        return NotFoundError(error_msg, key=key)

    return StoreError(error_msg, operation=operation, key=key)

def normalize_error(e: BaseException, operation: str = None, key: str = None) -> ObjectFSError:
    """
    Convert any exception raised by a store collaborator to an objectfs error.
    
    Args:
        e (BaseException): The exception raised by the collaborator.
        operation (str, optional): The store operation being performed. Defaults to None.
        key (str, optional): The key the operation targeted. Defaults to None.
        
    Returns:
        ObjectFSError: e itself when it already is one, otherwise a converted error.
    """
    if isinstance(e, ObjectFSError):
        return e
    if isinstance(e, grpc.RpcError):
        return convert_rpc_error(e, operation, key)
    return StoreError(f"{type(e).__name__}: {e}", operation=operation, key=key)
