"""Error taxonomy for gateway calls.

Every client call either returns its typed response or raises exactly one
``CyphernodeError`` subclass. The ``kind`` attribute groups the classes the
way callers usually branch on them:

- INPUT: bad caller-supplied data (or a 400/409/422 from the gateway)
- KEY: credential, signing or clock failure (or a 401/403)
- NETWORK: connect, TLS, timeout or unexpected HTTP status
- NO_RESOURCE: the gateway answered 404
- GATEWAY: the envelope's ``error`` member was populated
- INTERNAL: the response did not match the expected schema
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Broad error categories."""
    INPUT = "input"
    KEY = "key"
    NETWORK = "network"
    NO_RESOURCE = "no_resource"
    GATEWAY = "gateway"
    INTERNAL = "internal"


class CyphernodeError(Exception):
    """Base class for all client errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class InputError(CyphernodeError, ValueError):
    """Caller-supplied data was rejected."""
    kind = ErrorKind.INPUT


class AuthError(CyphernodeError):
    """Credentials were rejected or a token could not be built."""
    kind = ErrorKind.KEY


class ClockError(AuthError):
    """System clock reports a time before the Unix epoch."""


class NetworkError(CyphernodeError):
    """Transport-level failure."""
    kind = ErrorKind.NETWORK


class ConnectError(NetworkError):
    """Could not reach the gateway."""


class TLSError(NetworkError):
    """Peer certificate failed verification."""


class RequestTimeout(NetworkError):
    """Request did not complete within the timeout."""


class StatusError(NetworkError):
    """Gateway answered with a non-2xx status outside the mapped set."""


class NoResourceError(CyphernodeError):
    """Gateway answered 404."""
    kind = ErrorKind.NO_RESOURCE


class GatewayError(CyphernodeError):
    """The remote operation was rejected by the gateway."""

    kind = ErrorKind.GATEWAY

    def __init__(self, message: str, payload: Any = None, body: Optional[str] = None):
        super().__init__(message, body=body)
        self.payload = payload


class InternalError(CyphernodeError):
    """Response could not be decoded into the expected type."""
    kind = ErrorKind.INTERNAL
