"""Async client and MCP tool server for the cyphernode gateway."""

__version__ = "0.1.0"

# Server entry points
from cyphernode_client.server import create_server, main

# Client
from cyphernode_client.client import CyphernodeClient

# Configuration
from cyphernode_client.config import Config, TlsPolicy, load_config

# Errors
from cyphernode_client.errors import (
    AuthError,
    ClockError,
    ConnectError,
    CyphernodeError,
    ErrorKind,
    GatewayError,
    InputError,
    InternalError,
    NetworkError,
    NoResourceError,
    RequestTimeout,
    StatusError,
    TLSError,
)

# Token issuing
from cyphernode_client.token import Claims, decode_token, issue_token

# Transport
from cyphernode_client.transport import HttpTransport, Transport

# Envelope decoding
from cyphernode_client.envelope import Envelope, Shape, decode, decode_envelope

__all__ = [
    # Version
    "__version__",
    # Server
    "create_server",
    "main",
    # Client
    "CyphernodeClient",
    # Config
    "Config",
    "TlsPolicy",
    "load_config",
    # Errors
    "AuthError",
    "ClockError",
    "ConnectError",
    "CyphernodeError",
    "ErrorKind",
    "GatewayError",
    "InputError",
    "InternalError",
    "NetworkError",
    "NoResourceError",
    "RequestTimeout",
    "StatusError",
    "TLSError",
    # Token
    "Claims",
    "decode_token",
    "issue_token",
    # Transport
    "HttpTransport",
    "Transport",
    # Envelope
    "Envelope",
    "Shape",
    "decode",
    "decode_envelope",
]
