"""Shared fixtures for gateway client tests."""

import json

import httpx
import pytest

from cyphernode_client.client import CyphernodeClient
from cyphernode_client.config import Config, TlsPolicy
from cyphernode_client.transport import HttpTransport, Transport


HOST = "cyphernode.local:2009"
CLIENT_ID = "003"
KEY = "57072275edcd91d556b8917b71ab8b8b7c84c2c0ec7b0e50575788d1e51678fe"


class StubTransport(Transport):
    """Transport that records requests and replays a canned body."""

    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.requests = []

    async def send(self, method, path, token, body=None, timeout=None):
        self.requests.append({
            "method": method,
            "path": path,
            "token": token,
            "body": body,
            "timeout": timeout,
        })
        if self.error is not None:
            raise self.error
        if isinstance(self.body, bytes):
            return self.body
        return json.dumps(self.body).encode()


@pytest.fixture
def config():
    """Config for a gateway using the system trust store."""
    return Config(host=HOST, client_id=CLIENT_ID, key=KEY, tls=TlsPolicy.SYSTEM)


@pytest.fixture
def stub():
    """Stub transport with no canned body."""
    return StubTransport()


@pytest.fixture
def client(config, stub):
    """Client wired to the stub transport."""
    return CyphernodeClient(config, transport=stub)


def mock_client(config, handler):
    """Client whose HTTP layer is served by ``handler``."""
    transport = HttpTransport(config, transport=httpx.MockTransport(handler))
    return CyphernodeClient(config, transport=transport)
