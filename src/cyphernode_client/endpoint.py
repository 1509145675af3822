"""Generic gateway call: serialize, send, decode."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence
from urllib.parse import quote

from cyphernode_client.envelope import Shape, decode, parse_json
from cyphernode_client.errors import GatewayError, InputError
from cyphernode_client.transport import Transport
from cyphernode_client.wire import to_wire


@dataclass(frozen=True)
class Endpoint:
    """Declaration of one gateway operation.

    ``path`` is relative to ``/v0/`` and may contain ``{}`` placeholders for
    path parameters. ``rejection`` inspects the parsed body of endpoints that
    report failure in their own shape and returns the failure message, if any.
    """

    method: str
    path: str
    response: Any
    shape: Shape = Shape.ENVELOPE
    rejection: Optional[Callable[[Any], Optional[str]]] = None

    def url_path(self, params: Sequence[Any] = ()) -> str:
        """Fill path placeholders with percent-encoded parameters."""
        expected = self.path.count("{}")
        if len(params) != expected:
            raise InputError(
                f"{self.path} takes {expected} path parameter(s), got {len(params)}"
            )
        encoded = []
        for p in params:
            text = str(p)
            if not text:
                raise InputError(f"Empty path parameter for {self.path}")
            encoded.append(quote(text, safe=""))
        return self.path.format(*encoded)

    def decode(self, data: bytes) -> Any:
        """Decode a raw response body for this endpoint."""
        if self.rejection is not None:
            message = self.rejection(parse_json(data))
            if message is not None:
                raise GatewayError(message, body=data.decode("utf-8", errors="replace"))
        return decode(data, self.response, self.shape)


async def call(
    transport: Transport,
    token: str,
    endpoint: Endpoint,
    body: Any = None,
    path_params: Sequence[Any] = (),
    timeout: Optional[float] = None,
) -> Any:
    """Perform one round trip to the gateway.

    Args:
        transport: Transport used to send the request
        token: Bearer token
        endpoint: Endpoint declaration
        body: Request dataclass (POST endpoints)
        path_params: Values for the path placeholders
        timeout: Per-call timeout in seconds

    Returns:
        The decoded response
    """
    path = endpoint.url_path(path_params)
    payload = to_wire(body) if body is not None else None
    raw = await transport.send(endpoint.method, path, token, payload, timeout)
    return endpoint.decode(raw)
