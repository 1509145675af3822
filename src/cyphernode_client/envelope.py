"""Gateway response envelope decoding.

Most endpoints wrap their payload in an envelope:

    {"result": <payload or null>, "error": <message or null>}

Exactly one member is populated. A bitcoind passthrough may add an ``id``
member, which is ignored. Some endpoints answer with the bare payload
instead; the ``Shape`` of an endpoint says which form to expect.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from cyphernode_client.errors import GatewayError, InternalError
from cyphernode_client.wire import from_wire


ENVELOPE_MEMBERS = frozenset({"result", "error", "id"})


class Shape(Enum):
    """Response body form of an endpoint."""

    ENVELOPE = "envelope"  # always {result, error}
    BARE = "bare"          # the payload itself, never enveloped
    EITHER = "either"      # legacy proxy endpoints: unwrap when enveloped


@dataclass
class Envelope:
    """Decoded envelope structure."""

    result: Any
    error: Optional[str]
    raw_error: Any = None


def parse_json(data: bytes) -> Any:
    """Parse a response body.

    Raises:
        InternalError: If the body is not valid JSON
    """
    try:
        return json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise InternalError(
            f"Malformed JSON response: {e}",
            body=data.decode("utf-8", errors="replace"),
        ) from e


def is_envelope(doc: Any) -> bool:
    """Whether a parsed body has the envelope form."""
    return (
        isinstance(doc, dict)
        and "error" in doc
        and set(doc) <= ENVELOPE_MEMBERS
    )


def _error_text(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return json.dumps(error, separators=(",", ":"), sort_keys=True)


def to_envelope(doc: Any) -> Envelope:
    """Interpret a parsed body as an envelope.

    Raises:
        InternalError: If the body is not an envelope
    """
    if not is_envelope(doc):
        raise InternalError(
            f"Expected a {{result, error}} envelope, got {type(doc).__name__}"
        )

    error = doc.get("error")
    return Envelope(
        result=doc.get("result"),
        error=None if error is None else _error_text(error),
        raw_error=error,
    )


def decode_envelope(data: bytes) -> Envelope:
    """Decode an envelope from raw response bytes.

    Args:
        data: Raw response body

    Returns:
        Decoded Envelope object

    Raises:
        InternalError: If the body is not JSON or not an envelope
    """
    return to_envelope(parse_json(data))


def unwrap(envelope: Envelope) -> Any:
    """Return the envelope's result.

    A populated error wins over any result.

    Raises:
        GatewayError: If the error member is populated
        InternalError: If neither member is populated
    """
    if envelope.error is not None:
        raise GatewayError(envelope.error, payload=envelope.raw_error)
    if envelope.result is None:
        raise InternalError("Envelope carries neither result nor error")
    return envelope.result


def decode(data: bytes, model: Any, shape: Shape = Shape.ENVELOPE) -> Any:
    """Decode a response body into ``model``.

    Args:
        data: Raw response body
        model: Target type (dataclass or list of dataclasses)
        shape: Body form of the endpoint

    Raises:
        GatewayError: If the gateway reported an error
        InternalError: If the body does not match the expected form
    """
    doc = parse_json(data)

    if shape is Shape.ENVELOPE or (shape is Shape.EITHER and is_envelope(doc)):
        doc = unwrap(to_envelope(doc))

    return from_wire(model, doc)
