"""Bearer token minting for the gateway.

The gatekeeper expects an HS256 JWT whose payload carries the client id and
an expiry expressed in milliseconds since the epoch:

    {"id": "003", "exp": 1700000000000}

The key is the shared secret string; its UTF-8 bytes are the HMAC key.
"""

import time
from dataclasses import dataclass
from typing import Optional

import jwt

from cyphernode_client.errors import AuthError, ClockError


TOKEN_LIFETIME_MS = 3_600_000  # 1h
ALGORITHM = "HS256"


@dataclass(frozen=True)
class Claims:
    """Token payload."""
    id: str
    exp: int  # ms since epoch


def now_ms() -> int:
    """Current wall clock in milliseconds.

    Raises:
        ClockError: If the clock reads before the epoch
    """
    now = int(time.time() * 1000)
    if now < 0:
        raise ClockError("System clock is set before the Unix epoch")
    return now


def issue_token(client_id: str, key: str, now: Optional[int] = None) -> str:
    """Mint a signed bearer token valid for one hour.

    Args:
        client_id: Gatekeeper client id
        key: Shared secret for that id
        now: Issue time in ms since epoch (default: current time)

    Returns:
        Encoded JWT

    Raises:
        ClockError: If the issue time is before the epoch
        AuthError: If the token cannot be signed
    """
    if now is None:
        now = now_ms()
    elif now < 0:
        raise ClockError("Issue time is before the Unix epoch")

    payload = {"id": client_id, "exp": now + TOKEN_LIFETIME_MS}
    try:
        return jwt.encode(payload, key, algorithm=ALGORITHM)
    except (jwt.PyJWTError, TypeError) as e:
        raise AuthError(f"Error encoding JWT: {e}") from e


def decode_token(token: str, key: str, now: Optional[int] = None) -> Claims:
    """Verify a token's signature and millisecond expiry.

    Raises:
        AuthError: If the signature is invalid, claims are missing or the
            token has expired
    """
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            # exp is in ms, PyJWT compares in seconds
            options={"require": ["id", "exp"], "verify_exp": False},
        )
    except jwt.PyJWTError as e:
        raise AuthError(f"Invalid token: {e}") from e

    claims = Claims(id=payload["id"], exp=payload["exp"])
    if now is None:
        now = now_ms()
    if claims.exp <= now:
        raise AuthError("Token has expired")
    return claims
