"""HTTPS transport to the gateway."""

import logging
import ssl
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

import httpx

from cyphernode_client.config import Config, TlsPolicy
from cyphernode_client.errors import (
    AuthError,
    ConnectError,
    InputError,
    NetworkError,
    NoResourceError,
    RequestTimeout,
    StatusError,
    TLSError,
)

logger = logging.getLogger(__name__)


# HTTP status -> error class for the statuses the gatekeeper uses
STATUS_ERRORS = {
    400: InputError,
    401: AuthError,
    403: AuthError,
    404: NoResourceError,
    409: InputError,
    422: InputError,
}


class Transport(ABC):
    """Abstract interface for sending gateway requests."""

    @abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        token: str,
        body: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        """Send one request and return the raw response body."""
        pass  # pragma: no cover

    async def close(self):
        """Release transport resources."""


def tls_verify(config: Config) -> Union[ssl.SSLContext, bool]:
    """Build the httpx ``verify`` argument for a TLS policy.

    Raises:
        InputError: If the pinned CA certificate cannot be loaded
    """
    if config.tls is TlsPolicy.PINNED:
        try:
            # With an explicit cafile the system store is not loaded
            return ssl.create_default_context(cafile=str(config.ca_cert))
        except (OSError, ssl.SSLError) as e:
            raise InputError(f"Cannot load CA certificate {config.ca_cert}: {e}") from e

    if config.tls is TlsPolicy.INSECURE:
        logger.warning(
            "TLS verification disabled for gateway %s", config.host
        )
        return False

    return True


def _is_cert_failure(exc: BaseException) -> bool:
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, ssl.SSLCertVerificationError):
            return True
        if "CERTIFICATE_VERIFY_FAILED" in str(exc):
            return True
        exc = exc.__cause__ or exc.__context__
    return False


def raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Map a non-2xx response to its error class."""
    if response.is_success:
        return

    logger.error("Gateway error: %s %s -> %d", method, path, response.status_code)

    error_cls = STATUS_ERRORS.get(response.status_code, StatusError)
    body = response.text
    message = body.strip() or response.reason_phrase or "HTTP error"
    raise error_cls(message, status_code=response.status_code, body=body)


class HttpTransport(Transport):
    """Gateway transport over HTTPS with bearer authentication."""

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.base_url = config.base_url

        kwargs: dict[str, Any] = {}
        if transport is not None:
            kwargs["transport"] = transport
        else:
            kwargs["verify"] = tls_verify(config)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=config.timeout,
            **kwargs,
        )

    async def send(
        self,
        method: str,
        path: str,
        token: str,
        body: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        """Send one request and return the raw response body.

        Raises:
            ConnectError: If the gateway cannot be reached
            TLSError: If the gateway certificate fails verification
            RequestTimeout: If the request exceeds the timeout
            NetworkError: On any other transport failure
            AuthError, InputError, NoResourceError, StatusError: On non-2xx
        """
        logger.debug("Gateway %s %s", method, path)

        kwargs: dict[str, Any] = {
            "headers": {"Authorization": f"Bearer {token}"},
        }
        if body is not None:
            kwargs["json"] = body
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"Timed out: {method} {path}") from e
        except httpx.ConnectError as e:
            if _is_cert_failure(e):
                raise TLSError(f"Certificate verification failed for {self.config.host}: {e}") from e
            raise ConnectError(f"Cannot connect to {self.config.host}: {e}") from e
        except httpx.TransportError as e:
            if _is_cert_failure(e):
                raise TLSError(f"Certificate verification failed for {self.config.host}: {e}") from e
            raise NetworkError(f"Transport error: {e}") from e

        raise_for_status(response, method, path)

        logger.debug("Gateway response: %s %d", path, response.status_code)

        return response.content

    async def close(self):
        """Close HTTP client."""
        await self._client.aclose()
