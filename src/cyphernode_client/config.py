"""Configuration loading and management."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

try:
    import tomli
except ImportError:  # pragma: no cover
    import tomllib as tomli  # Python 3.11+

from cyphernode_client.errors import InputError


class TlsPolicy(Enum):
    """How the transport verifies the gateway certificate."""
    PINNED = "pinned"      # trust only the configured CA certificate
    SYSTEM = "system"      # trust the system store
    INSECURE = "insecure"  # no verification


DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Config:
    """Gateway connection settings.

    There is no default TLS policy: callers must choose one explicitly.
    """

    # Gateway settings
    host: str
    client_id: str
    key: str = field(repr=False)
    tls: TlsPolicy

    # TLS settings
    ca_cert: Optional[Path] = None

    # HTTP settings
    timeout: float = DEFAULT_TIMEOUT

    # Safety settings
    require_confirmation: bool = True

    def __post_init__(self):
        if not self.host:
            raise InputError("host is required")
        if not self.client_id:
            raise InputError("client_id is required")
        if not self.key:
            raise InputError("key is required")
        if not isinstance(self.tls, TlsPolicy):
            raise InputError(f"tls must be a TlsPolicy, got {self.tls!r}")
        if self.tls is TlsPolicy.PINNED and self.ca_cert is None:
            raise InputError("tls policy 'pinned' requires ca_cert")
        if self.ca_cert is not None and not isinstance(self.ca_cert, Path):
            object.__setattr__(self, "ca_cert", Path(self.ca_cert))
        if self.timeout <= 0:
            raise InputError("timeout must be positive")

    @property
    def base_url(self) -> str:
        """Root URL of the versioned gateway API."""
        return f"https://{self.host}/v0/"


def load_config(path: Path) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Path to config file

    Returns:
        Loaded configuration

    Raises:
        InputError: If the file is missing or incomplete
    """
    if not path.exists():
        raise InputError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomli.load(f)

    # Parse gateway section
    gateway = data.get("gateway", {})

    # Parse TLS section
    tls = data.get("tls", {})
    policy_str = tls.get("policy")
    if policy_str is None:
        raise InputError("[tls] policy is required (pinned, system or insecure)")
    try:
        policy = TlsPolicy(policy_str)
    except ValueError:
        raise InputError(f"Unknown TLS policy: {policy_str!r}")

    ca_cert = tls.get("ca_cert")
    if ca_cert:
        # Relative paths are resolved against the config file location
        ca_cert = Path(ca_cert).expanduser()
        if not ca_cert.is_absolute():
            ca_cert = path.parent / ca_cert

    # Parse HTTP section
    http = data.get("http", {})

    # Parse safety section
    safety = data.get("safety", {})

    return Config(
        host=gateway.get("host", ""),
        client_id=str(gateway.get("client_id", "")),
        key=gateway.get("key", ""),
        tls=policy,
        ca_cert=ca_cert or None,
        timeout=float(http.get("timeout", DEFAULT_TIMEOUT)),
        require_confirmation=safety.get("require_confirmation", True),
    )
