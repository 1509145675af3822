"""Core wallet endpoints."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cyphernode_client.endpoint import Endpoint
from cyphernode_client.envelope import Shape
from cyphernode_client.errors import InputError
from cyphernode_client.wire import wire


class AddressType(Enum):
    """Address type for new wallet addresses."""
    BECH32 = "bech32"
    P2SH_SEGWIT = "p2sh-segwit"
    LEGACY = "legacy"


@dataclass
class NewAddressRequest:
    """Request for a new spending-wallet address."""
    address_type: AddressType = AddressType.BECH32
    label: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.address_type, AddressType):
            try:
                self.address_type = AddressType(self.address_type)
            except ValueError:
                raise InputError(f"Unknown address type: {self.address_type!r}")


@dataclass
class NewAddress:
    """Newly generated address."""
    address: str
    label: Optional[str] = None


@dataclass
class Balance:
    """Spending wallet balance."""
    balance: float  # BTC


@dataclass
class MempoolInfo:
    """Mempool state of the Bitcoin node."""
    size: int
    bytes: int
    usage: int
    maxmempool: int
    mempoolminfee: float
    minrelaytxfee: float


@dataclass
class AddressValidation:
    """Result of validateaddress."""
    isvalid: bool
    address: Optional[str] = None
    script_pub_key: Optional[str] = wire("scriptPubKey", default=None)
    isscript: Optional[bool] = None
    iswitness: Optional[bool] = None
    witness_version: Optional[int] = None
    witness_program: Optional[str] = None


@dataclass
class EstimateFeeRequest:
    """Request for a smart fee estimate."""
    conf_target: int = wire("confTarget")

    def __post_init__(self):
        if self.conf_target < 1:
            raise InputError("confTarget must be at least 1")


@dataclass
class FeeEstimate:
    """Estimated fee rate for a confirmation target."""
    blocks: int
    feerate: Optional[float] = None  # BTC/kvB, absent when no estimate
    errors: Optional[list[str]] = None


@dataclass
class Hello:
    """Gateway health check reply."""
    hello: str


GET_NEW_ADDRESS = Endpoint("POST", "getnewaddress", NewAddress, Shape.EITHER)
GET_BALANCE = Endpoint("GET", "getbalance", Balance, Shape.EITHER)
GET_MEMPOOL_INFO = Endpoint("GET", "getmempoolinfo", MempoolInfo, Shape.EITHER)
VALIDATE_ADDRESS = Endpoint("GET", "validateaddress/{}", AddressValidation, Shape.EITHER)
ESTIMATE_SMART_FEE = Endpoint("POST", "bitcoin_estimatesmartfee", FeeEstimate, Shape.EITHER)
HELLO_WORLD = Endpoint("GET", "helloworld", Hello, Shape.EITHER)
