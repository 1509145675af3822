"""Lightning node endpoints."""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from cyphernode_client.endpoint import Endpoint
from cyphernode_client.envelope import Shape, is_envelope
from cyphernode_client.errors import InputError
from cyphernode_client.wire import wire


# Satoshis as an integer, or BTC with up to 8 decimals
WITHDRAW_AMOUNT = re.compile(r"[0-9]+(\.[0-9]{1,8})?")


class WithdrawFeerate(Enum):
    """Fee rate presets for on-chain withdrawals."""
    NORMAL = "normal"
    URGENT = "urgent"
    SLOW = "slow"


@dataclass
class Binding:
    """Address the node listens on."""
    type: str
    address: str
    port: int


@dataclass
class LnInfo:
    """Lightning node information."""
    id: str
    alias: str
    color: str
    address: list[dict[str, Any]]
    binding: list[Binding]
    version: str
    blockheight: int
    network: str


@dataclass
class LnFundAddress:
    """Address to deposit on-chain funds for opening channels."""
    bech32: str


@dataclass
class LnConnectionString:
    """Connection string (node_id@host:port) to share with peers."""
    connectstring: str


@dataclass
class LnBolt11:
    """Decoded BOLT11 invoice."""
    currency: str
    created_at: int
    expiry: int
    payee: str
    min_final_cltv_expiry: int
    payment_hash: str
    signature: str
    description: Optional[str] = None
    msatoshi: Optional[int] = None
    amount_msat: Optional[str] = None


@dataclass
class ConnectFundRequest:
    """Connect to a peer and open a channel funded with msatoshi.

    The gateway reports the final channel state at ``callback_url``.
    """
    peer: str  # node_id@host:port
    msatoshi: int
    callback_url: str = wire("callbackUrl")

    def __post_init__(self):
        if "@" not in self.peer:
            raise InputError(f"peer must be node_id@host:port, got {self.peer!r}")
        if self.msatoshi <= 0:
            raise InputError("msatoshi must be positive")


@dataclass
class LnConnectFund:
    """Channel funding status."""
    result: str
    txid: str
    channel_id: str


def connect_fund_failure(doc: Any) -> Optional[str]:
    """Failure message of an ln_connectfund reply, if it failed.

    Both the bare reply and a reply wrapped in a clean envelope are checked;
    an envelope with a populated error is left to the envelope decoder.
    """
    if is_envelope(doc) and doc.get("error") is None:
        doc = doc.get("result")
    if isinstance(doc, dict) and doc.get("result") == "failed":
        return str(doc.get("message") or "ln_connectfund failed")
    return None


@dataclass
class LnOutput:
    """Unspent on-chain output of the Lightning wallet."""
    txid: str
    output: int
    value: int  # sat
    amount_msat: str
    address: str
    status: str
    blockheight: Optional[int] = None


@dataclass
class LnChannel:
    """Funds held in a channel."""
    peer_id: str
    connected: bool
    state: str
    channel_sat: int
    our_amount_msat: str
    channel_total_sat: int
    amount_msat: str
    funding_txid: str
    funding_output: int
    short_channel_id: Optional[str] = None


@dataclass
class LnFunds:
    """Unused outputs and channel funds."""
    outputs: list[LnOutput]
    channels: list[LnChannel]


@dataclass
class LnPay:
    """A payment attempt."""
    bolt11: Optional[str] = None
    status: Optional[str] = None
    preimage: Optional[str] = None
    amount_sent_msat: Optional[str] = None


@dataclass
class LnPays:
    """Payment history."""
    pays: list[LnPay]


@dataclass
class RouteHop:
    """One hop of a route."""
    id: str
    channel: str
    direction: int
    msatoshi: int
    amount_msat: str
    delay: int
    style: str


@dataclass
class LnRoute:
    """Hops from our node to a destination."""
    route: list[RouteHop]


@dataclass
class WithdrawRequest:
    """Withdraw Lightning wallet funds on chain.

    ``satoshi`` is sent as a string: an integer amount in satoshis, or a BTC
    amount with up to 8 decimals. With ``all`` set the whole wallet is
    withdrawn.
    """
    destination: str
    satoshi: str
    feerate: WithdrawFeerate = WithdrawFeerate.NORMAL
    all: bool = False

    def __post_init__(self):
        if not self.destination:
            raise InputError("destination is required")
        if not isinstance(self.feerate, WithdrawFeerate):
            try:
                self.feerate = WithdrawFeerate(self.feerate)
            except ValueError:
                raise InputError(f"Unknown feerate: {self.feerate!r}")
        if not self.all:
            match = WITHDRAW_AMOUNT.fullmatch(self.satoshi)
            if match is None or Decimal(self.satoshi) <= 0:
                raise InputError(
                    "satoshi must be a positive integer (sat) or a BTC amount with "
                    f"at most 8 decimals, got {self.satoshi!r}"
                )


@dataclass
class LnWithdrawal:
    """Withdrawal transaction."""
    tx: str
    txid: str


LN_GET_INFO = Endpoint("GET", "ln_getinfo", LnInfo, Shape.EITHER)
LN_NEW_ADDR = Endpoint("GET", "ln_newaddr", LnFundAddress, Shape.EITHER)
LN_GET_CONNECTION_STRING = Endpoint("GET", "ln_getconnectionstring", LnConnectionString, Shape.EITHER)
LN_DECODE_BOLT11 = Endpoint("GET", "ln_decodebolt11/{}", LnBolt11, Shape.EITHER)
LN_CONNECT_FUND = Endpoint(
    "POST", "ln_connectfund", LnConnectFund, Shape.EITHER, rejection=connect_fund_failure
)
LN_LIST_FUNDS = Endpoint("GET", "ln_listfunds", LnFunds, Shape.EITHER)
LN_LIST_PAYS = Endpoint("GET", "ln_listpays", LnPays, Shape.EITHER)
LN_GET_ROUTE = Endpoint("GET", "ln_getroute/{}/{}/{}", LnRoute, Shape.EITHER)
LN_WITHDRAW = Endpoint("POST", "ln_withdraw", LnWithdrawal, Shape.EITHER)
