"""Address and xpub watching endpoints."""

from dataclasses import dataclass
from typing import Optional

from cyphernode_client.endpoint import Endpoint
from cyphernode_client.envelope import Shape
from cyphernode_client.errors import InputError
from cyphernode_client.wire import wire


@dataclass
class WatchAddressRequest:
    """Register callbacks for an address."""
    address: str
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")
    label: str = wire("label")
    event_message: Optional[str] = wire("eventMessage", default=None)

    def __post_init__(self):
        if not self.address:
            raise InputError("address is required")


@dataclass
class WatchedAddress:
    """Watch registration echoed back by the gateway."""
    address: str
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")
    label: Optional[str] = None
    event_message: Optional[str] = wire("eventMessage", default=None)
    id: Optional[str] = None
    event: Optional[str] = None
    imported: Optional[str] = None
    inserted: Optional[str] = None


@dataclass
class UnwatchedAddress:
    """Confirmation of an address unwatch."""
    event: str
    address: str
    unconfirmed_callback_url: Optional[str] = wire("unconfirmedCallbackURL", default=None)
    confirmed_callback_url: Optional[str] = wire("confirmedCallbackURL", default=None)


@dataclass
class Watch:
    """An active address watch."""
    id: int
    address: str
    imported: bool
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")
    watching_since: str = wire("watching_since")
    event_message: Optional[str] = wire("eventMessage", default=None)
    label: Optional[str] = None


@dataclass
class ActiveWatches:
    """All active address watches."""
    watches: list[Watch]


@dataclass
class WatchXpubRequest:
    """Watch a derivation range of an extended public key."""
    label: str
    pub32: str
    path: str  # e.g. "0/1/n"
    nstart: int
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")

    def __post_init__(self):
        if not self.pub32:
            raise InputError("pub32 is required")
        if "n" not in self.path.split("/"):
            raise InputError(f"Derivation path must contain an 'n' step: {self.path!r}")
        if self.nstart < 0:
            raise InputError("nstart must not be negative")


@dataclass
class WatchedXpub:
    """Xpub watch registration echoed back by the gateway."""
    id: str
    event: str
    pub32: str
    label: str
    path: str
    nstart: str
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")


@dataclass
class UnwatchedXpub:
    """Confirmation of an xpub unwatch."""
    event: str
    pub32: str


@dataclass
class XpubWatch:
    """An active xpub watch."""
    id: str
    pub32: str
    label: str
    derivation_path: str
    last_imported_n: str
    unconfirmed_callback_url: str = wire("unconfirmedCallbackURL")
    confirmed_callback_url: str = wire("confirmedCallbackURL")
    watching_since: str = wire("watching_since")


@dataclass
class ActiveXpubWatches:
    """All active xpub watches."""
    watches: list[XpubWatch]


WATCH = Endpoint("POST", "watch", WatchedAddress, Shape.EITHER)
UNWATCH = Endpoint("GET", "unwatch/{}", UnwatchedAddress, Shape.EITHER)
GET_ACTIVE_WATCHES = Endpoint("GET", "getactivewatches", ActiveWatches, Shape.EITHER)
WATCH_XPUB = Endpoint("POST", "watchxpub", WatchedXpub, Shape.EITHER)
UNWATCH_XPUB_BY_XPUB = Endpoint("GET", "unwatchxpubbyxpub/{}", UnwatchedXpub, Shape.EITHER)
GET_ACTIVE_XPUB_WATCHES = Endpoint("GET", "getactivexpubwatches", ActiveXpubWatches, Shape.EITHER)
