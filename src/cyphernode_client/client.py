"""Async client for the cyphernode gateway."""

from typing import Any, Optional, Sequence, Union

from cyphernode_client.api import batcher, core, lightning, watcher
from cyphernode_client.api.batcher import (
    AddToBatchRequest,
    BatchDetail,
    BatcherSummary,
    BatchOutputInfo,
    BatchSpendRequest,
    BatchSpendResponse,
    CreateBatcherRequest,
    CreateBatcherResponse,
    GetBatchDetailsRequest,
    GetBatcherRequest,
    RemoveFromBatchRequest,
    UpdateBatcherRequest,
    UpdateBatcherResponse,
)
from cyphernode_client.api.core import (
    AddressType,
    AddressValidation,
    Balance,
    EstimateFeeRequest,
    FeeEstimate,
    Hello,
    MempoolInfo,
    NewAddress,
    NewAddressRequest,
)
from cyphernode_client.api.lightning import (
    ConnectFundRequest,
    LnBolt11,
    LnConnectFund,
    LnConnectionString,
    LnFundAddress,
    LnFunds,
    LnInfo,
    LnPays,
    LnRoute,
    LnWithdrawal,
    WithdrawFeerate,
    WithdrawRequest,
)
from cyphernode_client.api.watcher import (
    ActiveWatches,
    ActiveXpubWatches,
    UnwatchedAddress,
    UnwatchedXpub,
    WatchAddressRequest,
    WatchedAddress,
    WatchedXpub,
    WatchXpubRequest,
)
from cyphernode_client.config import Config
from cyphernode_client.endpoint import Endpoint, call
from cyphernode_client.errors import InputError
from cyphernode_client.token import issue_token
from cyphernode_client.transport import HttpTransport, Transport


class CyphernodeClient:
    """Gateway client.

    Every method is a single request. A fresh bearer token is minted for each
    call, nothing is retried, and every method accepts ``timeout`` (seconds)
    to override the configured default.
    """

    def __init__(self, config: Config, transport: Optional[Transport] = None):
        self.config = config
        self.transport = transport if transport is not None else HttpTransport(config)

    async def __aenter__(self) -> "CyphernodeClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        """Close the underlying transport."""
        await self.transport.close()

    def _token(self) -> str:
        return issue_token(self.config.client_id, self.config.key)

    async def _call(
        self,
        endpoint: Endpoint,
        body: Any = None,
        path_params: Sequence[Any] = (),
        timeout: Optional[float] = None,
    ) -> Any:
        return await call(
            self.transport,
            self._token(),
            endpoint,
            body=body,
            path_params=path_params,
            timeout=timeout,
        )

    # =========================================================================
    # Core wallet
    # =========================================================================

    async def get_new_address(
        self,
        address_type: Union[AddressType, str] = AddressType.BECH32,
        label: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> NewAddress:
        """Generate a new spending-wallet address."""
        body = NewAddressRequest(address_type=address_type, label=label)
        return await self._call(core.GET_NEW_ADDRESS, body, timeout=timeout)

    async def get_balance(self, timeout: Optional[float] = None) -> Balance:
        """Spending wallet balance in BTC."""
        return await self._call(core.GET_BALANCE, timeout=timeout)

    async def get_mempool_info(self, timeout: Optional[float] = None) -> MempoolInfo:
        """Mempool information of the Bitcoin node."""
        return await self._call(core.GET_MEMPOOL_INFO, timeout=timeout)

    async def validate_address(
        self, address: str, timeout: Optional[float] = None
    ) -> AddressValidation:
        """Check whether an address is valid for the node's network."""
        return await self._call(core.VALIDATE_ADDRESS, path_params=[address], timeout=timeout)

    async def estimate_smart_fee(
        self, conf_target: int = 6, timeout: Optional[float] = None
    ) -> FeeEstimate:
        """Estimate the fee rate to confirm within ``conf_target`` blocks."""
        body = EstimateFeeRequest(conf_target=conf_target)
        return await self._call(core.ESTIMATE_SMART_FEE, body, timeout=timeout)

    async def ping(self, timeout: Optional[float] = None) -> Hello:
        """Health check."""
        return await self._call(core.HELLO_WORLD, timeout=timeout)

    # =========================================================================
    # Batcher
    # =========================================================================

    async def create_batcher(
        self, batcher_label: str, conf_target: int, timeout: Optional[float] = None
    ) -> CreateBatcherResponse:
        """Create a batching template with a label and default confTarget."""
        body = CreateBatcherRequest(batcher_label=batcher_label, conf_target=conf_target)
        return await self._call(batcher.CREATE_BATCHER, body, timeout=timeout)

    async def update_batcher(
        self,
        conf_target: int,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> UpdateBatcherResponse:
        """Change a batching template's default confTarget."""
        body = UpdateBatcherRequest(
            conf_target=conf_target,
            batcher_id=batcher_id,
            batcher_label=batcher_label,
        )
        return await self._call(batcher.UPDATE_BATCHER, body, timeout=timeout)

    async def add_to_batch(
        self,
        address: str,
        amount: float,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        output_label: Optional[str] = None,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> BatchOutputInfo:
        """Queue an output for the next batch spend."""
        body = AddToBatchRequest(
            address=address,
            amount=amount,
            batcher_id=batcher_id,
            batcher_label=batcher_label,
            output_label=output_label,
            webhook_url=webhook_url,
        )
        return await self._call(batcher.ADD_TO_BATCH, body, timeout=timeout)

    async def remove_from_batch(
        self, output_id: int, timeout: Optional[float] = None
    ) -> BatchOutputInfo:
        """Remove a queued output from the next batch."""
        body = RemoveFromBatchRequest(output_id=output_id)
        return await self._call(batcher.REMOVE_FROM_BATCH, body, timeout=timeout)

    async def get_batcher(
        self,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> BatcherSummary:
        """Current summary of a batching template."""
        body = GetBatcherRequest(batcher_id=batcher_id, batcher_label=batcher_label)
        return await self._call(batcher.GET_BATCHER, body, timeout=timeout)

    async def get_batch_details(
        self,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        txid: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> BatchDetail:
        """Full state of a batch, including all its outputs."""
        body = GetBatchDetailsRequest(
            batcher_id=batcher_id,
            batcher_label=batcher_label,
            txid=txid,
        )
        return await self._call(batcher.GET_BATCH_DETAILS, body, timeout=timeout)

    async def list_batchers(self, timeout: Optional[float] = None) -> list[BatcherSummary]:
        """All batching templates."""
        return await self._call(batcher.LIST_BATCHERS, timeout=timeout)

    async def batch_spend(
        self,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        conf_target: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> BatchSpendResponse:
        """Pay all queued outputs of a batcher in one transaction."""
        body = BatchSpendRequest(
            batcher_id=batcher_id,
            batcher_label=batcher_label,
            conf_target=conf_target,
        )
        return await self._call(batcher.BATCH_SPEND, body, timeout=timeout)

    # =========================================================================
    # Watcher
    # =========================================================================

    async def watch(
        self,
        address: str,
        unconfirmed_callback_url: str,
        confirmed_callback_url: str,
        label: str,
        event_message: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> WatchedAddress:
        """Watch an address and get notified on 0-conf and 1-conf."""
        body = WatchAddressRequest(
            address=address,
            unconfirmed_callback_url=unconfirmed_callback_url,
            confirmed_callback_url=confirmed_callback_url,
            label=label,
            event_message=event_message,
        )
        return await self._call(watcher.WATCH, body, timeout=timeout)

    async def unwatch(self, address: str, timeout: Optional[float] = None) -> UnwatchedAddress:
        """Stop watching an address."""
        return await self._call(watcher.UNWATCH, path_params=[address], timeout=timeout)

    async def get_active_watches(self, timeout: Optional[float] = None) -> ActiveWatches:
        """Addresses currently watched."""
        return await self._call(watcher.GET_ACTIVE_WATCHES, timeout=timeout)

    async def watch_xpub(
        self,
        label: str,
        pub32: str,
        path: str,
        nstart: int,
        unconfirmed_callback_url: str,
        confirmed_callback_url: str,
        timeout: Optional[float] = None,
    ) -> WatchedXpub:
        """Watch addresses derived from an extended public key."""
        body = WatchXpubRequest(
            label=label,
            pub32=pub32,
            path=path,
            nstart=nstart,
            unconfirmed_callback_url=unconfirmed_callback_url,
            confirmed_callback_url=confirmed_callback_url,
        )
        return await self._call(watcher.WATCH_XPUB, body, timeout=timeout)

    async def unwatch_xpub(self, pub32: str, timeout: Optional[float] = None) -> UnwatchedXpub:
        """Stop watching an extended public key."""
        return await self._call(watcher.UNWATCH_XPUB_BY_XPUB, path_params=[pub32], timeout=timeout)

    async def get_active_xpub_watches(self, timeout: Optional[float] = None) -> ActiveXpubWatches:
        """Extended public keys currently watched."""
        return await self._call(watcher.GET_ACTIVE_XPUB_WATCHES, timeout=timeout)

    # =========================================================================
    # Lightning
    # =========================================================================

    async def ln_get_info(self, timeout: Optional[float] = None) -> LnInfo:
        """Lightning node information."""
        return await self._call(lightning.LN_GET_INFO, timeout=timeout)

    async def ln_new_addr(self, timeout: Optional[float] = None) -> LnFundAddress:
        """Address to deposit funds for opening channels."""
        return await self._call(lightning.LN_NEW_ADDR, timeout=timeout)

    async def ln_get_connection_string(self, timeout: Optional[float] = None) -> LnConnectionString:
        """Connection string to share with peers."""
        return await self._call(lightning.LN_GET_CONNECTION_STRING, timeout=timeout)

    async def ln_decode_bolt11(self, invoice: str, timeout: Optional[float] = None) -> LnBolt11:
        """Decode a BOLT11 invoice."""
        return await self._call(lightning.LN_DECODE_BOLT11, path_params=[invoice], timeout=timeout)

    async def ln_connect_fund(
        self,
        peer: str,
        msatoshi: int,
        callback_url: str,
        timeout: Optional[float] = None,
    ) -> LnConnectFund:
        """Connect to a peer and open a channel funded with ``msatoshi``.

        The final channel state is posted to ``callback_url``.
        """
        body = ConnectFundRequest(peer=peer, msatoshi=msatoshi, callback_url=callback_url)
        return await self._call(lightning.LN_CONNECT_FUND, body, timeout=timeout)

    async def ln_list_funds(self, timeout: Optional[float] = None) -> LnFunds:
        """Unused outputs and funds in open channels."""
        return await self._call(lightning.LN_LIST_FUNDS, timeout=timeout)

    async def ln_list_pays(self, timeout: Optional[float] = None) -> LnPays:
        """History of paid invoices."""
        return await self._call(lightning.LN_LIST_PAYS, timeout=timeout)

    async def ln_get_route(
        self,
        node_id: str,
        msatoshi: int,
        risk_factor: float,
        timeout: Optional[float] = None,
    ) -> LnRoute:
        """Hops from our node to ``node_id`` for an amount."""
        if msatoshi <= 0:
            raise InputError("msatoshi must be positive")
        if risk_factor < 0:
            raise InputError("risk_factor must not be negative")
        return await self._call(
            lightning.LN_GET_ROUTE,
            path_params=[node_id, msatoshi, risk_factor],
            timeout=timeout,
        )

    async def ln_withdraw(
        self,
        destination: str,
        satoshi: Union[int, str],
        feerate: Union[WithdrawFeerate, str] = WithdrawFeerate.NORMAL,
        withdraw_all: bool = False,
        timeout: Optional[float] = None,
    ) -> LnWithdrawal:
        """Withdraw Lightning wallet funds to an on-chain address."""
        body = WithdrawRequest(
            destination=destination,
            satoshi=str(satoshi),
            feerate=feerate,
            all=withdraw_all,
        )
        return await self._call(lightning.LN_WITHDRAW, body, timeout=timeout)
