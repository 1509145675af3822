"""MCP server exposing cyphernode gateway operations.

Each gateway endpoint is published as a tool returning plain dictionaries in
the gateway's wire naming. Gateway and client errors are returned as
``{"error": ..., "kind": ...}`` instead of raising, so agents can branch on
the error kind. Tools that move funds only act when called with
``confirm=True``; otherwise they return a preview of the request.
"""

from typing import Any, Awaitable, Callable, Optional

from mcp.server.fastmcp import FastMCP

from cyphernode_client.api.batcher import BatchSpendRequest
from cyphernode_client.api.lightning import ConnectFundRequest, WithdrawRequest
from cyphernode_client.client import CyphernodeClient
from cyphernode_client.config import Config, load_config
from cyphernode_client.errors import CyphernodeError, InputError
from cyphernode_client.wire import to_wire


def error_result(error: CyphernodeError) -> dict:
    """Tool result for a failed call."""
    return {"error": str(error), "kind": error.kind.value}


def create_server(
    config: Optional[Config] = None,
    client: Optional[CyphernodeClient] = None,
) -> FastMCP:
    """Create and configure the MCP server with all tools.

    Args:
        config: Gateway configuration. Required unless ``client`` is given.
        client: Optional pre-built client (its config is used).

    Returns:
        Configured FastMCP server instance.
    """
    if client is not None:
        config = client.config

    mcp = FastMCP("cyphernode-client")

    # Store config on server for access by tools
    mcp._config = config
    mcp._client: Optional[CyphernodeClient] = client

    def get_client() -> CyphernodeClient:
        """Get or create the gateway client."""
        if mcp._client is None:
            if config is None:
                raise InputError("No gateway configuration loaded")
            mcp._client = CyphernodeClient(config)
        return mcp._client

    async def invoke(action: Callable[[CyphernodeClient], Awaitable[Any]], key: Optional[str] = None) -> dict:
        """Run one client call and convert its result for MCP."""
        try:
            result = await action(get_client())
        except CyphernodeError as e:
            return error_result(e)
        data = to_wire(result)
        return {key: data} if key else data

    def needs_confirmation(confirm: bool) -> bool:
        require = config.require_confirmation if config is not None else True
        return require and not confirm

    def preview(build: Callable[[], Any]) -> dict:
        """Validate a fund-moving request and describe it without sending."""
        try:
            body = build()
        except CyphernodeError as e:
            return error_result(e)
        return {
            "confirmed": False,
            "request": to_wire(body),
            "message": "Call again with confirm=True to execute",
        }

    # =========================================================================
    # Core wallet
    # =========================================================================

    @mcp.tool()
    async def get_new_address(address_type: str = "bech32", label: Optional[str] = None) -> dict:
        """Generate a new address in the spending wallet.

        Args:
            address_type: 'bech32', 'p2sh-segwit' or 'legacy' (default: bech32)
            label: Optional wallet label for the address

        Returns:
            Dictionary with 'address'.
        """
        return await invoke(lambda c: c.get_new_address(address_type, label))

    @mcp.tool()
    async def get_balance() -> dict:
        """Get the spending wallet balance in BTC."""
        return await invoke(lambda c: c.get_balance())

    @mcp.tool()
    async def get_mempool_info() -> dict:
        """Get mempool information of the Bitcoin node."""
        return await invoke(lambda c: c.get_mempool_info())

    @mcp.tool()
    async def validate_address(address: str) -> dict:
        """Check whether an address is valid for the node's network.

        Args:
            address: Bitcoin address to check

        Returns:
            Dictionary with 'isvalid' and address details.
        """
        return await invoke(lambda c: c.validate_address(address))

    @mcp.tool()
    async def estimate_smart_fee(conf_target: int = 6) -> dict:
        """Estimate the fee rate to confirm within conf_target blocks.

        Returns:
            Dictionary with 'feerate' (BTC/kvB) and 'blocks'.
        """
        return await invoke(lambda c: c.estimate_smart_fee(conf_target))

    @mcp.tool()
    async def ping() -> dict:
        """Check that the gateway is reachable and accepts our credentials."""
        return await invoke(lambda c: c.ping())

    # =========================================================================
    # Batcher
    # =========================================================================

    @mcp.tool()
    async def create_batcher(batcher_label: str, conf_target: int) -> dict:
        """Create a batching template.

        Args:
            batcher_label: Name of the batcher
            conf_target: Default confirmation target for its batches

        Returns:
            Dictionary with 'batcherId'.
        """
        return await invoke(lambda c: c.create_batcher(batcher_label, conf_target))

    @mcp.tool()
    async def update_batcher(
        conf_target: int,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
    ) -> dict:
        """Change the default confirmation target of a batcher."""
        return await invoke(lambda c: c.update_batcher(conf_target, batcher_id, batcher_label))

    @mcp.tool()
    async def add_to_batch(
        address: str,
        amount: float,
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        output_label: Optional[str] = None,
        webhook_url: Optional[str] = None,
    ) -> dict:
        """Queue an output for the next batch spend.

        Args:
            address: Destination address
            amount: Amount in BTC
            batcher_id: Batcher to use (default batcher if neither id nor label)
            batcher_label: Batcher to use, by label
            output_label: Optional label for the output
            webhook_url: Called when the batch is executed

        Returns:
            Dictionary with 'batcherId', 'outputId', 'nbOutputs', 'oldest', 'total'.
        """
        return await invoke(lambda c: c.add_to_batch(
            address, amount, batcher_id, batcher_label, output_label, webhook_url,
        ))

    @mcp.tool()
    async def remove_from_batch(output_id: int) -> dict:
        """Remove a queued output from the next batch."""
        return await invoke(lambda c: c.remove_from_batch(output_id))

    @mcp.tool()
    async def get_batcher(batcher_id: Optional[int] = None, batcher_label: Optional[str] = None) -> dict:
        """Get the current summary of a batcher."""
        return await invoke(lambda c: c.get_batcher(batcher_id, batcher_label))

    @mcp.tool()
    async def get_batch_details(
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        txid: Optional[str] = None,
    ) -> dict:
        """Get a batch with all its outputs.

        Without txid, returns the batch that has not been executed yet.
        """
        return await invoke(lambda c: c.get_batch_details(batcher_id, batcher_label, txid))

    @mcp.tool()
    async def list_batchers() -> dict:
        """List all batching templates.

        Returns:
            Dictionary with 'batchers'.
        """
        return await invoke(lambda c: c.list_batchers(), key="batchers")

    @mcp.tool()
    async def batch_spend(
        batcher_id: Optional[int] = None,
        batcher_label: Optional[str] = None,
        conf_target: Optional[int] = None,
        confirm: bool = False,
    ) -> dict:
        """Pay all queued outputs of a batcher in one transaction.

        Args:
            batcher_id: Batcher to execute (default batcher if neither id nor label)
            batcher_label: Batcher to execute, by label
            conf_target: Override the batcher's confirmation target
            confirm: Must be True to broadcast (default: False, preview only)

        Returns:
            Dictionary with 'status' and 'hash', or a preview when not confirmed.
        """
        if needs_confirmation(confirm):
            return preview(lambda: BatchSpendRequest(batcher_id, batcher_label, conf_target))
        return await invoke(lambda c: c.batch_spend(batcher_id, batcher_label, conf_target))

    # =========================================================================
    # Watcher
    # =========================================================================

    @mcp.tool()
    async def watch(
        address: str,
        unconfirmed_callback_url: str,
        confirmed_callback_url: str,
        label: str,
        event_message: Optional[str] = None,
    ) -> dict:
        """Watch an address; callbacks fire on 0-conf and 1-conf."""
        return await invoke(lambda c: c.watch(
            address, unconfirmed_callback_url, confirmed_callback_url, label, event_message,
        ))

    @mcp.tool()
    async def unwatch(address: str) -> dict:
        """Stop watching an address."""
        return await invoke(lambda c: c.unwatch(address))

    @mcp.tool()
    async def get_active_watches() -> dict:
        """List watched addresses."""
        return await invoke(lambda c: c.get_active_watches())

    @mcp.tool()
    async def watch_xpub(
        label: str,
        pub32: str,
        path: str,
        nstart: int,
        unconfirmed_callback_url: str,
        confirmed_callback_url: str,
    ) -> dict:
        """Watch addresses derived from an extended public key.

        Args:
            label: Label for the watch
            pub32: Extended public key (xpub/tpub/upub...)
            path: Derivation path with an 'n' step, e.g. '0/n'
            nstart: First index to derive
            unconfirmed_callback_url: Called on 0-conf
            confirmed_callback_url: Called on 1-conf
        """
        return await invoke(lambda c: c.watch_xpub(
            label, pub32, path, nstart, unconfirmed_callback_url, confirmed_callback_url,
        ))

    @mcp.tool()
    async def unwatch_xpub(pub32: str) -> dict:
        """Stop watching an extended public key."""
        return await invoke(lambda c: c.unwatch_xpub(pub32))

    @mcp.tool()
    async def get_active_xpub_watches() -> dict:
        """List watched extended public keys."""
        return await invoke(lambda c: c.get_active_xpub_watches())

    # =========================================================================
    # Lightning
    # =========================================================================

    @mcp.tool()
    async def ln_get_info() -> dict:
        """Get Lightning node information."""
        return await invoke(lambda c: c.ln_get_info())

    @mcp.tool()
    async def ln_new_addr() -> dict:
        """Get an address to deposit funds for opening channels."""
        return await invoke(lambda c: c.ln_new_addr())

    @mcp.tool()
    async def ln_get_connection_string() -> dict:
        """Get the node's connection string to share with peers."""
        return await invoke(lambda c: c.ln_get_connection_string())

    @mcp.tool()
    async def ln_decode_bolt11(invoice: str) -> dict:
        """Decode a BOLT11 invoice."""
        return await invoke(lambda c: c.ln_decode_bolt11(invoice))

    @mcp.tool()
    async def ln_connect_fund(
        peer: str,
        msatoshi: int,
        callback_url: str,
        confirm: bool = False,
    ) -> dict:
        """Connect to a peer and open a funded channel.

        Args:
            peer: node_id@host:port
            msatoshi: Channel funding amount in millisatoshis
            callback_url: Receives the final channel state
            confirm: Must be True to open the channel (default: False)
        """
        if needs_confirmation(confirm):
            return preview(lambda: ConnectFundRequest(peer, msatoshi, callback_url))
        return await invoke(lambda c: c.ln_connect_fund(peer, msatoshi, callback_url))

    @mcp.tool()
    async def ln_list_funds() -> dict:
        """List unused outputs and funds in open channels."""
        return await invoke(lambda c: c.ln_list_funds())

    @mcp.tool()
    async def ln_list_pays() -> dict:
        """List payment history."""
        return await invoke(lambda c: c.ln_list_pays())

    @mcp.tool()
    async def ln_get_route(node_id: str, msatoshi: int, risk_factor: float = 0.1) -> dict:
        """Compute a route to a node for an amount in millisatoshis."""
        return await invoke(lambda c: c.ln_get_route(node_id, msatoshi, risk_factor))

    @mcp.tool()
    async def ln_withdraw(
        destination: str,
        satoshi: str,
        feerate: str = "normal",
        withdraw_all: bool = False,
        confirm: bool = False,
    ) -> dict:
        """Withdraw Lightning wallet funds to an on-chain address.

        Args:
            destination: Bitcoin address
            satoshi: Amount in satoshis
            feerate: 'normal', 'urgent' or 'slow' (default: normal)
            withdraw_all: Withdraw the whole Lightning wallet
            confirm: Must be True to broadcast (default: False)
        """
        if needs_confirmation(confirm):
            return preview(lambda: WithdrawRequest(destination, str(satoshi), feerate, withdraw_all))
        return await invoke(lambda c: c.ln_withdraw(destination, satoshi, feerate, withdraw_all))

    return mcp


def main():
    """Entry point for the MCP server."""
    import logging
    from pathlib import Path

    logging.basicConfig(level=logging.INFO)

    # Try to load config from standard locations
    config_paths = [
        Path("cyphernode.toml"),
        Path.home() / ".config" / "cyphernode-client" / "config.toml",
    ]

    config = None
    for path in config_paths:
        if path.exists():
            config = load_config(path)
            break

    if config is None:
        raise SystemExit(
            "No configuration found in: " + ", ".join(str(p) for p in config_paths)
        )

    server = create_server(config)
    server.run()


if __name__ == "__main__":
    main()
