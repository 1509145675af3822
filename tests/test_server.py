"""Tests for MCP server."""

import pytest

from cyphernode_client.client import CyphernodeClient
from cyphernode_client.config import Config, TlsPolicy
from cyphernode_client.errors import AuthError, ConnectError
from cyphernode_client.server import create_server, error_result

from conftest import CLIENT_ID, HOST, KEY, StubTransport


TXID = "af867c86000da76df7ddb1054b273ca9e034e8c89d049b5b2795f9f590f67648"
PEER = "02eadbd9e7557375161df8b646776a547c5cbc2e95b3071ec81553f8ec2cea3b8c@1.2.3.4:9735"


def tool(server, name):
    return server._tool_manager._tools[name].fn


class TestServerCreation:
    """Test server initialization."""

    def test_create_server_returns_server(self):
        """create_server returns configured server."""
        server = create_server()
        assert server is not None

    def test_server_registers_tools(self):
        """Server registers expected tools."""
        server = create_server()
        assert hasattr(server, '_tool_manager')

    @pytest.mark.asyncio
    async def test_server_has_expected_tools(self):
        """Server registers all expected tools."""
        server = create_server()

        tools = await server.list_tools()
        tool_names = {tool.name for tool in tools}

        # Core wallet
        assert "get_new_address" in tool_names
        assert "get_balance" in tool_names
        assert "get_mempool_info" in tool_names
        assert "validate_address" in tool_names
        assert "estimate_smart_fee" in tool_names
        assert "ping" in tool_names

        # Batcher
        assert "create_batcher" in tool_names
        assert "update_batcher" in tool_names
        assert "add_to_batch" in tool_names
        assert "remove_from_batch" in tool_names
        assert "get_batcher" in tool_names
        assert "get_batch_details" in tool_names
        assert "list_batchers" in tool_names
        assert "batch_spend" in tool_names

        # Watcher
        assert "watch" in tool_names
        assert "unwatch" in tool_names
        assert "get_active_watches" in tool_names
        assert "watch_xpub" in tool_names
        assert "unwatch_xpub" in tool_names
        assert "get_active_xpub_watches" in tool_names

        # Lightning
        assert "ln_get_info" in tool_names
        assert "ln_new_addr" in tool_names
        assert "ln_get_connection_string" in tool_names
        assert "ln_decode_bolt11" in tool_names
        assert "ln_connect_fund" in tool_names
        assert "ln_list_funds" in tool_names
        assert "ln_list_pays" in tool_names
        assert "ln_get_route" in tool_names
        assert "ln_withdraw" in tool_names

    @pytest.mark.asyncio
    async def test_server_tool_count(self):
        """Server has expected number of tools."""
        server = create_server()

        tools = await server.list_tools()
        # 6 core + 8 batcher + 6 watcher + 9 lightning
        assert len(tools) == 29

    @pytest.mark.asyncio
    async def test_no_config_returns_error(self):
        """Tools report a missing configuration instead of raising."""
        server = create_server()

        result = await tool(server, "get_balance")()

        assert result["kind"] == "input"
        assert "No gateway configuration" in result["error"]


class TestErrorResult:
    """Test error conversion."""

    def test_error_kind(self):
        result = error_result(AuthError("Unauthorized", status_code=401))
        assert result == {"error": "Unauthorized (HTTP 401)", "kind": "key"}

    def test_network_kind(self):
        assert error_result(ConnectError("refused"))["kind"] == "network"


class TestGatewayTools:
    """Test tools backed by a stub transport."""

    @pytest.fixture
    def stub(self):
        return StubTransport()

    @pytest.fixture
    def server(self, config, stub):
        return create_server(client=CyphernodeClient(config, transport=stub))

    @pytest.mark.asyncio
    async def test_get_balance(self, server, stub):
        stub.body = {"balance": 1.5}

        result = await tool(server, "get_balance")()

        assert result == {"balance": 1.5}

    @pytest.mark.asyncio
    async def test_results_use_wire_names(self, server, stub):
        stub.body = {"result": {"batcherId": 7}, "error": None}

        result = await tool(server, "create_batcher")("lowfees", 32)

        assert result == {"batcherId": 7}
        assert stub.requests[0]["body"] == {"batcherLabel": "lowfees", "confTarget": 32}

    @pytest.mark.asyncio
    async def test_list_batchers_wrapped(self, server, stub):
        stub.body = {
            "result": [{"batcherId": 1, "batcherLabel": "default", "confTarget": 6, "nbOutputs": 0,
                        "oldest": None, "total": None}],
            "error": None,
        }

        result = await tool(server, "list_batchers")()

        assert result == {
            "batchers": [{"batcherId": 1, "batcherLabel": "default", "confTarget": 6, "nbOutputs": 0,
                          "oldest": None, "total": None}],
        }

    @pytest.mark.asyncio
    async def test_gateway_error(self, server, stub):
        stub.body = {"result": None, "error": "Batcher not found"}

        result = await tool(server, "get_batcher")(batcher_label="nope")

        assert result == {"error": "Batcher not found", "kind": "gateway"}

    @pytest.mark.asyncio
    async def test_input_error_not_sent(self, server, stub):
        result = await tool(server, "add_to_batch")("tb1qxyz", -1.0)

        assert result["kind"] == "input"
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_transport_error(self, server, stub):
        stub.error = ConnectError("Cannot connect to gateway")

        result = await tool(server, "ping")()

        assert result == {"error": "Cannot connect to gateway", "kind": "network"}


class TestConfirmation:
    """Test confirmation gating of fund-moving tools."""

    @pytest.fixture
    def stub(self):
        return StubTransport()

    @pytest.fixture
    def server(self, config, stub):
        return create_server(client=CyphernodeClient(config, transport=stub))

    @pytest.mark.asyncio
    async def test_batch_spend_preview(self, server, stub):
        result = await tool(server, "batch_spend")(batcher_label="lowfees")

        assert result["confirmed"] is False
        assert result["request"] == {"batcherLabel": "lowfees"}
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_batch_spend_confirmed(self, server, stub):
        stub.body = {"status": "accepted", "hash": TXID}

        result = await tool(server, "batch_spend")(batcher_label="lowfees", confirm=True)

        assert result == {"status": "accepted", "hash": TXID}
        assert stub.requests[0]["path"] == "batchspend"

    @pytest.mark.asyncio
    async def test_connect_fund_preview(self, server, stub):
        result = await tool(server, "ln_connect_fund")(PEER, 100000, "http://app/channel")

        assert result["request"] == {"peer": PEER, "msatoshi": 100000, "callbackUrl": "http://app/channel"}
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_connect_fund_preview_validates(self, server, stub):
        result = await tool(server, "ln_connect_fund")("not-a-peer", 100000, "http://app/channel")

        assert result["kind"] == "input"

    @pytest.mark.asyncio
    async def test_withdraw_preview(self, server, stub):
        result = await tool(server, "ln_withdraw")("tb1qdest", "50000")

        assert result["request"] == {
            "destination": "tb1qdest", "satoshi": "50000", "feerate": "normal", "all": False,
        }
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_withdraw_confirmed(self, server, stub):
        stub.body = {"tx": "0200", "txid": TXID}

        result = await tool(server, "ln_withdraw")("tb1qdest", "50000", confirm=True)

        assert result == {"tx": "0200", "txid": TXID}

    @pytest.mark.asyncio
    async def test_confirmation_disabled(self, stub):
        config = Config(
            host=HOST, client_id=CLIENT_ID, key=KEY,
            tls=TlsPolicy.SYSTEM, require_confirmation=False,
        )
        server = create_server(client=CyphernodeClient(config, transport=stub))
        stub.body = {"status": "accepted", "hash": TXID}

        result = await tool(server, "batch_spend")()

        assert result["status"] == "accepted"
