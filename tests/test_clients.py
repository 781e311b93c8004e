"""Tests for the BNB and LOKI chain clients."""

import json
from decimal import Decimal

import httpx
import pytest
from bip_utils import Bech32Encoder

from lokibridge.clients import BinanceChainClient, ExplorerAPIError, LokiWalletClient, WalletRPCError
from lokibridge.clients.factory import get_bnb_client, get_loki_client


def mock_client(handler) -> httpx.AsyncClient:
    """HTTP client answering every request with ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestBinanceChainClient:
    """Tests for BinanceChainClient."""

    def test_validate_address_valid(self):
        """Test that a well-formed testnet address passes."""
        client = BinanceChainClient(address_prefix="tbnb")
        address = Bech32Encoder.Encode("tbnb", bytes(range(20)))

        assert client.validate_address(address) is True

    def test_validate_address_wrong_network(self):
        """Test that a mainnet address fails on a testnet client."""
        client = BinanceChainClient(address_prefix="tbnb")
        address = Bech32Encoder.Encode("bnb", bytes(range(20)))

        assert client.validate_address(address) is False

    def test_validate_address_bad_checksum(self):
        """Test that a corrupted address fails."""
        client = BinanceChainClient(address_prefix="bnb")
        address = Bech32Encoder.Encode("bnb", bytes(range(20)))
        corrupted = address[:-1] + ("q" if address[-1] != "q" else "p")

        assert client.validate_address(corrupted) is False

    def test_validate_address_wrong_length(self):
        """Test that a payload that is not 20 bytes fails."""
        client = BinanceChainClient(address_prefix="bnb")
        address = Bech32Encoder.Encode("bnb", bytes(32))

        assert client.validate_address(address) is False

    @pytest.mark.parametrize("address", ["", "garbage", "bnb1", None])
    def test_validate_address_garbage(self, address):
        client = BinanceChainClient(address_prefix="bnb")
        assert client.validate_address(address) is False

    @pytest.mark.asyncio
    async def test_get_incoming_transactions(self):
        """Test request shape and value conversion."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(
                200,
                json={
                    "total": 1,
                    "tx": [
                        {
                            "txHash": "ABC",
                            "value": "5.00000000",
                            "timeStamp": "2020-01-01T00:00:01.500Z",
                            "memo": "swap-memo",
                            "txAsset": "BNB",
                        }
                    ],
                },
            )

        client = BinanceChainClient(
            api_url="https://testnet-dex.binance.org/",
            asset="BNB",
            limit=50,
            http_client=mock_client(handler),
        )
        transactions = await client.get_incoming_transactions("tbnb1ours", since=1577836800000)

        assert seen["path"] == "/api/v1/transactions"
        assert seen["params"] == {
            "address": "tbnb1ours",
            "side": "RECEIVE",
            "txType": "TRANSFER",
            "txAsset": "BNB",
            "limit": "50",
            "startTime": "1577836800000",
        }
        assert transactions[0]["txHash"] == "ABC"
        assert transactions[0]["value"] == Decimal("5")
        assert transactions[0]["memo"] == "swap-memo"

    @pytest.mark.asyncio
    async def test_get_incoming_transactions_without_since(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "startTime" not in request.url.params
            return httpx.Response(200, json={"total": 0, "tx": []})

        client = BinanceChainClient(http_client=mock_client(handler))
        assert await client.get_incoming_transactions("tbnb1ours") == []

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        client = BinanceChainClient(http_client=mock_client(lambda request: httpx.Response(500)))

        with pytest.raises(httpx.HTTPStatusError):
            await client.get_incoming_transactions("tbnb1ours")

    @pytest.mark.asyncio
    async def test_unexpected_response(self):
        client = BinanceChainClient(
            http_client=mock_client(lambda request: httpx.Response(200, json={"message": "nope"}))
        )

        with pytest.raises(ExplorerAPIError):
            await client.get_incoming_transactions("tbnb1ours")

    @pytest.mark.asyncio
    async def test_invalid_value(self):
        client = BinanceChainClient(
            http_client=mock_client(
                lambda request: httpx.Response(
                    200, json={"tx": [{"txHash": "A", "value": "lots", "timeStamp": "", "memo": ""}]}
                )
            )
        )

        with pytest.raises(ExplorerAPIError):
            await client.get_incoming_transactions("tbnb1ours")


class TestLokiWalletClient:
    """Tests for LokiWalletClient."""

    @pytest.mark.asyncio
    async def test_validate_address(self):
        """Test validate_address RPC call."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            calls.append(body)
            return httpx.Response(200, json={"id": body["id"], "jsonrpc": "2.0", "result": {"valid": True}})

        client = LokiWalletClient(rpc_url="http://wallet:19092", http_client=mock_client(handler))

        assert await client.validate_address("L-address") is True
        assert calls[0]["method"] == "validate_address"
        assert calls[0]["params"] == {"address": "L-address", "any_net_type": False}

    @pytest.mark.asyncio
    async def test_validate_address_invalid(self):
        client = LokiWalletClient(
            http_client=mock_client(
                lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "result": {"valid": False}})
            )
        )
        assert await client.validate_address("nope") is False

    @pytest.mark.asyncio
    async def test_validate_empty_address_skips_rpc(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("RPC should not be called")

        client = LokiWalletClient(http_client=mock_client(handler))
        assert await client.validate_address("") is False

    @pytest.mark.asyncio
    async def test_get_incoming_transactions(self):
        """Test get_transfers request and merging of confirmed and pool rows."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "result": {
                        "in": [{"txid": "t1", "amount": 3, "checkpointed": True}],
                        "pool": [{"txid": "t2", "amount": 4, "checkpointed": False}],
                    },
                },
            )

        client = LokiWalletClient(rpc_url="http://wallet:19092/", http_client=mock_client(handler))
        transactions = await client.get_incoming_transactions(5, {"pool": True})

        assert seen["url"] == "http://wallet:19092/json_rpc"
        assert seen["body"]["method"] == "get_transfers"
        assert seen["body"]["params"] == {
            "in": True,
            "pool": True,
            "account_index": 0,
            "subaddr_indices": [5],
        }
        assert [tx["txid"] for tx in transactions] == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_get_incoming_transactions_empty_result(self):
        """Wallets omit empty arrays from the result."""
        client = LokiWalletClient(
            http_client=mock_client(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "result": {}}))
        )
        assert await client.get_incoming_transactions(1) == []

    @pytest.mark.asyncio
    async def test_rpc_error(self):
        client = LokiWalletClient(
            http_client=mock_client(
                lambda request: httpx.Response(
                    200, json={"jsonrpc": "2.0", "error": {"code": -13, "message": "No wallet file"}}
                )
            )
        )

        with pytest.raises(WalletRPCError) as exc_info:
            await client.get_incoming_transactions(1)

        assert exc_info.value.code == -13
        assert exc_info.value.method == "get_transfers"


class TestFactory:
    """Tests for the client factory."""

    def test_clients_from_settings(self, monkeypatch):
        monkeypatch.setenv("BNB_NETWORK", "mainnet")
        monkeypatch.setenv("LOKI_WALLET_RPC_URL", "http://wallet:1234")

        bnb = get_bnb_client()
        loki = get_loki_client()

        assert bnb.address_prefix == "bnb"
        assert loki.rpc_url == "http://wallet:1234"
        assert get_bnb_client() is bnb
