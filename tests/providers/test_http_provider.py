"""
Tests for the HTTP JSON-RPC provider using httpx's mock transport.
"""

import json

import httpx
import pytest

from goldpeg.config import settings
from goldpeg.core.contracts import ChainReader
from goldpeg.providers import HttpRpcProvider, ProviderRpcError

RPC_URL = "https://node.example"


def _provider(handler) -> HttpRpcProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpRpcProvider(RPC_URL, client=client)


@pytest.mark.asyncio
async def test_request_posts_json_rpc_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": "0x1e"})

    async with _provider(handler) as provider:
        assert await ChainReader(provider).get_chain_id() == 30
        await provider.request("eth_blockNumber")

    assert seen[0] == {"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []}
    assert seen[1]["id"] == 2


@pytest.mark.asyncio
async def test_error_payload_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}},
        )

    async with _provider(handler) as provider:
        with pytest.raises(ProviderRpcError) as exc_info:
            await provider.request("eth_call", [{}, "latest"])

    assert exc_info.value.code == 3
    assert exc_info.value.message == "execution reverted"


@pytest.mark.asyncio
async def test_http_failure_is_internal_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with _provider(handler) as provider:
        with pytest.raises(ProviderRpcError) as exc_info:
            await provider.request("eth_chainId")

    assert exc_info.value.code == -32603


def test_for_chain_uses_configured_rpc_url():
    provider = HttpRpcProvider.for_chain(settings.local_chain_id)
    assert provider.rpc_url == settings.local_rpc_url
    assert provider.listener_count("chainChanged") == 0
