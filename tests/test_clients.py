"""
Tests for the archive clients. HTTP is served by httpx.MockTransport.
"""

from __future__ import annotations

import asyncio

import httpx
import msgspec
import pytest

from takoyaki.clients import SoldexerClient, ArchiveClient, ALL_SOLDEXER_FIELDS, ALL_FIELDS, get_archive_url
from takoyaki.service.subql import build_filter_request
from takoyaki.types import SolanaRequest, ArchiveError, MAINNET

PORTAL = "https://portal.example/datasets/solana-mainnet"
ARCHIVE = "https://archive.example/solana"


def block_json(slot: int) -> dict:
    return {"header": {"hash": f"H{slot}", "parentHash": "P", "number": slot, "height": slot - 20}}


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_soldexer_head():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == f"{PORTAL}/head"
        return httpx.Response(200, json={"number": 330000000, "hash": "abc"})

    client = SoldexerClient(PORTAL, http_client=mock_client(handler))
    assert asyncio.run(client.current_height()) == 330000000


def test_soldexer_metadata_is_cached():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json={"dataset": "s3://solana-mainnet", "aliases": ["solana-mainnet"],
                                         "real_time": True, "start_block": 317617480})

    client = SoldexerClient(PORTAL, http_client=mock_client(handler))

    async def run():
        return await client.metadata(), await client.metadata()

    first, second = asyncio.run(run())

    assert first is second
    assert first.chain_id == "solana-mainnet"
    assert first.start_block == 317617480
    assert first.genesis_hash == MAINNET.genesis_hash
    assert calls == ["/datasets/solana-mainnet/metadata"]


def test_soldexer_stream_is_ndjson():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = msgspec.json.decode(request.content)
        lines = b"\n".join(msgspec.json.encode(block_json(slot)) for slot in (100, 105))
        return httpx.Response(200, content=lines + b"\n")

    client = SoldexerClient(PORTAL, http_client=mock_client(handler))
    request = SolanaRequest(type="solana", from_block=100, to_block=110, fields=client.get_all_fields())

    blocks = asyncio.run(client.query(request))

    assert [block.header.number for block in blocks] == [100, 105]
    assert seen["url"] == f"{PORTAL}/stream"
    assert seen["body"]["type"] == "solana"
    assert seen["body"]["fields"]["block"]["parentNumber"] is True


def test_soldexer_filter_query_decodes_selected_header_fields():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["fields"] = msgspec.json.decode(request.content)["fields"]
        return httpx.Response(200, content=b'{"header":{"number":300,"hash":"H","height":280}}\n')

    client = SoldexerClient(PORTAL, http_client=mock_client(handler))

    blocks = asyncio.run(client.query(build_filter_request(300, 310, None)))

    assert seen["fields"] == {"block": {"number": True, "height": True, "hash": True}}
    assert blocks[0].header.number == 300
    assert blocks[0].header.hash == "H"
    assert blocks[0].header.parent_hash is None


def test_soldexer_bad_status_raises_archive_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="overloaded")

    client = SoldexerClient(PORTAL, http_client=mock_client(handler))

    with pytest.raises(ArchiveError) as exc_info:
        asyncio.run(client.current_height())

    assert exc_info.value.context["status_code"] == 503
    assert "overloaded" in exc_info.value.message


def test_soldexer_bad_stream_line_raises_archive_error():
    client = SoldexerClient(PORTAL, http_client=mock_client(lambda request: httpx.Response(200, content=b"{oops")))

    with pytest.raises(ArchiveError):
        asyncio.run(client.query(SolanaRequest(type="solana", from_block=1, to_block=1)))


def test_field_selections():
    assert ALL_SOLDEXER_FIELDS.block["number"] and ALL_SOLDEXER_FIELDS.block["parentNumber"]
    assert ALL_FIELDS.block["slot"] and ALL_FIELDS.block["parentSlot"]
    assert "instructionAddress" in ALL_SOLDEXER_FIELDS.instruction


def test_legacy_height_and_worker_query():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url == f"{ARCHIVE}/height":
            return httpx.Response(200, text="250000000")
        if request.url == f"{ARCHIVE}/42/worker":
            return httpx.Response(200, text="https://worker.example/query/abc\n")
        if request.url == "https://worker.example/query/abc":
            assert request.method == "POST"
            return httpx.Response(200, json=[
                {"header": {"hash": "H", "parentHash": "P", "number": 42, "slot": 50, "parentSlot": 49}},
            ])
        return httpx.Response(404)

    client = ArchiveClient(ARCHIVE, MAINNET, http_client=mock_client(handler))

    async def run():
        return await client.current_height(), await client.query(
            SolanaRequest(type="solana", from_block=42, to_block=42, fields=client.get_all_fields())
        )

    height, blocks = asyncio.run(run())

    assert height == 250000000
    assert blocks[0].header.block_slot == 50
    assert asyncio.run(client.metadata()) == MAINNET


def test_legacy_height_must_be_integer():
    client = ArchiveClient(ARCHIVE, MAINNET, http_client=mock_client(lambda request: httpx.Response(200, text="nope")))

    with pytest.raises(ArchiveError):
        asyncio.run(client.current_height())


def test_registry_lookup():
    registry = {"archives": [
        {"network": "eclipse-mainnet", "providers": [{"provider": "subsquid", "dataSourceUrl": "https://e"}]},
        {"network": "solana-mainnet", "providers": [
            {"provider": "subsquid", "dataSourceUrl": "https://s1", "release": "ArrowSquid"},
            {"provider": "other", "dataSourceUrl": "https://s2"},
        ]},
    ]}
    http = mock_client(lambda request: httpx.Response(200, json=registry))

    assert asyncio.run(get_archive_url("solana-mainnet", http_client=http)) == "https://s1"

    with pytest.raises(ArchiveError):
        asyncio.run(get_archive_url("ethereum-mainnet", http_client=http))
