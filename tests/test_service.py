"""
Tests for the subql service with an in-memory query client.
"""

from __future__ import annotations

import asyncio

import msgspec
import pytest

from takoyaki.clients.interfaces import QueryClientInterface
from takoyaki.clients.soldexer_client import ALL_SOLDEXER_FIELDS
from takoyaki.service.subql import (
    FILTER_FIELDS,
    SubqlApiService,
    apply_filters_to_request,
    build_filter_request,
)
from takoyaki.types import (
    BlockRequest,
    BlockFilter,
    TxFilterQuery,
    InstFilterQuery,
    LogFilterQuery,
    SolanaRequest,
    SolanaBlockResponse,
    ArchiveError,
    AddressNotFoundError,
    MAINNET,
)

from conftest import PROGRAM, make_block, make_header, make_tx, make_instruction


class FakeQueryClient(QueryClientInterface):
    """Serves filter queries from ``matched`` and full block queries from ``blocks``"""

    def __init__(self, matched=(), blocks=None, height=400, fail_on=None):
        self.matched = list(matched)
        self.blocks = blocks or {}
        self.height = height
        self.fail_on = fail_on
        self.requests = []

    async def metadata(self):
        return MAINNET

    async def current_height(self):
        return self.height

    def get_all_fields(self):
        return ALL_SOLDEXER_FIELDS

    async def query(self, request: SolanaRequest):
        self.requests.append(request)
        if request.fields is FILTER_FIELDS:
            return [block for block in self.matched if request.from_block <= block.header.number <= request.to_block]
        if request.from_block == self.fail_on:
            raise ArchiveError("worker unavailable", block_slot=request.from_block)
        block = self.blocks.get(request.from_block)
        return [block] if block else []


def full_block(slot: int):
    return make_block(
        header=make_header(slot=slot, height=slot - 20),
        transactions=[make_tx(0)],
        instructions=[make_instruction(0, [0])],
    )


def matched_block(slot: int):
    # Filter queries only return the selected header fields
    return msgspec.convert({"header": {"number": slot, "height": slot - 20, "hash": f"H{slot}"}},
                           SolanaBlockResponse)


def test_capabilities():
    service = SubqlApiService(FakeQueryClient(height=350))

    capability = asyncio.run(service.filter_blocks_capabilities())

    assert capability.available_blocks[0].start_height == MAINNET.start_block
    assert capability.available_blocks[0].end_height == 350
    assert capability.genesis_hash == MAINNET.genesis_hash
    assert capability.chain_id == MAINNET.chain_id
    assert capability.supported_responses == ["basic", "complete"]
    assert capability.filters["instructions"] == ["programIds", "discriminators", "accounts", "isCommitted"]


def test_filter_blocks_fetches_matched_blocks():
    client = FakeQueryClient(
        matched=[matched_block(300), matched_block(305)],
        blocks={300: full_block(300), 305: full_block(305)},
    )
    service = SubqlApiService(client)

    result = asyncio.run(service.filter_blocks(BlockRequest(from_block=300, to_block="0x136")))

    assert [block.parent_slot for block in result.blocks] == [299, 304]
    assert result.block_range == (300, 305)
    assert result.genesis_hash == MAINNET.genesis_hash

    full_requests = [r for r in client.requests if r.fields is ALL_SOLDEXER_FIELDS]
    assert sorted(r.from_block for r in full_requests) == [300, 305]
    assert all(r.instructions and r.balances and r.token_balances for r in full_requests)


def test_filter_blocks_limit_caps_matches():
    client = FakeQueryClient(
        matched=[matched_block(300), matched_block(301), matched_block(302)],
        blocks={slot: full_block(slot) for slot in (300, 301, 302)},
    )

    result = asyncio.run(SubqlApiService(client).filter_blocks(
        BlockRequest(from_block=300, to_block=310, limit=2)
    ))

    assert len(result.blocks) == 2
    assert result.block_range == (300, 301)


def test_filter_blocks_without_matches():
    result = asyncio.run(SubqlApiService(FakeQueryClient()).filter_blocks(
        BlockRequest(from_block=10, to_block=20)
    ))

    assert result.blocks == []
    assert result.block_range == (10, 20)


def test_filter_blocks_requires_range():
    with pytest.raises(ValueError):
        asyncio.run(SubqlApiService(FakeQueryClient()).filter_blocks(BlockRequest(from_block=1)))


def test_first_archive_failure_is_raised():
    client = FakeQueryClient(
        matched=[matched_block(300), matched_block(301)],
        blocks={300: full_block(300), 301: full_block(301)},
        fail_on=301,
    )

    with pytest.raises(ArchiveError) as exc_info:
        asyncio.run(SubqlApiService(client).filter_blocks(BlockRequest(from_block=300, to_block=301)))

    assert exc_info.value.context["block_slot"] == 301


def test_transform_failure_is_raised_with_block_context():
    broken = full_block(300)
    broken.instructions.append(make_instruction(0, [1], program_id="Missing"))
    client = FakeQueryClient(matched=[matched_block(300)], blocks={300: broken})

    with pytest.raises(AddressNotFoundError) as exc_info:
        asyncio.run(SubqlApiService(client).filter_blocks(BlockRequest(from_block=300, to_block=300)))

    assert exc_info.value.context["block_slot"] == 300


def test_missing_full_block_is_archive_error():
    client = FakeQueryClient(matched=[matched_block(300)], blocks={})

    with pytest.raises(ArchiveError):
        asyncio.run(SubqlApiService(client).filter_blocks(BlockRequest(from_block=300, to_block=300)))


def test_full_block_for_another_slot_is_archive_error():
    client = FakeQueryClient(matched=[matched_block(300)], blocks={300: full_block(301)})

    with pytest.raises(ArchiveError) as exc_info:
        asyncio.run(SubqlApiService(client).filter_blocks(BlockRequest(from_block=300, to_block=300)))

    assert exc_info.value.context["block_slot"] == 300


def test_filter_request_without_filters_selects_nothing():
    request = build_filter_request(1, 2, None)

    assert request.transactions == []
    assert request.instructions == []
    assert request.logs == []
    assert request.rewards == [] and request.balances == [] and request.token_balances == []


def test_apply_filters_to_request():
    block_filter = BlockFilter(
        transactions=[TxFilterQuery(signer_account_keys=["Signer"])],
        instructions=[InstFilterQuery(
            program_ids=[PROGRAM],
            accounts=[[], ["Pool"]],
            discriminators=["0xe445a52e51cb9a1d", "0x02"],
            is_committed=True,
        )],
        logs=[LogFilterQuery(program_ids=[PROGRAM], kinds=["data"])],
    )

    request = apply_filters_to_request(build_filter_request(1, 2, None), block_filter)

    assert request.transactions[0].fee_payer == ["Signer"]
    instruction = request.instructions[0]
    assert instruction.program_id == [PROGRAM]
    assert instruction.is_committed is True
    assert instruction.a0 is None
    assert instruction.a1 == ["Pool"]
    assert instruction.d8 == ["0xe445a52e51cb9a1d"]
    assert instruction.d1 == ["0x02"]
    assert request.logs[0].program_id == [PROGRAM]
    assert request.logs[0].kind == ["data"]
    assert request.rewards == []


def test_apply_filters_without_program_ids_leaves_them_unset():
    block_filter = BlockFilter(instructions=[InstFilterQuery(is_committed=True)])

    request = apply_filters_to_request(build_filter_request(1, 2, None), block_filter)

    assert request.instructions[0].program_id is None
