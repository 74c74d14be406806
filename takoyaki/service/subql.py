# takoyaki/service/subql.py

import asyncio
from typing import List, Optional

from ..core.logging import LoggingMixin
from ..clients.interfaces import QueryClientInterface
from ..decode import BlockDecoder
from ..types import (
    SolanaRequest,
    SolanaBlockResponse,
    Fields,
    TransactionRequest,
    InstructionRequest,
    LogRequest,
    RewardRequest,
    BalancesRequest,
    TokenBalanceRequest,
    BlockRequest,
    BlockFilter,
    BlockResult,
    AvailableBlocks,
    Capability,
    Block,
    TakoyakiError,
    ArchiveError,
    with_context,
)


SUPPORTED_RESPONSES = ["basic", "complete"]

FILTERS = {
    "transactions": ["signerAccountKeys"],
    "instructions": ["programIds", "discriminators", "accounts", "isCommitted"],
    "logs": ["programIds", "kinds"],
}

FILTER_FIELDS = Fields(block={"number": True, "height": True, "hash": True})


def apply_filters_to_request(request: SolanaRequest, block_filter: Optional[BlockFilter]) -> SolanaRequest:
    """Translate subql block filters into archive request items. Categories without filters are left as they are."""
    if block_filter is None:
        return request

    if block_filter.transactions:
        request.transactions = [
            TransactionRequest(fee_payer=list(tx.signer_account_keys) or None)
            for tx in block_filter.transactions
        ]

    if block_filter.instructions:
        request.instructions = []
        for inst in block_filter.instructions:
            inst_request = InstructionRequest(
                program_id=list(inst.program_ids) or None,
                is_committed=inst.is_committed,
            )
            for position, accounts in enumerate(inst.accounts):
                # an empty list leaves that position unconstrained
                if accounts:
                    inst_request.set_accounts(position, accounts)
            if inst.discriminators:
                inst_request.set_discriminators(inst.discriminators)
            request.instructions.append(inst_request)

    if block_filter.logs:
        request.logs = [
            LogRequest(
                program_id=list(log.program_ids) or None,
                kind=list(log.kinds) or None,
            )
            for log in block_filter.logs
        ]

    return request


def build_filter_request(from_block: int, to_block: int, block_filter: Optional[BlockFilter]) -> SolanaRequest:
    # Empty lists select nothing, only the applied filters match blocks
    request = SolanaRequest(
        type="solana",
        from_block=from_block,
        to_block=to_block,
        fields=FILTER_FIELDS,
        transactions=[],
        instructions=[],
        logs=[],
        rewards=[],
        token_balances=[],
        balances=[],
    )
    return apply_filters_to_request(request, block_filter)


def build_full_block_request(block_number: int, fields: Fields) -> SolanaRequest:
    # A single empty item means no filter, so every record of the block is returned
    return SolanaRequest(
        type="solana",
        from_block=block_number,
        to_block=block_number,
        fields=fields,
        transactions=[TransactionRequest()],
        instructions=[InstructionRequest()],
        logs=[LogRequest()],
        rewards=[RewardRequest()],
        token_balances=[TokenBalanceRequest()],
        balances=[BalancesRequest()],
    )


class SubqlApiService(LoggingMixin):
    """Implements the subql_* RPC methods on top of an archive client"""

    def __init__(self, client: QueryClientInterface, decoder: Optional[BlockDecoder] = None):
        self.client = client
        self.decoder = decoder or BlockDecoder()

    async def filter_blocks_capabilities(self) -> Capability:
        try:
            async with asyncio.TaskGroup() as tg:
                height_task = tg.create_task(self.client.current_height())
                meta_task = tg.create_task(self.client.metadata())
        except ExceptionGroup as group:
            raise self._first_error(group)

        meta = meta_task.result()
        return Capability(
            available_blocks=[AvailableBlocks(start_height=meta.start_block,
                                              end_height=height_task.result())],
            filters={name: list(fields) for name, fields in FILTERS.items()},
            supported_responses=list(SUPPORTED_RESPONSES),
            genesis_hash=meta.genesis_hash,
            chain_id=meta.chain_id,
        )

    async def filter_blocks(self, block_request: BlockRequest) -> BlockResult:
        from_block, to_block = block_request.range()
        limit = block_request.limit_value()

        request = build_filter_request(from_block, to_block, block_request.block_filter)

        try:
            async with asyncio.TaskGroup() as tg:
                matched_task = tg.create_task(self.client.query(request))
                meta_task = tg.create_task(self.client.metadata())
        except ExceptionGroup as group:
            raise self._first_error(group, from_block=from_block, to_block=to_block)

        matched = matched_task.result()
        if limit is not None:
            matched = matched[:limit]

        self.log_info("Filter blocks", from_block=from_block, to_block=to_block,
                      matched=len(matched))

        blocks = await self.fetch_blocks(matched)

        if matched:
            block_range = (matched[0].header.number, matched[-1].header.number)
        else:
            block_range = (from_block, to_block)

        return BlockResult(
            blocks=blocks,
            block_range=block_range,
            genesis_hash=meta_task.result().genesis_hash,
        )

    async def fetch_blocks(self, matched: List[SolanaBlockResponse]) -> List[Block]:
        """Fetch and decode the full content of every matched block. The first failure cancels the rest."""
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self.fetch_block(raw.header.number)) for raw in matched]
        except ExceptionGroup as group:
            raise self._first_error(group)

        return [task.result() for task in tasks]

    async def fetch_block(self, block_number: int) -> Block:
        request = build_full_block_request(block_number, self.client.get_all_fields())
        responses = await self.client.query(request)

        raw_block = next((raw for raw in responses if raw.header.number == block_number), None)
        if raw_block is None:
            raise ArchiveError(f"Archive returned no data for block {block_number}",
                                block_slot=block_number)

        try:
            return self.decoder.decode_block(raw_block)
        except TakoyakiError as e:
            self.log_error("Failed to resolve block", block_slot=block_number,
                           error=e.message, error_id=e.to_processing_error().error_id)
            raise with_context(e, block_slot=block_number)

    def _first_error(self, group: BaseExceptionGroup, **context) -> BaseException:
        """TaskGroup wraps failures, callers get the first one as raised"""
        error = group.exceptions[0]
        while isinstance(error, BaseExceptionGroup):
            error = error.exceptions[0]
        if isinstance(error, TakoyakiError):
            with_context(error, **context)
        return error
