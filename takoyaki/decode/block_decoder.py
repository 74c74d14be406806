# takoyaki/decode/block_decoder.py

from typing import Optional

from ..core.logging import LoggingMixin
from ..types import (
    SolanaBlockResponse,
    RawReward,
    Block,
    BlockReward,
    RewardType,
    TransformError,
    MissingFieldError,
)
from ..utils.amounts import parse_int64, parse_uint64
from .address_resolver import TransactionLookup
from .balances import group_balances, group_token_balances
from .instructions import group_instructions, count_instructions
from .logs import group_logs
from .transaction_decoder import TransactionDecoder
from .interfaces import BlockDecoderInterface


REWARD_TYPES = {reward_type.value.lower(): reward_type for reward_type in RewardType}


def map_reward_type(tag: Optional[str]) -> Optional[str]:
    """Archive tags are matched case-insensitively, unknown tags pass through"""
    if tag is None:
        return None
    reward_type = REWARD_TYPES.get(tag.lower())
    return reward_type.value if reward_type else tag


def decode_reward(reward: RawReward) -> BlockReward:
    commission = reward.commission
    if commission is not None:
        commission = parse_uint64(commission, "commission", account=reward.pubkey)

    return BlockReward(
        pubkey=reward.pubkey,
        lamports=parse_int64(reward.lamports, "lamports", account=reward.pubkey),
        post_balance=parse_uint64(reward.post_balance, "post balance", account=reward.pubkey),
        reward_type=map_reward_type(reward.reward_type),
        commission=commission,
    )


class BlockDecoder(BlockDecoderInterface, LoggingMixin):
    def __init__(self, tx_decoder: Optional[TransactionDecoder] = None):
        self.tx_decoder = tx_decoder or TransactionDecoder()

    def decode_block(self, raw_block: SolanaBlockResponse) -> Block:
        """
        Rebuild a canonical block from a flat archive block.

        Grouping runs once over the whole block, then every transaction is
        assembled from its slice. Any failure aborts the whole block.
        """
        header = raw_block.header
        if header.hash is None:
            raise MissingFieldError("block hash", block_slot=header.block_slot)
        if header.parent_hash is None:
            raise MissingFieldError("parent block hash", block_slot=header.block_slot)

        lookup = TransactionLookup(raw_block.transactions)

        pre_post_balances = group_balances(raw_block.balances, lookup)
        token_balances = group_token_balances(raw_block.token_balances, lookup)
        instructions, inner_instructions = group_instructions(raw_block.instructions, lookup)
        logs = group_logs(raw_block.logs)

        assembled = count_instructions(instructions, inner_instructions)
        if assembled != len(raw_block.instructions):
            raise TransformError(
                f"Assembled {assembled} instructions from {len(raw_block.instructions)} records",
                block_slot=header.block_slot,
            )

        transactions = []
        for raw_tx in raw_block.transactions:
            tx_index = raw_tx.transaction_index
            pre_balances, post_balances = pre_post_balances.get(tx_index, ([], []))
            pre_token_balances, post_token_balances = token_balances.get(tx_index, ([], []))

            transactions.append(self.tx_decoder.assemble(
                raw_tx,
                header,
                pre_balances=pre_balances,
                post_balances=post_balances,
                pre_token_balances=pre_token_balances,
                post_token_balances=post_token_balances,
                instructions=instructions.get(tx_index, []),
                inner_instructions=inner_instructions.get(tx_index, []),
                logs=logs.get(tx_index, []),
            ))

        rewards = [decode_reward(reward) for reward in raw_block.rewards]

        self.log_debug("Block decoded", block_slot=header.block_slot,
                       block_height=header.block_height, tx_count=len(transactions))

        return Block(
            blockhash=header.hash,
            previous_blockhash=header.parent_hash,
            parent_slot=header.parent_block_slot,
            block_height=header.block_height,
            block_time=header.timestamp,
            transactions=transactions,
            rewards=rewards,
            signatures=[tx.transaction.signatures[0] for tx in transactions if tx.transaction.signatures],
        )


def transform_block(raw_block: SolanaBlockResponse) -> Block:
    return BlockDecoder().decode_block(raw_block)
