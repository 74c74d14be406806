# takoyaki/decode/__init__.py

from .address_resolver import AddressResolver, TransactionLookup, lookup_ranges, resolve
from .instructions import group_instructions, compile_instruction, count_instructions
from .balances import group_balances, group_token_balances, build_token_balance
from .logs import group_logs, decode_log
from .transaction_decoder import TransactionDecoder
from .block_decoder import BlockDecoder, transform_block, map_reward_type, decode_reward
from .interfaces import BlockDecoderInterface, TransactionDecoderInterface

__all__ = [
    "AddressResolver",
    "TransactionLookup",
    "lookup_ranges",
    "resolve",
    "group_instructions",
    "compile_instruction",
    "count_instructions",
    "group_balances",
    "group_token_balances",
    "build_token_balance",
    "group_logs",
    "decode_log",
    "TransactionDecoder",
    "BlockDecoder",
    "transform_block",
    "map_reward_type",
    "decode_reward",
    "BlockDecoderInterface",
    "TransactionDecoderInterface",
]
