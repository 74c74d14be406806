# takoyaki/types/api.py

from typing import Optional, Union, Literal

from msgspec import Struct

from .new import PublicKey, HexStr
from .solana import Block


class TxFilterQuery(Struct, rename="camel"):
    signer_account_keys: list[PublicKey] = []


class InstFilterQuery(Struct, rename="camel"):
    program_ids: list[PublicKey] = []
    accounts: list[list[PublicKey]] = []  # positional, accounts[i] filters the i-th account
    discriminators: list[HexStr] = []
    is_committed: bool = False


class LogFilterQuery(Struct, rename="camel"):
    program_ids: list[PublicKey] = []
    kinds: list[Literal["log", "data", "other"]] = []


class BlockFilter(Struct):
    transactions: list[TxFilterQuery] = []
    instructions: list[InstFilterQuery] = []
    logs: list[LogFilterQuery] = []


class TransactionsSelector(Struct):
    instructions: bool = False
    logs: bool = False


class InstructionsSelector(Struct):
    transaction: bool = False


class LogsSelector(Struct):
    transaction: bool = False


class FieldSelector(Struct):
    instructions: Optional[InstructionsSelector] = None
    transactions: Optional[TransactionsSelector] = None
    logs: Optional[LogsSelector] = None


class BlockRequest(Struct, rename="camel"):
    # Numbers may be sent as ints or 0x-prefixed hex strings
    from_block: Union[int, str, None] = None
    to_block: Union[int, str, None] = None
    limit: Union[int, str, None] = None
    block_filter: Optional[BlockFilter] = None
    field_selector: Optional[FieldSelector] = None

    def range(self) -> tuple[int, int]:
        if self.from_block is None or self.to_block is None:
            raise ValueError("fromBlock and toBlock are required")
        start, end = to_int(self.from_block), to_int(self.to_block)
        if start > end:
            raise ValueError(f"fromBlock {start} is greater than toBlock {end}")
        return start, end

    def limit_value(self) -> Optional[int]:
        if self.limit is None:
            return None
        limit = to_int(self.limit)
        if limit < 0:
            raise ValueError("limit must be >= 0")
        return limit


def to_int(value: Union[int, str]) -> int:
    """Accepts ints, decimal strings and 0x hex strings"""
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text, 10)


class BlockResult(Struct, rename="camel"):
    blocks: list[Block]
    block_range: tuple[int, int]  # [start, end]
    genesis_hash: str


class AvailableBlocks(Struct, rename="camel"):
    start_height: int
    end_height: int


class Capability(Struct, rename="camel"):
    available_blocks: list[AvailableBlocks]
    filters: dict[str, list[str]]
    supported_responses: list[str]
    genesis_hash: str
    chain_id: str
