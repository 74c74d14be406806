# takoyaki/types/solana.py
"""
Canonical block schema returned to callers.

Mirrors the Solana JSON-RPC ``getBlock`` shape with less parsing: addresses,
signatures and hashes stay base58 strings.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union, Literal

from msgspec import Struct

from .new import Base58Str, PublicKey, SignatureStr, BlockHash, JSON
from .sqd import AddressTableLookup, LoadedAddresses


class RewardType(str, Enum):
    FEE = "Fee"
    RENT = "Rent"
    VOTING = "Voting"
    STAKING = "Staking"


class CompiledInstruction(Struct, rename="camel"):
    # Indices into message.accountKeys
    program_id_index: int
    accounts: list[int]
    data: Base58Str


class InnerInstruction(Struct):
    # Index of the top level instruction the inner instructions originated from
    index: int
    instructions: list[CompiledInstruction]


class MessageHeader(Struct, rename="camel"):
    num_required_signatures: int = 0
    num_readonly_signed_accounts: int = 0
    num_readonly_unsigned_accounts: int = 0


class Message(Struct, rename="camel"):
    # static keys followed by loaded writable then loaded readonly addresses
    account_keys: list[PublicKey]
    header: MessageHeader
    instructions: list[CompiledInstruction]
    recent_blockhash: str = ""
    address_table_lookups: list[AddressTableLookup] = []


class JSONTransaction(Struct):
    signatures: list[SignatureStr]
    message: Message


class UiTokenAmount(Struct, rename="camel"):
    amount: str  # raw amount, ignoring decimals
    decimals: int
    ui_amount: Optional[Decimal]
    ui_amount_string: str


class TokenBalance(Struct, rename="camel"):
    account_index: int
    mint: PublicKey
    ui_token_amount: UiTokenAmount
    owner: Optional[PublicKey] = None
    program_id: Optional[PublicKey] = None


class Log(Struct, rename="camel"):
    message: str
    program_id: Optional[PublicKey]
    log_index: int
    kind: Literal["log", "data", "other"]

    def render(self) -> str:
        """Format as the line the validator would have emitted"""
        if self.kind == "log":
            return f"Program log: {self.message}"
        if self.kind == "data":
            return f"Program data: {self.message}"
        return self.message


class BlockReward(Struct, rename="camel"):
    pubkey: PublicKey
    lamports: int
    post_balance: int
    reward_type: Optional[str] = None  # RewardType value when the tag is known
    commission: Optional[int] = None


class TransactionMeta(Struct, rename="camel"):
    err: JSON
    fee: int
    # Only accounts whose balance changed, ordered by account index
    pre_balances: list[int]
    post_balances: list[int]
    inner_instructions: list[InnerInstruction]
    pre_token_balances: list[TokenBalance]
    post_token_balances: list[TokenBalance]
    logs: list[Log]
    log_messages: list[str]
    loaded_addresses: LoadedAddresses
    compute_units_consumed: Optional[int] = None
    rewards: list[BlockReward] = []


class Transaction(Struct, rename="camel"):
    slot: int
    block_time: int
    transaction: JSONTransaction
    meta: TransactionMeta
    version: Union[Literal["legacy"], int, None] = None


class Block(Struct, rename="camel"):
    blockhash: BlockHash
    previous_blockhash: BlockHash
    parent_slot: int
    block_height: int
    block_time: int
    transactions: list[Transaction]
    rewards: list[BlockReward]
    signatures: list[SignatureStr] = []
