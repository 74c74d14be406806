# takoyaki/types/sqd.py
"""
Archive (SQD) wire types.

Field reference: https://docs.sqd.ai/solana-indexing/network-api/solana-api/

Response records are flat. Relationships between them are only expressed
through ``transactionIndex`` and ``instructionAddress``, the decode package
rebuilds the nesting.
"""

from typing import Optional, Union, Literal

from msgspec import Struct

from .new import Base58Str, PublicKey, SignatureStr, BlockHash, IntStr, HexStr, JSON


# =====================================================================
# RESPONSE RECORDS
# =====================================================================

class RawBlockHeader(Struct, rename="camel"):
    # Filter queries only select the slot fields, full block queries select the hashes too
    hash: Optional[BlockHash] = None
    parent_hash: Optional[BlockHash] = None
    timestamp: int = 0

    # Legacy archive uses slot/parentSlot with number as the height,
    # the portal uses number/parentNumber for slots and height for the height.
    number: Optional[int] = None
    height: Optional[int] = None
    slot: Optional[int] = None
    parent_slot: Optional[int] = None
    parent_number: Optional[int] = None

    def __post_init__(self) -> None:
        if self.is_legacy:
            if self.number is None:
                raise ValueError("Legacy block header is missing 'number'")
        elif self.height is None or self.number is None:
            raise ValueError("Block header is missing 'height' or 'number'")

    @property
    def is_legacy(self) -> bool:
        return self.slot is not None or self.parent_slot is not None

    @property
    def block_height(self) -> int:
        return self.number if self.is_legacy else self.height

    @property
    def block_slot(self) -> int:
        return self.slot if self.is_legacy else self.number

    @property
    def parent_block_slot(self) -> int:
        parent = self.parent_slot if self.is_legacy else self.parent_number
        return parent or 0


class AddressTableLookup(Struct, rename="camel"):
    account_key: PublicKey
    writable_indexes: list[int] = []
    readonly_indexes: list[int] = []


class LoadedAddresses(Struct):
    writable: list[PublicKey] = []
    readonly: list[PublicKey] = []


class RawTransaction(Struct, rename="camel"):
    transaction_index: int
    signatures: list[SignatureStr] = []
    err: JSON = None
    version: Union[Literal["legacy"], int, None] = None
    account_keys: list[PublicKey] = []
    address_table_lookups: Optional[list[AddressTableLookup]] = None
    num_readonly_signed_accounts: int = 0
    num_readonly_unsigned_accounts: int = 0
    num_required_signatures: int = 0
    recent_blockhash: Optional[BlockHash] = None
    compute_units_consumed: Union[IntStr, int, None] = None
    fee: Optional[IntStr] = None
    fee_payer: Optional[PublicKey] = None  # undocumented, the first account key
    loaded_addresses: Optional[LoadedAddresses] = None
    has_dropped_log_messages: bool = False


class RawInstruction(Struct, rename="camel"):
    transaction_index: int
    # len 1 = top level instruction, longer paths are inner instructions
    instruction_address: list[int]
    program_id: PublicKey
    accounts: list[PublicKey] = []
    data: Base58Str = ""
    is_committed: bool = False
    compute_units_consumed: Union[IntStr, int, None] = None
    error: Optional[str] = None
    has_dropped_log_messages: bool = False


class RawLog(Struct, rename="camel"):
    transaction_index: int
    log_index: int
    instruction_address: list[int] = []
    program_id: Optional[PublicKey] = None
    kind: Literal["log", "data", "other"] = "log"
    message: str = ""


class RawBalance(Struct, rename="camel"):
    """Only present for accounts whose balance changed"""
    transaction_index: int
    account: PublicKey
    pre: Optional[IntStr] = None
    post: Optional[IntStr] = None


class RawTokenBalance(Struct, rename="camel"):
    transaction_index: int
    account: PublicKey

    pre_mint: Optional[PublicKey] = None
    pre_decimals: Optional[int] = None
    pre_owner: Optional[PublicKey] = None
    pre_amount: Optional[IntStr] = None
    pre_program_id: Optional[PublicKey] = None

    post_mint: Optional[PublicKey] = None
    post_decimals: Optional[int] = None
    post_owner: Optional[PublicKey] = None
    post_amount: Optional[IntStr] = None
    post_program_id: Optional[PublicKey] = None

    @property
    def has_pre(self) -> bool:
        return self.pre_owner is not None

    @property
    def has_post(self) -> bool:
        return self.post_owner is not None


class RawReward(Struct, rename="camel"):
    pubkey: PublicKey
    lamports: Optional[IntStr] = None
    post_balance: Optional[IntStr] = None
    reward_type: Optional[str] = None
    commission: Union[int, str, None] = None


class SolanaBlockResponse(Struct, rename="camel"):
    header: RawBlockHeader
    transactions: list[RawTransaction] = []  # excludes vote program transactions
    instructions: list[RawInstruction] = []
    logs: list[RawLog] = []
    balances: list[RawBalance] = []
    token_balances: list[RawTokenBalance] = []
    rewards: list[RawReward] = []


# =====================================================================
# REQUEST
# =====================================================================
# None fields are omitted on encode, empty lists are sent as [] because an
# empty request item means "no filter".

class Fields(Struct, omit_defaults=True, frozen=True, rename="camel"):
    instruction: Optional[dict[str, bool]] = None
    transaction: Optional[dict[str, bool]] = None
    log: Optional[dict[str, bool]] = None
    balance: Optional[dict[str, bool]] = None
    token_balance: Optional[dict[str, bool]] = None
    reward: Optional[dict[str, bool]] = None
    block: Optional[dict[str, bool]] = None


class TransactionRequest(Struct, omit_defaults=True, rename="camel"):
    fee_payer: Optional[list[PublicKey]] = None

    instructions: bool = False
    logs: bool = False
    balances: bool = False
    token_balances: bool = False


ACCOUNT_FILTER_SLOTS = 10

# discriminator byte length -> request field
DISCRIMINATOR_FIELDS = {1: "d1", 2: "d2", 4: "d4", 8: "d8"}


class InstructionRequest(Struct, omit_defaults=True, rename="camel"):
    program_id: Optional[list[PublicKey]] = None
    d1: Optional[list[HexStr]] = None
    d2: Optional[list[HexStr]] = None
    d3: Optional[list[HexStr]] = None
    d4: Optional[list[HexStr]] = None
    d8: Optional[list[HexStr]] = None
    a0: Optional[list[PublicKey]] = None
    a1: Optional[list[PublicKey]] = None
    a2: Optional[list[PublicKey]] = None
    a3: Optional[list[PublicKey]] = None
    a4: Optional[list[PublicKey]] = None
    a5: Optional[list[PublicKey]] = None
    a6: Optional[list[PublicKey]] = None
    a7: Optional[list[PublicKey]] = None
    a8: Optional[list[PublicKey]] = None
    a9: Optional[list[PublicKey]] = None
    is_committed: bool = False

    transaction: bool = False
    transaction_balances: bool = False
    transaction_token_balances: bool = False
    transaction_instructions: bool = False
    inner_instructions: bool = False
    logs: bool = False

    def set_accounts(self, position: int, accounts: list[PublicKey]) -> None:
        """Filter on the account passed at ``position`` of the instruction"""
        if position < 0:
            raise ValueError("Account index must be >= 0")
        if position >= ACCOUNT_FILTER_SLOTS:
            raise ValueError(f"Account filter length is limited to {ACCOUNT_FILTER_SLOTS}")
        setattr(self, f"a{position}", list(accounts))

    def set_discriminators(self, discriminators: list[HexStr]) -> None:
        """Sort 0x-prefixed discriminators into d1/d2/d4/d8 by byte length"""
        for discriminator in discriminators:
            hex_body = discriminator[2:] if discriminator.startswith("0x") else discriminator
            byte_length, remainder = divmod(len(hex_body), 2)
            field_name = DISCRIMINATOR_FIELDS.get(byte_length)
            if remainder or field_name is None:
                raise ValueError(f"Unsupported discriminator length: {discriminator}")

            current = getattr(self, field_name) or []
            current.append(HexStr(discriminator))
            setattr(self, field_name, current)


class LogRequest(Struct, omit_defaults=True, rename="camel"):
    program_id: Optional[list[PublicKey]] = None
    kind: Optional[list[Literal["log", "data", "other"]]] = None

    transaction: bool = False
    instruction: bool = False


class RewardRequest(Struct, omit_defaults=True):
    pubkey: Optional[list[PublicKey]] = None


class BalancesRequest(Struct, omit_defaults=True, rename="camel"):
    account: Optional[list[PublicKey]] = None

    transaction: bool = False
    transaction_instructions: bool = False


class TokenBalanceRequest(Struct, omit_defaults=True, rename="camel"):
    account: Optional[list[PublicKey]] = None
    pre_program_id: Optional[list[PublicKey]] = None
    post_program_id: Optional[list[PublicKey]] = None
    pre_mint: Optional[list[PublicKey]] = None
    post_mint: Optional[list[PublicKey]] = None
    pre_owner: Optional[list[PublicKey]] = None
    post_owner: Optional[list[PublicKey]] = None

    transaction: Optional[bool] = None
    transaction_instructions: Optional[bool] = None


class SolanaRequest(Struct, omit_defaults=True, rename="camel"):
    type: Literal["solana"]
    # from/to are block numbers for the legacy archive and slots for the portal
    from_block: int
    to_block: int
    include_all_blocks: Optional[bool] = None
    fields: Optional[Fields] = None

    transactions: Optional[list[TransactionRequest]] = None
    instructions: Optional[list[InstructionRequest]] = None
    logs: Optional[list[LogRequest]] = None
    rewards: Optional[list[RewardRequest]] = None
    token_balances: Optional[list[TokenBalanceRequest]] = None
    balances: Optional[list[BalancesRequest]] = None


class HeadResponse(Struct):
    number: int
    hash: Optional[BlockHash] = None


class MetaResponse(Struct):
    dataset: str
    aliases: list[str] = []
    real_time: bool = False
    start_block: int = 0


class ArchiveProvider(Struct, rename="camel"):
    provider: str
    data_source_url: str
    release: Optional[str] = None


class ArchiveEntry(Struct, rename="camel"):
    network: str
    providers: list[ArchiveProvider] = []
    id: Optional[str] = None
    chain_name: Optional[str] = None
    is_testnet: bool = False


class ArchiveRegistryResponse(Struct):
    archives: list[ArchiveEntry] = []
