# takoyaki/types/__init__.py

# New Types
from .new import (
    Base58Str,
    PublicKey,
    SignatureStr,
    BlockHash,
    IntStr,
    HexStr,
    ErrorId,
)

# Archive Types
from .sqd import (
    RawBlockHeader,
    AddressTableLookup,
    LoadedAddresses,
    RawTransaction,
    RawInstruction,
    RawLog,
    RawBalance,
    RawTokenBalance,
    RawReward,
    SolanaBlockResponse,
    Fields,
    TransactionRequest,
    InstructionRequest,
    LogRequest,
    RewardRequest,
    BalancesRequest,
    TokenBalanceRequest,
    SolanaRequest,
    HeadResponse,
    MetaResponse,
    ArchiveRegistryResponse,
)

# Canonical Types
from .solana import (
    RewardType,
    CompiledInstruction,
    InnerInstruction,
    MessageHeader,
    Message,
    JSONTransaction,
    UiTokenAmount,
    TokenBalance,
    Log,
    BlockReward,
    TransactionMeta,
    Transaction,
    Block,
)

# API Types
from .api import (
    TxFilterQuery,
    InstFilterQuery,
    LogFilterQuery,
    BlockFilter,
    FieldSelector,
    BlockRequest,
    BlockResult,
    AvailableBlocks,
    Capability,
)

# Configuration Types
from .configs import (
    NetworkMeta,
    MAINNET,
    ECLIPSE_MAINNET,
    ArchiveConfig,
    ServerConfig,
    LoggingConfig,
)

# Errors
from .errors import (
    ProcessingError,
    TakoyakiError,
    TransformError,
    AddressNotFoundError,
    DanglingReferenceError,
    NumericParseError,
    MissingFieldError,
    ArchiveError,
    with_context,
)

__all__ = [
    # New Types
    "Base58Str",
    "PublicKey",
    "SignatureStr",
    "BlockHash",
    "IntStr",
    "HexStr",
    "ErrorId",

    # Archive Types
    "RawBlockHeader",
    "AddressTableLookup",
    "LoadedAddresses",
    "RawTransaction",
    "RawInstruction",
    "RawLog",
    "RawBalance",
    "RawTokenBalance",
    "RawReward",
    "SolanaBlockResponse",
    "Fields",
    "TransactionRequest",
    "InstructionRequest",
    "LogRequest",
    "RewardRequest",
    "BalancesRequest",
    "TokenBalanceRequest",
    "SolanaRequest",
    "HeadResponse",
    "MetaResponse",
    "ArchiveRegistryResponse",

    # Canonical Types
    "RewardType",
    "CompiledInstruction",
    "InnerInstruction",
    "MessageHeader",
    "Message",
    "JSONTransaction",
    "UiTokenAmount",
    "TokenBalance",
    "Log",
    "BlockReward",
    "TransactionMeta",
    "Transaction",
    "Block",

    # API Types
    "TxFilterQuery",
    "InstFilterQuery",
    "LogFilterQuery",
    "BlockFilter",
    "FieldSelector",
    "BlockRequest",
    "BlockResult",
    "AvailableBlocks",
    "Capability",

    # Configuration Types
    "NetworkMeta",
    "MAINNET",
    "ECLIPSE_MAINNET",
    "ArchiveConfig",
    "ServerConfig",
    "LoggingConfig",

    # Errors
    "ProcessingError",
    "TakoyakiError",
    "TransformError",
    "AddressNotFoundError",
    "DanglingReferenceError",
    "NumericParseError",
    "MissingFieldError",
    "ArchiveError",
    "with_context",
]
