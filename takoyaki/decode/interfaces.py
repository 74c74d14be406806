"""
Interfaces for archive block decoding components.

This module defines the interfaces for rebuilding flat archive records
into the canonical block format.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..types import (
    SolanaBlockResponse,
    RawTransaction,
    RawBlockHeader,
    Block,
    Transaction,
    TokenBalance,
    CompiledInstruction,
    InnerInstruction,
    Log,
)


class BlockDecoderInterface(ABC):
    """Interface for block decoder implementations."""

    @abstractmethod
    def decode_block(self, raw_block: SolanaBlockResponse) -> Block:
        """
        Decode a full archive block. Fails as a whole, never returns a partial block.
        """
        pass


class TransactionDecoderInterface(ABC):
    """Interface for transaction decoder implementations."""

    @abstractmethod
    def assemble(
        self,
        raw: RawTransaction,
        header: RawBlockHeader,
        pre_balances: Optional[List[int]] = None,
        post_balances: Optional[List[int]] = None,
        pre_token_balances: Optional[List[TokenBalance]] = None,
        post_token_balances: Optional[List[TokenBalance]] = None,
        instructions: Optional[List[CompiledInstruction]] = None,
        inner_instructions: Optional[List[InnerInstruction]] = None,
        logs: Optional[List[Log]] = None,
    ) -> Transaction:
        """
        Assemble one transaction from its grouped records.
        """
        pass
