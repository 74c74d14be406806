# takoyaki/decode/transaction_decoder.py

from typing import List, Optional

from ..types import (
    RawTransaction,
    RawBlockHeader,
    CompiledInstruction,
    InnerInstruction,
    TokenBalance,
    Log,
    LoadedAddresses,
    MessageHeader,
    Message,
    JSONTransaction,
    TransactionMeta,
    Transaction,
)
from ..utils.amounts import parse_uint64, parse_optional_uint64
from .address_resolver import AddressResolver
from .interfaces import TransactionDecoderInterface


class TransactionDecoder(TransactionDecoderInterface):
    """Assembles one canonical transaction from its already grouped records"""

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
        tx_index = raw.transaction_index
        fee = parse_uint64(raw.fee, "fee", tx_index=tx_index)
        compute_units = parse_optional_uint64(
            raw.compute_units_consumed, "compute units consumed", tx_index=tx_index
        )

        logs = logs or []
        loaded = raw.loaded_addresses or LoadedAddresses()

        message = Message(
            account_keys=AddressResolver.for_transaction(raw).account_keys,
            header=MessageHeader(
                num_required_signatures=raw.num_required_signatures,
                num_readonly_signed_accounts=raw.num_readonly_signed_accounts,
                num_readonly_unsigned_accounts=raw.num_readonly_unsigned_accounts,
            ),
            instructions=instructions or [],
            recent_blockhash=raw.recent_blockhash or "",
            address_table_lookups=raw.address_table_lookups or [],
        )

        meta = TransactionMeta(
            err=raw.err,
            fee=fee,
            pre_balances=pre_balances or [],
            post_balances=post_balances or [],
            inner_instructions=inner_instructions or [],
            pre_token_balances=pre_token_balances or [],
            post_token_balances=post_token_balances or [],
            logs=logs,
            log_messages=[log.render() for log in logs],
            loaded_addresses=LoadedAddresses(
                writable=list(loaded.writable),
                readonly=list(loaded.readonly),
            ),
            compute_units_consumed=compute_units,
        )

        return Transaction(
            slot=header.block_slot,
            block_time=header.timestamp,
            transaction=JSONTransaction(
                signatures=list(raw.signatures),
                message=message,
            ),
            meta=meta,
            version=raw.version,
        )
