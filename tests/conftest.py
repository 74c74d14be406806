"""
Pytest fixtures and record builders for takoyaki tests.

Addresses are short readable placeholders, the engine treats them as opaque strings.
"""

from __future__ import annotations

import pytest

from takoyaki.types import (
    RawBlockHeader,
    RawTransaction,
    RawInstruction,
    RawLog,
    RawBalance,
    RawTokenBalance,
    RawReward,
    LoadedAddresses,
    SolanaBlockResponse,
)

PAYER = "Payer1111111111111111111111111111111111111"
ACCOUNT_A = "AccountA111111111111111111111111111111111"
ACCOUNT_B = "AccountB111111111111111111111111111111111"
PROGRAM = "Program11111111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
LOADED_W = "LoadedW1111111111111111111111111111111111"
LOADED_R = "LoadedR1111111111111111111111111111111111"
MINT = "Mint111111111111111111111111111111111111111"
OWNER = "Owner11111111111111111111111111111111111111"
BLOCK_HASH = "BlockHash1111111111111111111111111111111111"
PARENT_HASH = "ParentHash111111111111111111111111111111111"


def make_header(slot: int = 300, height: int = 280, timestamp: int = 1_700_000_000) -> RawBlockHeader:
    """Portal dialect header"""
    return RawBlockHeader(
        hash=BLOCK_HASH,
        parent_hash=PARENT_HASH,
        timestamp=timestamp,
        number=slot,
        height=height,
        parent_number=slot - 1,
    )


def make_tx(index: int = 0,
            account_keys: list[str] | None = None,
            writable: list[str] | None = None,
            readonly: list[str] | None = None,
            fee: str | None = "5000",
            signatures: list[str] | None = None,
            **kwargs) -> RawTransaction:
    return RawTransaction(
        transaction_index=index,
        signatures=signatures if signatures is not None else [f"Sig{index}"],
        account_keys=account_keys if account_keys is not None else [PAYER, ACCOUNT_A, PROGRAM],
        loaded_addresses=LoadedAddresses(writable=writable or [], readonly=readonly or []),
        fee=fee,
        num_required_signatures=1,
        **kwargs,
    )


def make_instruction(tx_index: int, address: list[int], program_id: str = PROGRAM,
                     accounts: list[str] | None = None, data: str = "3Bxs4h24hBtQy9rw") -> RawInstruction:
    return RawInstruction(
        transaction_index=tx_index,
        instruction_address=address,
        program_id=program_id,
        accounts=accounts if accounts is not None else [PAYER, ACCOUNT_A],
        data=data,
    )


def make_balance(tx_index: int, account: str, pre: str, post: str) -> RawBalance:
    return RawBalance(transaction_index=tx_index, account=account, pre=pre, post=post)


def make_token_balance(tx_index: int, account: str, pre_amount: str | None = None,
                       post_amount: str | None = None, decimals: int = 6) -> RawTokenBalance:
    pre = pre_amount is not None
    post = post_amount is not None
    return RawTokenBalance(
        transaction_index=tx_index,
        account=account,
        pre_mint=MINT if pre else None,
        pre_decimals=decimals if pre else None,
        pre_owner=OWNER if pre else None,
        pre_amount=pre_amount,
        pre_program_id=TOKEN_PROGRAM if pre else None,
        post_mint=MINT if post else None,
        post_decimals=decimals if post else None,
        post_owner=OWNER if post else None,
        post_amount=post_amount,
        post_program_id=TOKEN_PROGRAM if post else None,
    )


def make_log(tx_index: int, log_index: int, message: str, kind: str = "log") -> RawLog:
    return RawLog(
        transaction_index=tx_index,
        log_index=log_index,
        instruction_address=[0],
        program_id=PROGRAM,
        kind=kind,
        message=message,
    )


def make_block(**records) -> SolanaBlockResponse:
    header = records.pop("header", None) or make_header()
    return SolanaBlockResponse(header=header, **records)


@pytest.fixture
def tx():
    return make_tx(0, writable=[LOADED_W], readonly=[LOADED_R])


@pytest.fixture
def nested_block():
    """One transaction, two top level instructions and one inner instruction under the second"""
    return make_block(
        transactions=[make_tx(0)],
        instructions=[
            make_instruction(0, [0]),
            make_instruction(0, [1]),
            make_instruction(0, [1, 0], accounts=[ACCOUNT_A]),
        ],
        balances=[make_balance(0, PAYER, "1000000", "995000")],
        logs=[make_log(0, 0, "Instruction: Transfer"), make_log(0, 1, "AQID", kind="data")],
        rewards=[RawReward(pubkey=PAYER, lamports="2500", post_balance="997500", reward_type="fee")],
    )
