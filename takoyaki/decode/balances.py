# takoyaki/decode/balances.py
"""
Balance and token balance grouping.

The archive only returns balances for accounts whose lamport balance changed,
so pre/post arrays are parallel to each other but not to the account keys.
"""

from typing import Dict, List, Tuple, Iterable, Union, Optional

from ..types import (
    RawBalance,
    RawTokenBalance,
    RawTransaction,
    TokenBalance,
    UiTokenAmount,
    PublicKey,
    NumericParseError,
    MissingFieldError,
)
from ..utils.amounts import parse_uint64, scale_token_amount
from .address_resolver import TransactionLookup


Balances = Dict[int, Tuple[List[int], List[int]]]
TokenBalances = Dict[int, Tuple[List[TokenBalance], List[TokenBalance]]]


def group_balances(
    balances: Iterable[RawBalance],
    transactions: Union[TransactionLookup, Iterable[RawTransaction]],
) -> Balances:
    lookup = TransactionLookup.of(transactions)
    grouped: Dict[int, List[Tuple[int, int, int]]] = {}

    for balance in balances:
        tx_index = balance.transaction_index
        resolver = lookup.resolver(tx_index, "balance")
        account_index = resolver.resolve(balance.account)

        pre = parse_uint64(balance.pre, "pre balance", tx_index=tx_index, account=balance.account)
        post = parse_uint64(balance.post, "post balance", tx_index=tx_index, account=balance.account)

        grouped.setdefault(tx_index, []).append((account_index, pre, post))

    result: Balances = {}
    for tx_index, entries in grouped.items():
        entries.sort(key=lambda entry: entry[0])
        result[tx_index] = (
            [pre for _, pre, _ in entries],
            [post for _, _, post in entries],
        )
    return result


def build_token_balance(
    account_index: int,
    owner: Optional[PublicKey],
    program_id: Optional[PublicKey],
    mint: Optional[PublicKey],
    amount: Optional[str],
    decimals: Optional[int],
    **context,
) -> TokenBalance:
    if amount is None:
        raise NumericParseError("token amount", amount, **context)
    if decimals is None:
        raise NumericParseError("token decimals", decimals, **context)
    if mint is None:
        raise MissingFieldError("token mint", **context)

    ui_amount, ui_amount_string = scale_token_amount(amount, decimals, **context)

    return TokenBalance(
        account_index=account_index,
        owner=owner,
        program_id=program_id,
        mint=mint,
        ui_token_amount=UiTokenAmount(
            amount=amount,
            decimals=decimals,
            ui_amount=ui_amount,
            ui_amount_string=ui_amount_string,
        ),
    )


def group_token_balances(
    token_balances: Iterable[RawTokenBalance],
    transactions: Union[TransactionLookup, Iterable[RawTransaction]],
) -> TokenBalances:
    """
    Build pre and post token balances per transaction.

    The facets are independent, a record may only carry one of them. Each
    side is sorted by account index.
    """
    lookup = TransactionLookup.of(transactions)
    result: TokenBalances = {}

    for balance in token_balances:
        tx_index = balance.transaction_index
        resolver = lookup.resolver(tx_index, "token balance")
        pre_list, post_list = result.setdefault(tx_index, ([], []))

        if not (balance.has_pre or balance.has_post):
            continue

        account_index = resolver.resolve(balance.account)
        context = {"tx_index": tx_index, "account": balance.account}

        if balance.has_pre:
            pre_list.append(build_token_balance(
                account_index,
                balance.pre_owner,
                balance.pre_program_id,
                balance.pre_mint,
                balance.pre_amount,
                balance.pre_decimals,
                **context,
            ))
        if balance.has_post:
            post_list.append(build_token_balance(
                account_index,
                balance.post_owner,
                balance.post_program_id,
                balance.post_mint,
                balance.post_amount,
                balance.post_decimals,
                **context,
            ))

    for pre_list, post_list in result.values():
        pre_list.sort(key=lambda token_balance: token_balance.account_index)
        post_list.sort(key=lambda token_balance: token_balance.account_index)

    return result
