"""
Tests for account index resolution across static and loaded addresses.
"""

from __future__ import annotations

import pytest

from takoyaki.decode.address_resolver import AddressResolver, TransactionLookup, resolve
from takoyaki.types import AddressNotFoundError, DanglingReferenceError

from conftest import PAYER, ACCOUNT_A, PROGRAM, LOADED_W, LOADED_R, make_tx


def test_static_then_writable_then_readonly(tx):
    assert resolve(PAYER, tx) == 0
    assert resolve(ACCOUNT_A, tx) == 1
    assert resolve(PROGRAM, tx) == 2
    assert resolve(LOADED_W, tx) == 3
    assert resolve(LOADED_R, tx) == 4


def test_offsets_follow_list_lengths():
    tx = make_tx(0, account_keys=[PAYER], writable=["W1", "W2"], readonly=["R1", "R2", "R3"])
    resolver = AddressResolver.for_transaction(tx)

    assert resolver.resolve("W2") == 2
    assert resolver.resolve("R1") == 3
    assert resolver.resolve("R3") == 5


def test_indices_cover_address_space_without_gaps(tx):
    resolver = AddressResolver.for_transaction(tx)
    addresses = tx.account_keys + tx.loaded_addresses.writable + tx.loaded_addresses.readonly

    indices = [resolver.resolve(address) for address in addresses]

    assert sorted(indices) == list(range(len(resolver)))
    assert resolver.account_keys == addresses


def test_missing_loaded_addresses():
    tx = make_tx(0)
    tx.loaded_addresses = None
    assert resolve(PROGRAM, tx) == 2


def test_duplicate_address_first_match_wins():
    tx = make_tx(0, account_keys=[PAYER, ACCOUNT_A], readonly=[ACCOUNT_A])
    resolver = AddressResolver.for_transaction(tx)

    assert resolver.resolve(ACCOUNT_A) == 1
    assert len(resolver) == 3


def test_unknown_address_raises(tx):
    with pytest.raises(AddressNotFoundError) as exc_info:
        resolve("Unknown111", tx)

    assert exc_info.value.address == "Unknown111"
    assert exc_info.value.tx_index == 0
    assert exc_info.value.context == {"tx_index": 0, "account": "Unknown111"}


def test_lookup_missing_transaction_is_dangling():
    lookup = TransactionLookup([make_tx(0), make_tx(2)])

    assert lookup.get(2).transaction_index == 2
    with pytest.raises(DanglingReferenceError) as exc_info:
        lookup.resolver(1, "balance")
    assert exc_info.value.tx_index == 1


def test_lookup_caches_resolvers():
    lookup = TransactionLookup([make_tx(0)])
    assert lookup.resolver(0) is lookup.resolver(0)
    assert TransactionLookup.of(lookup) is lookup
