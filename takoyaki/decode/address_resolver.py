# takoyaki/decode/address_resolver.py
"""
Account index resolution for a single transaction.

Indices follow the runtime's account ordering: static account keys first,
then addresses loaded through lookup tables (writable, then readonly).
"""

from typing import Dict, Iterable, List, Sequence, Tuple, Union

from ..types import RawTransaction, PublicKey, AddressNotFoundError, DanglingReferenceError


LookupRange = Tuple[str, Sequence[PublicKey]]


def lookup_ranges(tx: RawTransaction) -> List[LookupRange]:
    """Ordered address sources for a transaction. New sources are appended here."""
    loaded = tx.loaded_addresses
    return [
        ("static", tx.account_keys),
        ("writable", loaded.writable if loaded else []),
        ("readonly", loaded.readonly if loaded else []),
    ]


class AddressResolver:
    def __init__(self, ranges: List[LookupRange], tx_index: int = None):
        self.tx_index = tx_index
        self._indices: Dict[str, int] = {}
        self._keys: List[PublicKey] = []

        for _, addresses in ranges:
            for address in addresses:
                # first match wins when an address shows up in several ranges
                self._indices.setdefault(address, len(self._keys))
                self._keys.append(address)

    @classmethod
    def for_transaction(cls, tx: RawTransaction) -> 'AddressResolver':
        return cls(lookup_ranges(tx), tx.transaction_index)

    @property
    def account_keys(self) -> List[PublicKey]:
        """Combined key list, position == resolved index"""
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def resolve(self, address: str) -> int:
        try:
            return self._indices[address]
        except KeyError:
            raise AddressNotFoundError(address, self.tx_index) from None


def resolve(address: str, tx: RawTransaction) -> int:
    return AddressResolver.for_transaction(tx).resolve(address)


class TransactionLookup:
    """Transactions of one block keyed by transaction index, with a resolver per transaction"""

    def __init__(self, transactions: Iterable[RawTransaction]):
        self._transactions: Dict[int, RawTransaction] = {
            tx.transaction_index: tx for tx in transactions
        }
        self._resolvers: Dict[int, AddressResolver] = {}

    @classmethod
    def of(cls, transactions: Union['TransactionLookup', Iterable[RawTransaction]]) -> 'TransactionLookup':
        if isinstance(transactions, cls):
            return transactions
        return cls(transactions)

    def get(self, tx_index: int, record: str = "record") -> RawTransaction:
        tx = self._transactions.get(tx_index)
        if tx is None:
            raise DanglingReferenceError(
                f"Unable to find transaction with index {tx_index} referenced by {record}",
                tx_index=tx_index,
                record=record,
            )
        return tx

    def resolver(self, tx_index: int, record: str = "record") -> AddressResolver:
        resolver = self._resolvers.get(tx_index)
        if resolver is None:
            resolver = AddressResolver.for_transaction(self.get(tx_index, record))
            self._resolvers[tx_index] = resolver
        return resolver
