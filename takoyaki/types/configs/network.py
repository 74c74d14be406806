# takoyaki/types/configs/network.py

from msgspec import Struct


class NetworkMeta(Struct, frozen=True):
    chain_id: str
    genesis_hash: str
    # Earliest block served by the archive, see
    # https://docs.sqd.ai/subsquid-network/reference/networks/#solana-and-compatibles
    start_block: int


MAINNET = NetworkMeta(
    chain_id="mainnet",
    genesis_hash="5eykt4UsFv8P8NJdTREpY1vzqKqZKvdpKuc147dw2N9d",
    start_block=269_828_500,
)

ECLIPSE_MAINNET = NetworkMeta(
    chain_id="eclipse-mainnet",
    genesis_hash="",  # TODO: fill in once the eclipse genesis hash is published by the archive
    start_block=24_641_070,
)

NETWORKS = {
    "solana-mainnet": MAINNET,
    "eclipse-mainnet": ECLIPSE_MAINNET,
}
