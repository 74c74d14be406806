# takoyaki/clients/soldexer_client.py

from typing import List, Optional

import httpx
import msgspec

from ..types import (
    Fields,
    SolanaRequest,
    SolanaBlockResponse,
    HeadResponse,
    MetaResponse,
    ArchiveError,
)
from ..types.configs import NetworkMeta, MAINNET
from .base import HttpArchiveClient
from .interfaces import QueryClientInterface


# Portal block numbers are slots, unlike the legacy archive
ALL_SOLDEXER_FIELDS = Fields(
    instruction={
        "transactionIndex": True,
        "instructionAddress": True,
        "programId": True,
        "data": True,
        "accounts": True,
        "isCommitted": True,
    },
    transaction={
        "transactionIndex": True,
        "accountKeys": True,
        "loadedAddresses": True,
        "feePayer": True,
        "fee": True,
        "err": True,
        "signatures": True,
        "numReadonlySignedAccounts": True,
        "numReadonlyUnsignedAccounts": True,
        "numRequiredSignatures": True,
        "addressTableLookups": True,
        "computeUnitsConsumed": True,
    },
    log={
        "transactionIndex": True,
        "logIndex": True,
        "instructionAddress": True,
        "programId": True,
        "kind": True,
        "message": True,
    },
    reward={
        "pubkey": True,
        "lamports": True,
        "rewardType": True,
        "postBalance": True,
        "commission": True,
    },
    block={
        "hash": True,
        "number": True,
        "height": True,
        "parentHash": True,
        "parentNumber": True,
        "timestamp": True,
    },
    token_balance={
        "account": True,
        "transactionIndex": True,
        "preMint": True,
        "preDecimals": True,
        "preOwner": True,
        "preAmount": True,
        "postMint": True,
        "postDecimals": True,
        "postOwner": True,
        "postAmount": True,
        "postProgramId": True,
        "preProgramId": True,
    },
    balance={
        "transactionIndex": True,
        "account": True,
        "pre": True,
        "post": True,
    },
)


class SoldexerClient(HttpArchiveClient, QueryClientInterface):
    """Client for the SQD portal: /head, /metadata and the NDJSON /stream endpoint"""

    def __init__(self, base_url: str,
                 network_meta: NetworkMeta = MAINNET,
                 timeout: float = 30.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(base_url, timeout, http_client)
        # The portal does not report a genesis hash
        self.network_meta = network_meta
        self._meta: Optional[NetworkMeta] = None
        self._block_decoder = msgspec.json.Decoder(SolanaBlockResponse)

    def get_all_fields(self) -> Fields:
        return ALL_SOLDEXER_FIELDS

    async def current_height(self) -> int:
        content = await self.get(self.url("head"))
        return _decode(content, HeadResponse, "head").number

    async def metadata(self) -> NetworkMeta:
        if self._meta is not None:
            return self._meta

        content = await self.get(self.url("metadata"))
        response = _decode(content, MetaResponse, "metadata")

        self._meta = NetworkMeta(
            chain_id=response.aliases[0] if response.aliases else response.dataset,
            genesis_hash=self.network_meta.genesis_hash,
            start_block=response.start_block,
        )
        self.log_info("Archive metadata loaded", chain_id=self._meta.chain_id,
                      start_block=self._meta.start_block)
        return self._meta

    async def query(self, request: SolanaRequest) -> List[SolanaBlockResponse]:
        url = self.url("stream")
        content = await self.post(url, msgspec.json.encode(request))

        blocks = []
        for line in content.splitlines():
            if not line.strip():
                continue
            try:
                blocks.append(self._block_decoder.decode(line))
            except (msgspec.DecodeError, msgspec.ValidationError) as e:
                raise ArchiveError(f"Failed to decode stream block: {e}", url=url) from e

        self.log_debug("Stream query completed", url=url, block_count=len(blocks),
                       from_block=request.from_block, to_block=request.to_block)
        return blocks


def _decode(content: bytes, type_, what: str):
    try:
        return msgspec.json.decode(content, type=type_)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise ArchiveError(f"Failed to decode {what} response: {e}") from e
