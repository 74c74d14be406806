# takoyaki/clients/archive_client.py

from typing import List, Optional

import httpx
import msgspec

from ..types import Fields, SolanaRequest, SolanaBlockResponse, ArchiveError
from ..types.configs import NetworkMeta
from .base import HttpArchiveClient
from .interfaces import QueryClientInterface


# Legacy archive block numbers are heights, slot/parentSlot carry the slots
ALL_FIELDS = Fields(
    instruction={
        "programId": True,
        "data": True,
        "accounts": True,
    },
    transaction={
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
    },
    log={
        "kind": True,
        "programId": True,
        "message": True,
    },
    reward={
        "rewardType": True,
        "lamports": True,
        "postBalance": True,
    },
    block={
        "parentHash": True,
        "slot": True,
        "parentSlot": True,
        "timestamp": True,
    },
    token_balance={
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
        "pre": True,
        "post": True,
    },
)


class ArchiveClient(HttpArchiveClient, QueryClientInterface):
    """
    Client for the legacy SQD archive.

    Queries go through a worker: ``GET {url}/{from_block}/worker`` returns the
    worker URL the request is then posted to.
    """

    def __init__(self, url: str, network_meta: NetworkMeta,
                 timeout: float = 30.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(url, timeout, http_client)
        self.network_meta = network_meta
        self._blocks_decoder = msgspec.json.Decoder(List[SolanaBlockResponse])

    def get_all_fields(self) -> Fields:
        return ALL_FIELDS

    async def metadata(self) -> NetworkMeta:
        return self.network_meta

    async def current_height(self) -> int:
        """Block height of the dataset head, not the slot"""
        content = await self.get(self.url("height"))
        text = content.decode().strip()
        if not text.isdigit():
            raise ArchiveError(f"Unexpected height response: {text!r}", url=self.url("height"))
        return int(text)

    async def worker_url(self, from_block: int) -> str:
        content = await self.get(self.url(from_block, "worker"))
        return content.decode().strip()

    async def query(self, request: SolanaRequest) -> List[SolanaBlockResponse]:
        worker = await self.worker_url(request.from_block)
        content = await self.post(worker, msgspec.json.encode(request))

        try:
            blocks = self._blocks_decoder.decode(content)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            raise ArchiveError(f"Failed to decode worker response: {e}", url=worker) from e

        self.log_debug("Worker query completed", url=worker, block_count=len(blocks))
        return blocks
