"""
Interfaces for archive query clients.

This module defines the interface the service layer uses to talk to an
archive, independent of the archive flavour (portal or legacy).
"""
from abc import ABC, abstractmethod
from typing import List

from ..types import Fields, SolanaRequest, SolanaBlockResponse
from ..types.configs import NetworkMeta


class QueryClientInterface(ABC):
    """Interface for archive client implementations."""

    @abstractmethod
    async def metadata(self) -> NetworkMeta:
        """
        Network metadata: chain id, genesis hash and the earliest block served.
        """
        pass

    @abstractmethod
    async def current_height(self) -> int:
        """
        Latest block available in the archive.
        """
        pass

    @abstractmethod
    async def query(self, request: SolanaRequest) -> List[SolanaBlockResponse]:
        """
        Run a data query and return the matching blocks.
        """
        pass

    @abstractmethod
    def get_all_fields(self) -> Fields:
        """
        Field selection that retrieves everything needed to rebuild a full block.
        """
        pass
