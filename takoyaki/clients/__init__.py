# takoyaki/clients/__init__.py

from .interfaces import QueryClientInterface
from .soldexer_client import SoldexerClient, ALL_SOLDEXER_FIELDS
from .archive_client import ArchiveClient, ALL_FIELDS
from .registry import get_archive_url

__all__ = [
    "QueryClientInterface",
    "SoldexerClient",
    "ALL_SOLDEXER_FIELDS",
    "ArchiveClient",
    "ALL_FIELDS",
    "get_archive_url",
]
