# takoyaki/clients/registry.py

from typing import Optional

import httpx
import msgspec

from ..core.logging import TakoyakiLogger, log_with_context, INFO
from ..types import ArchiveRegistryResponse, ArchiveError
from ..types.configs import DEFAULT_REGISTRY_URL


async def get_archive_url(network: str,
                          registry_url: str = DEFAULT_REGISTRY_URL,
                          timeout: float = 30.0,
                          http_client: Optional[httpx.AsyncClient] = None) -> str:
    """Look up the first provider's data source URL for ``network`` in the archive registry"""
    logger = TakoyakiLogger.get_logger('clients.registry')

    client = http_client or httpx.AsyncClient(timeout=timeout)
    try:
        response = await client.get(registry_url)
    except httpx.HTTPError as e:
        raise ArchiveError(f"Failed to fetch archive registry: {e}", url=registry_url) from e
    finally:
        if http_client is None:
            await client.aclose()

    if response.status_code != httpx.codes.OK:
        raise ArchiveError(
            f"Bad response code: {response.status_code}\n{response.text}",
            url=registry_url,
            status_code=response.status_code,
        )

    try:
        registry = msgspec.json.decode(response.content, type=ArchiveRegistryResponse)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise ArchiveError(f"Failed to decode archive registry: {e}", url=registry_url) from e

    for archive in registry.archives:
        if archive.network == network and archive.providers:
            url = archive.providers[0].data_source_url
            log_with_context(logger, INFO, "Archive resolved from registry",
                             network=network, url=url)
            return url

    raise ArchiveError(f"No archive found for network {network}", url=registry_url, network=network)
