# takoyaki/__init__.py

import logging
from typing import Mapping, Optional

import httpx

from .core.config import TakoyakiConfig
from .core.logging import TakoyakiLogger, log_with_context
from .clients import QueryClientInterface, SoldexerClient, ArchiveClient, get_archive_url
from .decode import BlockDecoder, transform_block
from .service import SubqlApiService
from .types.configs import ArchiveConfig, LoggingConfig


def configure_logging(logging_config: LoggingConfig, console_enabled: bool = True) -> None:
    # Replaces the default console setup installed by the first get_logger call
    TakoyakiLogger.reset()
    TakoyakiLogger.configure(
        log_dir=logging_config.log_dir,
        log_level=logging_config.log_level,
        console_enabled=console_enabled,
        file_enabled=logging_config.log_dir is not None,
        structured_format=logging_config.structured_format,
    )


async def create_client(archive: ArchiveConfig,
                        http_client: Optional[httpx.AsyncClient] = None) -> QueryClientInterface:
    """Build the archive client, discovering the archive URL from the registry when none is configured"""
    logger = TakoyakiLogger.get_logger('core.init')

    url = archive.url
    if not url:
        url = await get_archive_url(archive.network, archive.registry_url,
                                    timeout=archive.timeout, http_client=http_client)

    log_with_context(logger, logging.INFO, "Creating archive client",
                     url=url, network=archive.network, archive_kind=archive.kind)

    if archive.kind == "legacy":
        return ArchiveClient(url, archive.network_meta, timeout=archive.timeout, http_client=http_client)
    return SoldexerClient(url, archive.network_meta, timeout=archive.timeout, http_client=http_client)


async def create_service(config: Optional[TakoyakiConfig] = None,
                         env_vars: Optional[Mapping[str, str]] = None,
                         http_client: Optional[httpx.AsyncClient] = None) -> SubqlApiService:
    config = config or TakoyakiConfig.from_env(env_vars)
    configure_logging(config.logging)

    client = await create_client(config.archive, http_client)
    return SubqlApiService(client, BlockDecoder())


__all__ = [
    "TakoyakiConfig",
    "configure_logging",
    "create_client",
    "create_service",
    "transform_block",
]
