# takoyaki/core/config.py

from msgspec import Struct
from typing import Mapping, Optional
from pathlib import Path
import os
import logging

from ..types.configs import (
    ArchiveConfig,
    ServerConfig,
    LoggingConfig,
    NETWORKS,
    DEFAULT_REGISTRY_URL,
)
from .logging import TakoyakiLogger, log_with_context


ENV_PREFIX = "TAKOYAKI_"

ARCHIVE_KINDS = ("portal", "legacy")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TakoyakiConfig(Struct):
    archive: ArchiveConfig
    server: ServerConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls, env_vars: Optional[Mapping[str, str]] = None) -> 'TakoyakiConfig':
        """Build the service configuration from TAKOYAKI_* environment variables"""
        if env_vars is None:
            from dotenv import load_dotenv
            load_dotenv()
        env = env_vars if env_vars is not None else os.environ

        config = cls(
            archive=cls._create_archive_config(env),
            server=cls._create_server_config(env),
            logging=cls._create_logging_config(env),
        )

        logger = TakoyakiLogger.get_logger('core.config')
        log_with_context(logger, logging.INFO, "Configuration loaded",
                         network=config.archive.network,
                         archive_kind=config.archive.kind,
                         url=config.archive.url)

        return config

    @staticmethod
    def _create_archive_config(env: Mapping[str, str]) -> ArchiveConfig:
        network = _get(env, "NETWORK", "solana-mainnet")
        network_meta = NETWORKS.get(network)
        if network_meta is None:
            raise ValueError(f"Unknown network: {network}. Expected one of {sorted(NETWORKS)}")

        kind = _get(env, "ARCHIVE_KIND", "portal").lower()
        if kind not in ARCHIVE_KINDS:
            raise ValueError(f"{ENV_PREFIX}ARCHIVE_KIND must be one of {ARCHIVE_KINDS}, got {kind}")

        timeout = _get_number(env, "HTTP_TIMEOUT", "30", float)
        if timeout <= 0:
            raise ValueError(f"{ENV_PREFIX}HTTP_TIMEOUT must be positive, got {timeout}")

        return ArchiveConfig(
            network=network,
            network_meta=network_meta,
            kind=kind,
            url=_get(env, "ARCHIVE_URL") or None,
            registry_url=_get(env, "REGISTRY_URL", DEFAULT_REGISTRY_URL),
            timeout=timeout,
        )

    @staticmethod
    def _create_server_config(env: Mapping[str, str]) -> ServerConfig:
        port = _get_number(env, "PORT", "8080", int)
        if not 0 < port < 65536:
            raise ValueError(f"{ENV_PREFIX}PORT out of range: {port}")

        return ServerConfig(host=_get(env, "HOST", "0.0.0.0"), port=port)

    @staticmethod
    def _create_logging_config(env: Mapping[str, str]) -> LoggingConfig:
        log_level = _get(env, "LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {LOG_LEVELS}, got {log_level}")

        log_dir = _get(env, "LOG_DIR")
        return LoggingConfig(
            log_level=log_level,
            log_dir=Path(log_dir) if log_dir else None,
        )


def _get(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    return env.get(f"{ENV_PREFIX}{name}", default)


def _get_number(env: Mapping[str, str], name: str, default: str, convert):
    value = _get(env, name, default)
    try:
        return convert(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from None
