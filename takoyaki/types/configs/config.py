# takoyaki/types/configs/config.py

from typing import Optional, Literal
from pathlib import Path

from msgspec import Struct

from .network import NetworkMeta


DEFAULT_REGISTRY_URL = "https://cdn.subsquid.io/archives/solana.json"


class ArchiveConfig(Struct):
    network: str
    network_meta: NetworkMeta
    kind: Literal["portal", "legacy"] = "portal"
    url: Optional[str] = None  # discovered from the registry when unset
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: float = 30.0


class ServerConfig(Struct):
    host: str = "0.0.0.0"
    port: int = 8080


class LoggingConfig(Struct):
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    structured_format: bool = True
