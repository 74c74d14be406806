# takoyaki/types/configs/__init__.py

from .network import NetworkMeta, MAINNET, ECLIPSE_MAINNET, NETWORKS
from .config import ArchiveConfig, ServerConfig, LoggingConfig, DEFAULT_REGISTRY_URL
