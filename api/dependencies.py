# api/dependencies.py

from fastapi import HTTPException
from typing import Optional
import logging

from takoyaki.service import SubqlApiService
from takoyaki.core.logging import TakoyakiLogger

# Global variables - these get set during app startup
_service: Optional[SubqlApiService] = None
_logger: Optional[logging.Logger] = None


def set_dependencies(service: Optional[SubqlApiService]):
    """Called during app startup to set global dependencies"""
    global _service, _logger
    _service = service
    _logger = TakoyakiLogger.get_logger('api.dependencies')


def get_service() -> SubqlApiService:
    """Dependency to get the subql service"""
    if _service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _service


def get_logger():
    """Dependency to get logger"""
    if _logger is None:
        return TakoyakiLogger.get_logger('api.default')
    return _logger
