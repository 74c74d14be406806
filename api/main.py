# api/main.py

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from takoyaki import create_service
from takoyaki.service import SubqlApiService
from takoyaki.core.logging import TakoyakiLogger, log_with_context

from .routers import rpc
from .dependencies import set_dependencies, get_service


def create_app(service: Optional[SubqlApiService] = None) -> FastAPI:
    """Build the API. Without a service one is created from the environment on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = TakoyakiLogger.get_logger('api.main')
        owned = service is None

        # Startup
        try:
            active = service or await create_service()
        except Exception as e:
            log_with_context(logger, logging.ERROR, "Failed to initialize API", error=str(e))
            raise

        set_dependencies(active)
        log_with_context(logger, logging.INFO, "API startup completed",
                         archive_client=type(active.client).__name__)

        # Application runs here
        yield

        # Shutdown
        logger.info("API shutting down")
        set_dependencies(None)
        if owned and hasattr(active.client, "aclose"):
            await active.client.aclose()

    app = FastAPI(
        title="Takoyaki",
        description="Subql block filtering RPC on top of the SQD Solana archive",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(rpc.router, tags=["rpc"])

    @app.get("/health")
    async def health_check():
        try:
            get_service()
            ready = True
        except HTTPException:
            ready = False
        return {
            "status": "healthy",
            "message": "Takoyaki RPC is running",
            "service_ready": ready,
        }

    return app


app = create_app()
