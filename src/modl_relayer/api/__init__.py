"""HTTP surface for the relayer."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..evm import RelayService
from ..exceptions import RelayerError
from . import health, relay

logger = logging.getLogger(__name__)


def create_app(service: RelayService, *, manage_connection: bool = True) -> FastAPI:
    """Build the FastAPI app around an already-constructed ``RelayService``.

    With ``manage_connection`` the service connects on startup and
    disconnects on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manage_connection:
            await service.connect()
        try:
            yield
        finally:
            if manage_connection:
                await service.disconnect()

    app = FastAPI(
        title="MODL Relayer",
        description="Sponsored meta-transaction relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.relay_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(service.config.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RelayerError)
    async def relayer_error_handler(request: Request, exc: RelayerError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log("%s %s failed [%s]: %s", request.method, request.url.path, exc.kind.value, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected failure handling %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Relay error"})

    app.include_router(health.router, tags=["Health"])
    app.include_router(relay.router, tags=["Relay"])
    return app


__all__ = ["create_app"]
