from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import router
from app.routing import AccessGateMiddleware
from logging_config import configure_logging
from settings import Settings, get_settings
from storage.sql_gateway import SqlGateway, build_default_gateway


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if app.state.gateway is not None:
        yield
        return

    app.state.gateway = build_default_gateway(app.state.settings.database_path)
    try:
        yield
    finally:
        app.state.gateway.close()
        app.state.gateway = None
        build_default_gateway.cache_clear()


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)
    return await http_exception_handler(request, exc)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[SqlGateway] = None,
) -> FastAPI:
    configure_logging()
    settings = settings or get_settings()
    app = FastAPI(
        title="Birdroom Climate",
        description="Ingestion and query service for per-room temperature and humidity readings.",
        version="0.1.0",
        lifespan=lifespan,
        redirect_slashes=False,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.add_middleware(AccessGateMiddleware, settings=settings)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.include_router(router)
    return app

app = create_app()
