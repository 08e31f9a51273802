"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, shipping
from .config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Drain pending calculation-log writes before the process exits
    if shipping.get_calculation_logger.cache_info().currsize:
        logging.info("Flushing pending shipping calculation logs")
        shipping.get_calculation_logger().shutdown(wait=True)
        shipping.get_calculation_logger.cache_clear()


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, root_path="", lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(shipping.router, prefix=settings.api_prefix)
    return app


app = create_app()
