"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.config import Config
from server.middleware import RequestIDMiddleware
from server.routes import health, lookout, search
from tools.web import reset_session_cache
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    config = Config()
    logger.info(
        "FastAPI server starting up",
        extra={"extra_fields": {"provider": config.AI_PROVIDER, "model": config.get_model_info()}},
    )
    if not config.validate():
        logger.warning("AI provider is not fully configured; /v1/lookout will be unavailable")

    yield

    reset_session_cache()
    logger.info("FastAPI server shutting down")


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="Lookout API",
        description="Research lookups: AI-assisted query rewriting and classified web results",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(lookout.router)

    return app
