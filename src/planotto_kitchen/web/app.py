"""
Planotto assist service - FastAPI application.

One shared httpx connection pool per process, opened and closed by the
lifespan handler. All provider clients borrow it.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planotto import __version__
from planotto.entropy import EntropySource
from planotto.llm.prompt_logger import enable_call_logging
from planotto_kitchen.assist.actions import create_assist_service
from planotto_kitchen.config import KitchenSettings, get_settings
from planotto_kitchen.web.assist_routes import router as assist_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    settings: KitchenSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    entropy: EntropySource | None = None,
) -> FastAPI:
    """
    Build the app.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        transport: httpx transport for every outbound call (tests pass a MockTransport)
        entropy: Seed source for placeholder image URLs
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        logger.info("Planotto assist starting up...")
        logger.info(f"  Environment: {settings.planotto_env}")
        logger.info(f"  Provider call logging: {settings.planotto_log_provider_calls}")
        if settings.planotto_log_provider_calls:
            enable_call_logging(True)

        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.provider_timeout_seconds,
            follow_redirects=True,
        ) as http_client:
            app.state.assist = create_assist_service(
                settings, http_client=http_client, entropy=entropy
            )
            yield

    app = FastAPI(title="Planotto Assist", version=__version__, lifespan=lifespan)

    # CORS for the frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(assist_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
