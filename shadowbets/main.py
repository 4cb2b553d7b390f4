"""
Shadow Bets application entry point.
FastAPI service that a game client renders from: one player profile,
five wager games against a cosmetic bot.
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# Add parent directory to path so imports work when running directly
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from shadowbets.config import AppConfig, settings
from shadowbets.core.casino import Casino, build_gateway
from shadowbets.core.logger import get_logger, init_logging
from shadowbets.core.scheduler import AsyncScheduler
from shadowbets.routers import api

logger = get_logger("main")


# ==================== Application Setup ====================

def create_app(casino: Optional[Casino] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Without an explicit casino, the profile is restored from the configured
    store when the app starts and the APScheduler-backed scheduler drives
    the games' delayed steps.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.casino is None:
            app.state.casino = Casino(build_gateway(config), AsyncScheduler(), config=config)
        current = app.state.casino
        current.scheduler.start()
        logger.info(f"Balance on startup: {current.wallet.balance}")
        try:
            yield
        finally:
            current.shutdown()
            current.scheduler.shutdown()

    app = FastAPI(
        title=config.server.name,
        docs_url="/docs" if config.server.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.casino = casino

    # CORS for a locally served game client during development
    if config.server.debug:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api.router, prefix="/api")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unhandled exceptions gracefully."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if config.server.debug else None,
            },
        )

    return app


init_logging(
    level=settings.logging.level,
    log_to_file=settings.logging.log_to_file,
    formatter=settings.logging.formatter,
    log_file_path=settings.paths.get_log_path(),
)

app = create_app()

logger.info(f"Application '{settings.server.name}' initialized")


# ==================== Main Entry Point ====================

if __name__ == "__main__":
    logger.info(f"Starting server on {settings.server.host}:{settings.server.port}")
    uvicorn.run(
        "shadowbets.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.debug,
    )
