"""
Flexora auth backend — application entry point.
"""

from __future__ import annotations

import logging
import pathlib
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from auth.avatars import AvatarStorage
from auth.jwt import TokenService
from auth.routes import router as auth_router
from auth.service import AuthService
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory, init_models

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "multipart", "python_multipart"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around an explicit ``Settings`` instance."""
    settings = settings or get_settings()

    engine = build_engine(settings.database_url)
    tokens = TokenService(settings.jwt_secret, expiry_seconds=settings.jwt_expire)
    upload_root = pathlib.Path(settings.upload_dir).resolve()
    avatars = AvatarStorage(upload_root, max_bytes=settings.avatar_max_bytes)
    avatars.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Creating database tables…")
        await init_models(engine)
        logger.info("Application ready to accept requests.")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Flexora Auth API",
        version="1.0.0",
        description="Registration, login and profile API for the Flexora app.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.auth_service = AuthService(tokens, avatars, bcrypt_rounds=settings.bcrypt_rounds)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app, expose_details=not settings.is_production)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")

    @app.get("/")
    async def root():
        return {"message": "Flexora Backend API is running"}

    app.mount("/uploads", StaticFiles(directory=str(upload_root)), name="uploads")

    return app


if __name__ == "__main__":
    config = get_settings()
    configure_logging(config.debug)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )
