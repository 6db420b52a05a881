"""
Account service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.middleware import register_middleware
from api.profile import router as profile_router
from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory, init_models
from database.user_store import UserStore
from utils.errors import AccountError

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "httpx"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"message": ...}``."""

    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request body"
        if errors:
            loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
            if loc:
                message = f'Field "{".".join(loc)}": {errors[0].get("msg", "invalid")}'
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.debug)

    app = FastAPI(
        title="Account Service",
        version="1.0.0",
        description="Signup, login and profile management with token auth.",
    )

    # Components are wired once here and shared through app.state.
    engine = build_engine(settings.database_url)
    app.state.engine = engine
    app.state.user_store = UserStore(build_session_factory(engine))
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.password_hasher = PasswordHasher(settings.bcrypt_rounds)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)
    app.include_router(profile_router)
    if settings.api_prefix:
        app.include_router(auth_router, prefix=settings.api_prefix)
        app.include_router(profile_router, prefix=settings.api_prefix)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def health() -> str:
        return "Server is running"

    @app.on_event("startup")
    async def on_startup():
        logger.info("Creating tables…")
        await init_models(engine)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()

    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level="debug" if _settings.debug else "info",
    )
