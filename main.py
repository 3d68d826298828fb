import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from xclone.api.v1 import auth, user
from xclone.core.config import Settings, get_settings
from xclone.core.exceptions import AppError, AuthError
from xclone.core.logging import setup_logging
from xclone.db.session import SessionLocal, build_engine, ensure_database, init_db
from xclone.routers import follow, like, post

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.app_env)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s (env=%s)", settings.app_name, settings.app_env)
        ensure_database(settings)
        engine = build_engine(settings)
        init_db(engine)
        SessionLocal.configure(bind=engine)
        logger.debug("Successfully connected to the database")
        yield
        engine.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # unmatched routes; handlers report missing records through NotFoundError
        if exc.status_code == 404:
            return PlainTextResponse("Page not found", status_code=404)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

    # Literal prefixes first: "/{username}" routes would otherwise swallow them
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(user.settings_router, prefix="/settings", tags=["Settings"])
    app.include_router(post.router, tags=["Posts"])
    app.include_router(like.router, tags=["Likes"])
    app.include_router(follow.router, tags=["Follows"])
    app.include_router(user.router, tags=["Users"])

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    logger.info("The server is running on address: %s:%s", settings.server_host, settings.server_port)
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port)
