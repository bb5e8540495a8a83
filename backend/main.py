import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.database import DatabaseManager
from core.logging import setup_logging
from routes.api_v1 import api_v1_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application.

    The DatabaseManager is created once in the lifespan hook and stored on
    ``app.state.db_manager``; request handlers reach it through
    ``core.dependencies.get_db_session``.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        manager = DatabaseManager(settings.database_url)
        await manager.init()
        await manager.create_schema()
        app.state.db_manager = manager
        logger.info("Application startup complete (env=%s)", settings.env)
        try:
            yield
        finally:
            await manager.dispose()
            app.state.db_manager = None
            logger.info("Application shutdown complete")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    # CORS: defined here only, before any routers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed ids, out-of-range ratings and missing fields are 400s.

        The offending input is not echoed back: NaN and infinities are not
        valid JSON.
        """
        errors = [
            {k: v for k, v in err.items() if k not in ("input", "ctx")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(api_v1_router)

    @app.get("/health")
    async def health() -> dict:
        """Simple health check endpoint."""
        return {"status": "ok"}

    logger.info("CORS allow_origins=%s", settings.cors_allowed_origins)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
