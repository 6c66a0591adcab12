# storefront/main.py
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api import ROUTERS
from storefront.data.database import Database
from storefront.domain.errors import StoreError
from storefront.utils.logging import configure_logging, get_logger
from storefront.utils.settings import DATABASE_URL, CORS_ORIGINS

logger = get_logger(__name__)


def create_app(database: Database | None = None, init_db: bool = True) -> FastAPI:
    """
    Builds the API around a Database. Without one, a Database for
    DATABASE_URL is opened at startup and disposed at shutdown.
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = app.state.database
        if init_db:
            db.wait_until_ready()
            db.create_tables()
        logger.info("Storefront API started")
        yield
        db.dispose()
        logger.info("Storefront API stopped")

    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database(DATABASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"ERROR: {request.method} {request.url.path}")
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        client = request.client.host if request.client else "-"
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {duration_ms:.1f}ms - {client}"
        )
        return response

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
