from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from typing import Optional
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from config import Settings, settings as default_settings
from database.store import JokebookStore, build_store
from routes import jokebook, health
from middleware.error_handler import (
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from utils.logging import setup_logging, get_logger, log_request

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Settings = app.state.settings
    logger.info(f"Starting up {config.APP_NAME}...")

    try:
        await app.state.store.initialize()
        health_data = await app.state.store.health_check()
        if health_data.get("status") == "healthy":
            logger.info("Store is healthy", extra={"backend": health_data.get("backend")})
        else:
            logger.warning(f"Store health check failed: {health_data}")
    except Exception as e:
        logger.error(f"Failed to initialize store: {str(e)}")
        raise

    yield

    logger.info(f"Shutting down {config.APP_NAME}...")
    try:
        await app.state.store.close()
        logger.info("Store connections cleaned up successfully")
    except Exception as e:
        logger.error(f"Error during store cleanup: {str(e)}")


def create_app(config: Optional[Settings] = None, store: Optional[JokebookStore] = None) -> FastAPI:
    """Build the API. ``store`` replaces the one picked from ``STORE_BACKEND``."""
    config = config or default_settings
    setup_logging(config)

    app = FastAPI(
        title=config.APP_NAME,
        description="Jokebook: categories, jokes and a random joke",
        version=config.APP_VERSION,
        lifespan=lifespan
    )
    app.state.settings = config
    app.state.store = store or build_store(config)

    # Add exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_request)

    # Include routers
    app.include_router(jokebook.router, prefix=config.API_PREFIX)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {config.APP_NAME}"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
