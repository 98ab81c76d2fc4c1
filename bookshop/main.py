# bookshop/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .catalog import catalog_router
from .catalog.service import CatalogService
from .config import Settings, load_settings
from .errors import StorageCorruptionError
from .storage import CatalogStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. The store is opened when the app starts, not on import."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A corrupted catalogue raises here and aborts startup.
        store = CatalogStore(settings.catalog_path)
        app.state.catalog_service = CatalogService(store)
        logger.info("Catalogue service ready (%s)", settings.catalog_path)
        yield

    app = FastAPI(
        title="Tienda de libros",
        description="Catálogo de libros persistido en un fichero JSON.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.exception_handler(StorageCorruptionError)
    async def _storage_corrupted(request: Request, exc: StorageCorruptionError):
        logger.error("Refusing %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Catalogue storage is corrupted"})

    # Health check
    @app.get("/")
    def health_check():
        return {"status": "ok"}

    app.include_router(catalog_router)
    return app


app = create_app()
