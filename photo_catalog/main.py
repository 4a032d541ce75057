"""Photo Catalog - FastAPI Entry Point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .application.services import AccessService, CatalogService
from .config import SESSION_MAX_AGE, configure_logging
from .infrastructure.sessions import SessionStore
from .infrastructure.storage import StorageError, StoreConfig, create_store, get_store_config
from .middleware import AuthMiddleware

# Import routers
from .routes.auth import router as auth_router
from .routes.photos import router as photos_router
from .routes.albums import router as albums_router

logger = logging.getLogger(__name__)


async def storage_error_handler(request: Request, exc: StorageError):
    """Answer storage failures with 503 and the specific cause."""
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": f"Storage error: {exc}"})


def create_app(store_config: StoreConfig = None) -> FastAPI:
    """Build the application.

    The store is created and opened in the lifespan handler and injected
    into the services; it is closed on shutdown.

    Args:
        store_config: Storage configuration (default: from environment)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup: clean up expired sessions, open storage and wire services
        app.state.sessions.cleanup_expired()
        store = create_store(store_config or get_store_config())
        await store.open()
        access_service = AccessService(store)
        app.state.store = store
        app.state.access_service = access_service
        app.state.catalog_service = CatalogService(store, access_service)
        try:
            yield
        finally:
            # Shutdown
            await store.close()

    app = FastAPI(title="Photo Catalog", lifespan=lifespan)
    app.state.sessions = SessionStore(SESSION_MAX_AGE)

    app.add_middleware(AuthMiddleware)
    app.add_exception_handler(StorageError, storage_error_handler)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Include routers
    app.include_router(auth_router)
    app.include_router(photos_router)
    app.include_router(albums_router)

    return app


app = create_app()


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run("photo_catalog.main:app", host="127.0.0.1", port=8000)
