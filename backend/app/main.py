# backend/app/main.py
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.sites import router as sites_router
from backend.app.core.config import LOG_LEVEL
from backend.app.core.exceptions import StoreUnavailableError, SiteNotFoundError
from backend.app.db.session import SessionLocal
from backend.app.services.site_store import SiteRegistry
from backend.app.services.weather_sync import WeatherSyncLoop

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def create_app(registry: SiteRegistry | None = None, sync_loop: WeatherSyncLoop | None = None) -> FastAPI:
    registry = registry or SiteRegistry(session_factory=SessionLocal)
    sync_loop = sync_loop or WeatherSyncLoop()
    registry.subscribe(sync_loop.watch)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await registry.reload() # A non-empty list starts the first sync and the hourly timer
        yield
        if app.state.background_tasks:
            await asyncio.gather(*list(app.state.background_tasks), return_exceptions=True)
        await sync_loop.stop()

    app = FastAPI(title="Precipitation Monitor API", lifespan=lifespan)
    app.state.registry = registry
    app.state.sync_loop = sync_loop
    app.state.background_tasks = set()
    app.include_router(sites_router)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        return JSONResponse(status_code=503, content={"detail": exc.message})

    @app.exception_handler(SiteNotFoundError)
    async def site_not_found_handler(request: Request, exc: SiteNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        return {"message": "Welcome to Precipitation Monitor API"}

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "message": "Precipitation Monitor API is up and running!"}

    return app


configure_logging()
app = create_app()
