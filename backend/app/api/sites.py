# backend/app/api/sites.py
import asyncio
import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Request, Response, status

from backend.app.schemas.site import SiteCreate, SiteUpdate
from backend.app.services import presentation
from backend.app.services.site_store import SiteRegistry
from backend.app.services.weather_sync import WeatherSyncLoop

logger = logging.getLogger(__name__)

router = APIRouter()


def _registry(request: Request) -> SiteRegistry:
    return request.app.state.registry


def _sync_loop(request: Request) -> WeatherSyncLoop:
    return request.app.state.sync_loop


@router.get("/sites")
async def list_sites(
    request: Request,
    state: str | None = None,
    sort: Literal["name", "precip", "state"] = "name",
):
    registry = _registry(request)
    snapshot = _sync_loop(request).snapshot()
    view = presentation.list_view(
        registry.sites, snapshot.cache, state=state, sort=sort, loading=registry.loading,
    )
    view.update({
        "loading": registry.loading,
        "error": registry.error,
        "fetching": snapshot.fetching,
        "last_updated": snapshot.last_updated,
    })
    return view


@router.get("/sites/{site_id}")
async def get_site(site_id: str, request: Request):
    site = _registry(request).get(site_id)
    if site is None:
        raise HTTPException(status_code=404, detail=f"Site '{site_id}' not found")
    return presentation.site_detail(site, _sync_loop(request).snapshot().cache)


@router.post("/sites", status_code=status.HTTP_201_CREATED)
async def create_site(data: SiteCreate, request: Request):
    site = await _registry(request).add(data)
    return site.model_dump()


@router.patch("/sites/{site_id}")
async def edit_site(site_id: str, data: SiteUpdate, request: Request):
    site = await _registry(request).update(site_id, data)
    return site.model_dump()


@router.delete("/sites/{site_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_site(site_id: str, request: Request):
    await _registry(request).remove(site_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/refresh", status_code=status.HTTP_202_ACCEPTED)
async def refresh(request: Request):
    """Reloads the site list and starts a weather sync in the background."""
    registry = _registry(request)
    sync_loop = _sync_loop(request)
    await registry.reload()
    task = asyncio.create_task(sync_loop.refresh())
    request.app.state.background_tasks.add(task)
    task.add_done_callback(request.app.state.background_tasks.discard)
    return {"error": registry.error, "sites": len(registry.sites)}


@router.get("/weather")
async def weather(request: Request):
    return _sync_loop(request).snapshot().model_dump()
