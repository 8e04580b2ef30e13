# backend/app/services/site_store.py
import asyncio
import logging
from typing import Callable

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from backend.app.db.session import SessionLocal
from backend.app.core.exceptions import StoreUnavailableError, SiteNotFoundError
from backend.app.models.site import Site
from backend.app.schemas.site import SiteCreate, SiteUpdate, SiteRead

logger = logging.getLogger(__name__)


# --- CRUD over the sites table ---

def list_sites(db: Session) -> list[SiteRead]:
    try:
        rows = db.query(Site).order_by(Site.created_at, Site.id).all()
    except SQLAlchemyError as e:
        logger.error("Database error while listing sites: %s", e)
        raise StoreUnavailableError() from e
    return [SiteRead.model_validate(row) for row in rows]


def add_site(db: Session, data: SiteCreate) -> str:
    """Persists a new site and returns the ID the store assigned to it."""
    try:
        site = Site(**data.model_dump())
        db.add(site)
        db.commit()
        return site.id
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database error while adding site '%s': %s", data.name, e)
        raise StoreUnavailableError("Failed to save the site. Check your connection settings.") from e


def update_site(db: Session, site_id: str, data: SiteUpdate) -> SiteRead:
    """Writes only the fields set on data. Raises SiteNotFoundError for unknown IDs."""
    try:
        site = db.get(Site, site_id)
        if site is None:
            raise SiteNotFoundError(site_id)
        for key, value in data.changes().items():
            setattr(site, key, value)
        db.commit()
        db.refresh(site)
        return SiteRead.model_validate(site)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database error while updating site %s: %s", site_id, e)
        raise StoreUnavailableError("Failed to update the site. Check your connection settings.") from e


def delete_site(db: Session, site_id: str) -> None:
    """Removes a site. Unknown IDs are ignored. Observations are left in place."""
    try:
        site = db.get(Site, site_id)
        if site is None:
            logger.info("Delete requested for unknown site %s; nothing to do.", site_id)
            return
        db.delete(site)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database error while deleting site %s: %s", site_id, e)
        raise StoreUnavailableError("Failed to delete the site. Check your connection settings.") from e


# --- In-memory view of the site list ---

SitesListener = Callable[[list[SiteRead]], None]


class SiteRegistry:
    """
    Holds the current site list for the presentation layer and the sync loop.

    Every store call runs in a worker thread so the event loop stays free.
    Listeners are called with the new list after each change.
    """

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory
        self._listeners: list[SitesListener] = []
        self.sites: list[SiteRead] = []
        self.loading = False
        self.error: str | None = None

    def subscribe(self, listener: SitesListener) -> None:
        self._listeners.append(listener)

    def get(self, site_id: str) -> SiteRead | None:
        return next((s for s in self.sites if s.id == site_id), None)

    async def reload(self) -> list[SiteRead]:
        """Reloads from the store. A store outage is kept in `error`, never raised."""
        self.loading = True
        self.error = None
        try:
            sites = await asyncio.to_thread(self._run, list_sites)
        except StoreUnavailableError as e:
            self.error = e.message
            logger.error("Site list unavailable: %s", e.message)
            return self.sites
        finally:
            self.loading = False
        self._set(sites)
        return self.sites

    async def add(self, data: SiteCreate) -> SiteRead:
        site_id = await asyncio.to_thread(self._run, add_site, data)
        site = SiteRead(id=site_id, **data.model_dump())
        self._set([*self.sites, site])
        logger.info("Added site %s (%s)", site.name, site.id)
        return site

    async def update(self, site_id: str, data: SiteUpdate) -> SiteRead:
        updated = await asyncio.to_thread(self._run, update_site, site_id, data)
        self._set([updated if s.id == site_id else s for s in self.sites])
        logger.info("Updated site %s", site_id)
        return updated

    async def remove(self, site_id: str) -> None:
        await asyncio.to_thread(self._run, delete_site, site_id)
        self._set([s for s in self.sites if s.id != site_id])
        logger.info("Removed site %s", site_id)

    def _run(self, operation, *args):
        db: Session = self._session_factory()
        try:
            return operation(db, *args)
        finally:
            db.close()

    def _set(self, sites: list[SiteRead]) -> None:
        self.sites = sites
        for listener in self._listeners:
            listener(list(sites))
