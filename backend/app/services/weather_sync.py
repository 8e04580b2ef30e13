# backend/app/services/weather_sync.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from backend.app.core.config import FETCH_DELAY_SECONDS, REFRESH_INTERVAL_SECONDS
from backend.app.core.exceptions import WeatherFetchError
from backend.app.schemas.site import SiteRead
from backend.app.schemas.weather import WeatherRecord, WeatherSnapshot
from backend.app.services.weather_client import fetch_site_weather
from backend.app.services.observation_logger import log_observation

logger = logging.getLogger(__name__)

WeatherFetcher = Callable[[float, float], WeatherRecord]
ObservationWriter = Callable[[str, WeatherRecord], object]


def _site_key(sites: list[SiteRead]) -> tuple:
    # Only identity and position decide whether the weather needs refetching
    return tuple((s.id, s.latitude, s.longitude) for s in sites)


class WeatherSyncLoop:
    """
    Keeps a weather cache in step with the monitored site list.

    A cycle fetches every site one after another with a fixed pause between
    requests, then merges all results into the cache at once. A failed site is
    stored as None so it is told apart from a site never fetched (missing key).
    Only one cycle runs at a time; requests arriving meanwhile are folded into
    a single follow-up cycle over the most recent site list.
    """

    def __init__(
        self,
        fetch_weather: WeatherFetcher = fetch_site_weather,
        write_observation: ObservationWriter = log_observation,
        fetch_delay: float = FETCH_DELAY_SECONDS,
        refresh_interval: float = REFRESH_INTERVAL_SECONDS,
    ):
        self._fetch_weather = fetch_weather
        self._write_observation = write_observation
        self.fetch_delay = fetch_delay
        self.refresh_interval = refresh_interval

        self.cache: dict[str, WeatherRecord | None] = {}
        self.fetching = False
        self.last_updated: datetime | None = None

        self._sites: list[SiteRead] = []
        self._watched_key: tuple = ()
        self._pending: list[SiteRead] | None = None
        self._timer: asyncio.Task | None = None
        self._cycle_tasks: set[asyncio.Task] = set()
        self._log_tasks: set[asyncio.Task] = set()

    # Public API ---------------------------------------------------------
    def snapshot(self) -> WeatherSnapshot:
        return WeatherSnapshot(cache=dict(self.cache), fetching=self.fetching, last_updated=self.last_updated)

    async def sync(self, sites: list[SiteRead]) -> None:
        """Runs one sync cycle, or queues one if a cycle is already in flight."""
        if not sites:
            return
        if self.fetching:
            logger.info("Sync already in progress; queued a follow-up cycle for %d sites.", len(sites))
            self._pending = list(sites)
            return

        self.fetching = True
        try:
            batch = list(sites)
            while batch:
                await self._run_cycle(batch)
                batch, self._pending = self._pending, None
        finally:
            self.fetching = False

    async def refresh(self) -> None:
        await self.sync(self._sites)

    def watch(self, sites: list[SiteRead]) -> None:
        """
        Site list change hook. Must be called from the running event loop.

        An empty list stops the recurring timer. A changed, non-empty list
        starts a sync straight away and restarts the hourly timer.
        """
        self._sites = list(sites)
        if not self._sites:
            self._watched_key = ()
            self._pending = None
            self._cancel_timer()
            return

        key = _site_key(self._sites)
        if key == self._watched_key:
            return
        self._watched_key = key

        self._start_cycle(self._sites)
        self._cancel_timer()
        self._timer = asyncio.create_task(self._tick())

    @property
    def timer_running(self) -> bool:
        return self._timer is not None

    async def stop(self) -> None:
        """Cancels the recurring timer, then lets in-flight cycles and observation writes finish."""
        self._pending = None
        timer = self._timer
        self._cancel_timer()
        if timer is not None:
            await asyncio.gather(timer, return_exceptions=True)
        await self.wait_idle()
        await self.drain()

    async def wait_idle(self) -> None:
        while self._cycle_tasks:
            await asyncio.gather(*list(self._cycle_tasks), return_exceptions=True)

    async def drain(self) -> None:
        while self._log_tasks:
            await asyncio.gather(*list(self._log_tasks), return_exceptions=True)

    # Helpers ------------------------------------------------------------
    async def _run_cycle(self, sites: list[SiteRead]) -> None:
        logger.info("Fetching weather for %d sites...", len(sites))
        results: dict[str, WeatherRecord | None] = {}
        for i, site in enumerate(sites):
            try:
                record = await asyncio.to_thread(self._fetch_weather, site.latitude, site.longitude)
                results[site.id] = record
                self._log_detached(site.id, record)
            except WeatherFetchError as e:
                logger.error("Failed to fetch weather for %s: %s", site.name, e)
                results[site.id] = None
            except Exception:
                logger.exception("Unexpected error fetching weather for %s", site.name)
                results[site.id] = None

            if i < len(sites) - 1:
                await asyncio.sleep(self.fetch_delay)

        self.cache.update(results)
        self.last_updated = datetime.now(timezone.utc)
        failed = sum(1 for r in results.values() if r is None)
        logger.info("Weather sync complete: %d ok, %d failed.", len(results) - failed, failed)

    def _log_detached(self, site_id: str, record: WeatherRecord) -> None:
        task = asyncio.create_task(asyncio.to_thread(self._write_observation, site_id, record))
        self._log_tasks.add(task)
        task.add_done_callback(self._log_done)

    def _log_done(self, task: asyncio.Task) -> None:
        self._log_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Observation write failed: %s", exc)

    def _start_cycle(self, sites: list[SiteRead]) -> None:
        task = asyncio.create_task(self.sync(sites))
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)

    async def _tick(self) -> None:
        # The timer only schedules cycles, so cancelling it never interrupts a fetch
        while True:
            await asyncio.sleep(self.refresh_interval)
            self._start_cycle(self._sites)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
