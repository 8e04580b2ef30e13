# backend/app/services/presentation.py
"""
View models for the list, detail and form screens.

Everything here is a pure function of the site list and a cache snapshot, so
views are simply recomputed whenever either one changes.
"""

from backend.app.core.config import PRECIP_THRESHOLDS, PRECIP_BAR_FULL_SCALE_IN
from backend.app.schemas.site import SiteRead
from backend.app.schemas.weather import WeatherRecord

SORT_KEYS = ("name", "precip", "state")
COMPASS_POINTS = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]

STATUS_PENDING = "pending" # never fetched
STATUS_UNAVAILABLE = "unavailable" # fetch attempted and failed
STATUS_OK = "ok"


def precip_class(precip: float | None) -> str:
    if precip is None:
        return ""
    if precip >= PRECIP_THRESHOLDS["heavy"]:
        return "heavy"
    if precip >= PRECIP_THRESHOLDS["moderate"]:
        return "moderate"
    if precip > PRECIP_THRESHOLDS["light"]:
        return "has-rain"
    return ""


def precip_bar_percent(precip: float | None) -> float:
    if not precip or precip <= 0:
        return 0.0
    return min(precip / PRECIP_BAR_FULL_SCALE_IN * 100, 100.0)


def wind_dir_label(degrees: float | None) -> str:
    if degrees is None:
        return "---"
    # Python rounds halves to even; compass sectors round halves up
    return COMPASS_POINTS[int(degrees / 22.5 + 0.5) % 16]


def weather_status(site_id: str, cache: dict) -> str:
    if site_id not in cache:
        return STATUS_PENDING
    if cache[site_id] is None:
        return STATUS_UNAVAILABLE
    return STATUS_OK


def _precip_of(site_id: str, cache: dict) -> float | None:
    record = cache.get(site_id)
    return record.precip_24hr_in if record is not None else None


def state_filters(sites: list[SiteRead]) -> list[str]:
    return ["all", *sorted({s.state for s in sites})]


def filter_sites(sites: list[SiteRead], state: str | None) -> list[SiteRead]:
    if not state or state.lower() == "all":
        return list(sites)
    return [s for s in sites if s.state == state.upper()]


def sort_sites(sites: list[SiteRead], cache: dict, key: str = "name") -> list[SiteRead]:
    """
    Orders sites by name, by state then name, or by 24-hour precipitation
    (wettest first, sites without a reading last).
    """
    if key == "name":
        return sorted(sites, key=lambda s: s.name.casefold())
    if key == "state":
        return sorted(sites, key=lambda s: (s.state.casefold(), s.name.casefold()))
    if key == "precip":
        def wetness(site):
            precip = _precip_of(site.id, cache)
            return precip if precip is not None else -1
        return sorted(sites, key=wetness, reverse=True)
    raise ValueError(f"Unknown sort key '{key}'")


def summary(sites: list[SiteRead], cache: dict, loading: bool = False) -> str:
    if loading:
        return "Loading sites..."
    count = len(sites)
    text = f"{count} site{'' if count == 1 else 's'}"
    raining = sum(1 for s in sites if (_precip_of(s.id, cache) or 0) > 0)
    if raining > 0:
        return f"{text} · {raining} reporting precipitation"
    if count > 0:
        return f"{text} · No precipitation detected"
    return text


def site_row(site: SiteRead, cache: dict) -> dict:
    precip = _precip_of(site.id, cache)
    return {
        "id": site.id,
        "name": site.name,
        "state": site.state,
        "weather_status": weather_status(site.id, cache),
        "precip_24hr_in": precip,
        "precip_class": precip_class(precip),
        "precip_bar_percent": precip_bar_percent(precip),
    }


def site_detail(site: SiteRead, cache: dict) -> dict:
    record: WeatherRecord | None = cache.get(site.id)
    humidity = record.humidity if record is not None else None
    wind_dir = record.wind_dir if record is not None else None

    view = site_row(site, cache)
    view.update({
        "latitude": site.latitude,
        "longitude": site.longitude,
        "coordinates": f"{site.latitude:.3f}, {site.longitude:.3f}",
        "temp_f": record.temp_f if record is not None else None,
        "humidity": round(humidity) if humidity is not None else None,
        "dew_point_f": record.dew_point_f if record is not None else None,
        "wind_speed_mph": record.wind_speed_mph if record is not None else None,
        "wind_dir": wind_dir,
        "wind_dir_label": (
            f"{wind_dir_label(wind_dir)} ({round(wind_dir)}°)" if wind_dir is not None else "---"
        ),
    })
    return view


def list_view(
    sites: list[SiteRead],
    cache: dict,
    state: str | None = None,
    sort: str = "name",
    loading: bool = False,
) -> dict:
    selected = state.upper() if state and state.lower() != "all" else "all"
    visible = sort_sites(filter_sites(sites, state), cache, sort)
    return {
        "summary": summary(sites, cache, loading),
        "filters": state_filters(sites),
        "selected_filter": selected,
        "sort": sort,
        "rows": [site_row(s, cache) for s in visible],
    }
