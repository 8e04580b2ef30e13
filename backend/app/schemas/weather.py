# backend/app/schemas/weather.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WeatherRecord(BaseModel):
    """Normalized weather for one site, already in display units."""

    model_config = ConfigDict(frozen=True)

    precip_24hr_in: float = Field(..., ge=0) # 24-hour cumulative precipitation, inches
    temp_f: float | None = None
    humidity: float | None = None # Relative humidity, percent
    dew_point_f: float | None = None
    wind_speed_mph: float | None = None
    wind_dir: float | None = Field(None, ge=0, le=360) # Degrees


class WeatherSnapshot(BaseModel):
    """Read-only view of the sync loop state handed to the presentation layer."""

    # A key mapped to None means the fetch was attempted and failed;
    # a missing key means the site has not been fetched yet.
    cache: dict[str, WeatherRecord | None]
    fetching: bool
    last_updated: datetime | None = None
