# backend/app/services/weather_client.py
import logging

import requests
import tenacity # Retry logic for transient network failures
from pydantic import ValidationError

from backend.app.core.config import (
    OPEN_METEO_API_URL,
    WEATHER_TIMEZONE,
    WEATHER_HOURLY_PARAMS,
    WEATHER_PAST_HOURS,
    WEATHER_FORECAST_HOURS,
    WEATHER_REQUEST_TIMEOUT,
    WEATHER_RETRY_ATTEMPTS,
    WEATHER_RETRY_WAIT_SECONDS,
)
from backend.app.core.exceptions import WeatherFetchError
from backend.app.schemas.weather import WeatherRecord
from backend.app.services.units import (
    celsius_to_fahrenheit,
    kph_to_mph,
    mm_to_inches,
    sum_precipitation_mm,
    last_value,
)

logger = logging.getLogger(__name__)

# --- Tenacity Retry Strategy ---
# Only connection problems are retried. An HTTP error status is an answer from
# the server and is reported straight back as a WeatherFetchError.
retry_strategy = tenacity.retry(
    stop=tenacity.stop_after_attempt(WEATHER_RETRY_ATTEMPTS),
    wait=tenacity.wait_fixed(WEATHER_RETRY_WAIT_SECONDS),
    retry=tenacity.retry_if_exception_type((requests.exceptions.ConnectionError, requests.exceptions.Timeout)),
    reraise=True # Re-raise the last exception if all retries fail
)


def build_forecast_params(latitude: float, longitude: float) -> dict:
    return {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(WEATHER_HOURLY_PARAMS),
        "timezone": WEATHER_TIMEZONE,
        "past_hours": WEATHER_PAST_HOURS,
        "forecast_hours": WEATHER_FORECAST_HOURS,
    }


@retry_strategy
def fetch_raw_forecast(url: str, params: dict) -> requests.Response:
    """
    Issues the forecast GET request with retry logic on connection errors.
    Returns the response whatever its status code.
    """
    logger.debug("Fetching forecast from %s for %s,%s", url, params["latitude"], params["longitude"])
    return requests.get(url, params=params, timeout=WEATHER_REQUEST_TIMEOUT)


def parse_hourly(data: dict) -> WeatherRecord:
    """
    Reduces the hourly series of a forecast response to one WeatherRecord.

    Precipitation is the sum of every returned hour; the other fields take the
    most recent hour. Series that are missing or empty become None.
    """
    hourly = data.get("hourly") or {}
    precip_mm = sum_precipitation_mm(hourly.get("precipitation"))
    return WeatherRecord(
        precip_24hr_in=mm_to_inches(precip_mm),
        temp_f=celsius_to_fahrenheit(last_value(hourly.get("temperature_2m"))),
        humidity=last_value(hourly.get("relative_humidity_2m")),
        dew_point_f=celsius_to_fahrenheit(last_value(hourly.get("dew_point_2m"))),
        wind_speed_mph=kph_to_mph(last_value(hourly.get("wind_speed_10m"))),
        wind_dir=last_value(hourly.get("wind_direction_10m")),
    )


def fetch_site_weather(latitude: float, longitude: float) -> WeatherRecord:
    """
    Fetches the last 24 hours of weather for one location.

    Raises WeatherFetchError on a non-2xx status (carrying the status code),
    when the service cannot be reached after retries, or when the body cannot
    be turned into a WeatherRecord.
    """
    params = build_forecast_params(latitude, longitude)
    try:
        response = fetch_raw_forecast(OPEN_METEO_API_URL, params)
    except requests.exceptions.RequestException as e:
        raise WeatherFetchError(message=f"Weather API unreachable: {e}") from e

    if not 200 <= response.status_code < 300:
        raise WeatherFetchError(response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        raise WeatherFetchError(response.status_code, "Weather API returned invalid JSON") from e

    try:
        return parse_hourly(data)
    except (ValidationError, TypeError) as e:
        raise WeatherFetchError(response.status_code, f"Unexpected weather payload: {e}") from e
