# backend/app/core/exceptions.py


class PrecipMonitorError(Exception):
    """Base class for every error raised by the application."""


class StoreUnavailableError(PrecipMonitorError):
    """The site database could not be reached."""

    default_message = "Failed to load sites from the database. Check your connection settings."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SiteNotFoundError(PrecipMonitorError):
    def __init__(self, site_id: str):
        self.site_id = site_id
        super().__init__(f"Site '{site_id}' not found")


class WeatherFetchError(PrecipMonitorError):
    """
    A single site's weather could not be fetched.

    status_code is the HTTP status for non-2xx responses and None for transport
    failures or an unreadable body.
    """

    def __init__(self, status_code: int | None = None, message: str | None = None):
        self.status_code = status_code
        if message is None:
            message = f"Weather API error: {status_code}"
        super().__init__(message)


class ObservationLogError(PrecipMonitorError):
    def __init__(self, site_id: str, message: str = "could not write observation"):
        self.site_id = site_id
        super().__init__(f"{message} for site '{site_id}'")
