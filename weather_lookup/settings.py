from pydantic import BaseModel


class Settings(BaseModel):
    """Immutable runtime configuration for the weather lookup service.

    Notes
    -----
    - The app module builds its service from the module-level `settings`;
      tests and embedders pass their own `Settings` to `WeatherService`.
    - Durations are expressed in seconds.
    - `unknown_code_format` is a `str.format` template receiving `code`, e.g.
      `"Unknown (code: {code})"`.
    """

    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    cache_ttl_weather: int = 10 * 60  # 10 minutes
    min_request_interval: float = 1.0  # global spacing between outbound lookups
    request_timeout: float = 8.0  # per network call
    allow_digits: bool = False
    unknown_code_format: str = "Unknown"
    max_compare_cities: int = 3
    log_level: str = "INFO"


settings = Settings()
