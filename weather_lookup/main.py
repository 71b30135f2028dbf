import logging
from typing import List

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .errors import ErrorKind, WeatherLookupError
from .formatters import capitalize_words, format_temperature, format_wind
from .schemas import ComparisonResponse, DisplayBlock, ErrorDetail, WeatherReading, WeatherResponse
from .service import WeatherService
from .settings import settings

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Weather Lookup API", version="1.0.0")
service = WeatherService(settings)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.API: 502,
    ErrorKind.NETWORK: 502,
    ErrorKind.DATA_FORMAT: 502,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.UNEXPECTED: 500,
}


@app.exception_handler(WeatherLookupError)
async def weather_lookup_error_handler(request: Request, exc: WeatherLookupError):
    """Translate a typed lookup failure into a JSON error response.

    Returns
    -------
    JSONResponse
        `{"detail": <message>, "kind": <kind>}` with a status derived from the kind.
    """

    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
        content={"detail": exc.message, "kind": exc.kind.value},
    )


def _with_display(reading: WeatherReading) -> WeatherResponse:
    display = DisplayBlock(
        city=capitalize_words(reading.city),
        temperature=format_temperature(reading.temperature, reading.temperatureUnit),
        wind=format_wind(reading.windSpeed, reading.windSpeedUnit),
    )
    return WeatherResponse(**reading.model_dump(), display=display)


@app.get("/health")
async def health():
    """Liveness probe for the service.

    Returns
    -------
    dict
        A fixed payload `{"status": "ok"}` used by orchestrators and uptime checks.
    """

    return {"status": "ok"}


@app.get("/v1/weather", response_model=WeatherResponse)
async def current_weather(city: str = Query(..., description="City name, e.g. 'London' or 'St. Petersburg'")):
    """Return current conditions for a single city.

    Parameters
    ----------
    city : str
        City name. Leading and trailing whitespace is ignored; lookups are
        case-insensitive for caching purposes.

    Returns
    -------
    WeatherResponse
        The formatted reading plus a `display` block with ready-to-render strings.

    Raises
    ------
    WeatherLookupError
        Converted to 400/404/502/504/500 by the registered exception handler.

    Examples
    --------
    - `GET /v1/weather?city=London`
    """

    reading = await service.lookup(city)
    return _with_display(reading)


@app.get("/v1/weather/compare", response_model=ComparisonResponse)
async def compare_weather(city: List[str] = Query(..., description="Repeat for each city to compare")):
    """Return current conditions for several cities side by side.

    Parameters
    ----------
    city : List[str]
        City names, in display order. Blank entries are skipped but keep their slot.

    Returns
    -------
    ComparisonResponse
        `results` and `errors` keyed by the index of the city in the request.

    Raises
    ------
    HTTPException
        400 if more than `max_compare_cities` cities are requested.

    Notes
    -----
    - Lookups run concurrently but share one rate limiter, so uncached cities
      are fetched at most one per `min_request_interval`.
    """

    if len(city) > settings.max_compare_cities:
        raise HTTPException(
            status_code=400, detail=f"At most {settings.max_compare_cities} cities can be compared"
        )
    comparison = await service.compare_all(city)
    return ComparisonResponse(
        results={index: _with_display(reading) for index, reading in comparison.results.items()},
        errors={index: ErrorDetail.from_error(error) for index, error in comparison.errors.items()},
    )
