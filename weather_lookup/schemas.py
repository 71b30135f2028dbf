from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from .errors import ErrorKind, WeatherLookupError


class Coordinate(BaseModel):
    latitude: float
    longitude: float


class WeatherReading(BaseModel):
    """Formatted current conditions for one location.

    Notes
    -----
    - `city` is the validated query text, not the name returned by geocoding.
    - `timestamp` is the instant the reading was formatted (UTC, ISO 8601).
    - Instances are frozen; cached readings are shared safely between callers.
    """

    model_config = ConfigDict(frozen=True)

    city: str
    temperature: Optional[float] = None
    temperatureUnit: str
    description: str
    weatherCode: Optional[int] = None
    windSpeed: Optional[float] = None
    windSpeedUnit: str
    timestamp: str


class ErrorDetail(BaseModel):
    message: str
    kind: ErrorKind
    statusCode: Optional[int] = None

    @classmethod
    def from_error(cls, error: WeatherLookupError) -> "ErrorDetail":
        return cls(message=error.message, kind=error.kind, statusCode=error.status_code)


class LookupResult(BaseModel):
    """Outcome of a single lookup: exactly one of `reading` or `error` is set."""

    reading: Optional[WeatherReading] = None
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ComparisonResult(BaseModel):
    """Per-index outcomes of a comparison run. Skipped (blank) indexes appear in neither map."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    results: Dict[int, WeatherReading] = {}
    errors: Dict[int, WeatherLookupError] = {}


class DisplayBlock(BaseModel):
    city: str
    temperature: str
    wind: str


class WeatherResponse(WeatherReading):
    display: DisplayBlock


class ComparisonResponse(BaseModel):
    results: Dict[int, WeatherResponse]
    errors: Dict[int, ErrorDetail]
