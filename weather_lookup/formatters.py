from datetime import datetime, timezone
from math import floor
from typing import Any, Dict, Optional

from .codes import describe
from .schemas import WeatherReading

DEFAULT_TEMPERATURE_UNIT = "°C"
DEFAULT_WIND_SPEED_UNIT = "km/h"


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _unit(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _code(value: Any) -> Optional[int]:
    number = _number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def format_reading(
    payload: Dict[str, Any],
    location: str,
    unknown_format: str = "Unknown",
    now: Optional[datetime] = None,
) -> WeatherReading:
    """Convert a raw forecast payload into a `WeatherReading`.

    Parameters
    ----------
    payload : Dict[str, Any]
        Forecast response containing a `current` object and, optionally, `current_units`.
    location : str
        Validated location text used as the reading's `city`.
    unknown_format : str
        Fallback template for unrecognized weather codes.
    now : Optional[datetime]
        Formatting instant; defaults to the current UTC time.

    Returns
    -------
    WeatherReading
        Missing or non-numeric fields become `None`; missing or non-text units fall back to
        `°C` and `km/h`.
    """

    current = payload.get("current")
    if not isinstance(current, dict):
        current = {}
    units = payload.get("current_units")
    if not isinstance(units, dict):
        units = {}

    code = _code(current.get("weather_code"))
    stamp = now or datetime.now(timezone.utc)
    return WeatherReading(
        city=location,
        temperature=_number(current.get("temperature_2m")),
        temperatureUnit=_unit(units.get("temperature_2m"), DEFAULT_TEMPERATURE_UNIT),
        description=describe(code, unknown_format),
        weatherCode=code,
        windSpeed=_number(current.get("wind_speed_10m")),
        windSpeedUnit=_unit(units.get("wind_speed_10m"), DEFAULT_WIND_SPEED_UNIT),
        timestamp=stamp.isoformat(),
    )


def capitalize_words(text: Optional[str]) -> str:
    """Capitalize the first letter of each space-separated word, lowercasing the rest."""

    if not text:
        return ""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def format_temperature(value: Optional[float], unit: str = DEFAULT_TEMPERATURE_UNIT) -> str:
    if value is None:
        return "N/A"
    # half up: 2.5 -> 3, -2.5 -> -2
    return f"{int(floor(value + 0.5))}{unit}"


def format_wind(value: Optional[float], unit: str = DEFAULT_WIND_SPEED_UNIT) -> str:
    if value is None:
        return "N/A"
    return f"{value:g} {unit or DEFAULT_WIND_SPEED_UNIT}"
