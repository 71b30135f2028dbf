from typing import Any, Dict

# WMO weather interpretation codes as reported by Open-Meteo
WEATHER_CODES: Dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe(code: Any, unknown_format: str = "Unknown") -> str:
    """Map a weather code to a human-readable description.

    Parameters
    ----------
    code : Any
        Weather code from the provider. Missing or unrecognized values are fine.
    unknown_format : str
        Fallback template, formatted with `code=<value>`.

    Returns
    -------
    str
        The description, or the rendered fallback. Never raises.
    """

    # bool is an int subclass but never a real weather code
    if isinstance(code, int) and not isinstance(code, bool) and code in WEATHER_CODES:
        return WEATHER_CODES[code]
    try:
        return unknown_format.format(code=code)
    except (KeyError, IndexError, ValueError, TypeError, AttributeError):
        return "Unknown"
