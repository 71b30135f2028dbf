import re
import unicodedata
from typing import Any

from .errors import ErrorKind, WeatherLookupError

# letters in any script plus space, hyphen, straight/typographic apostrophe, period
_LETTERS_ONLY = re.compile(r"(?:[^\W\d_]|[ \-'’.])+")
_LETTERS_AND_DIGITS = re.compile(r"(?:[^\W_]|[ \-'’.])+")


def validate_location(raw: Any, allow_digits: bool = False) -> str:
    """Validate and normalize a user-supplied location query.

    Parameters
    ----------
    raw : Any
        Location as received from the caller.
    allow_digits : bool
        Accept digits in the name (e.g. postal-style queries). Off by default.

    Returns
    -------
    str
        The trimmed location text, NFC-normalized.

    Raises
    ------
    WeatherLookupError
        With kind `validation` for missing, non-text, blank or disallowed input.
    """

    if raw is None or raw == "":
        raise WeatherLookupError("City name is required", ErrorKind.VALIDATION)
    if not isinstance(raw, str):
        raise WeatherLookupError("City name must be text", ErrorKind.VALIDATION)

    location = unicodedata.normalize("NFC", raw.strip())
    if not location:
        raise WeatherLookupError("City name cannot be empty", ErrorKind.VALIDATION)

    pattern = _LETTERS_AND_DIGITS if allow_digits else _LETTERS_ONLY
    # marks with no precomposed form survive NFC; check their base letters
    bases = "".join(ch for ch in location if not unicodedata.category(ch).startswith("M"))
    if not bases or not pattern.fullmatch(bases):
        raise WeatherLookupError("City name contains invalid characters", ErrorKind.VALIDATION)
    return location


def normalize_key(location: str) -> str:
    """Cache key for a location: trimmed and lowercased."""

    return location.strip().lower()
