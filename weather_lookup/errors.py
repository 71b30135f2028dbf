from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories a lookup can end in."""

    VALIDATION = "validation"
    NETWORK = "network"
    API = "api"
    NOT_FOUND = "notFound"
    DATA_FORMAT = "dataFormat"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


class WeatherLookupError(Exception):
    """Typed failure raised by every stage of a weather lookup.

    Parameters
    ----------
    message : str
        Human-readable description, safe to show to end users.
    kind : ErrorKind
        Category of the failure.
    status_code : Optional[int]
        Upstream HTTP status when the failure came from a provider response.
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"WeatherLookupError({self.message!r}, kind={self.kind.value!r}, status_code={self.status_code!r})"
