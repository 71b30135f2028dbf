import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import ErrorKind, WeatherLookupError

logger = logging.getLogger(__name__)


async def fetch_with_timeout(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 8.0,
) -> httpx.Response:
    """Perform a GET request bounded by a deadline.

    Parameters
    ----------
    client : httpx.AsyncClient
        Client used to issue the request.
    url : str
        Fully qualified URL to fetch.
    params : Optional[Dict[str, Any]]
        Query parameters, URL-encoded by httpx.
    timeout : float
        Deadline in seconds for the whole call.

    Returns
    -------
    httpx.Response
        The raw response. Status codes are not interpreted here.

    Raises
    ------
    WeatherLookupError
        With kind `timeout` when the deadline elapses; the in-flight request is cancelled.
    httpx.RequestError
        For any other transport-level failure (DNS, refused connection, ...).
    """

    logger.debug(f"GET {url} params={params}")
    try:
        return await asyncio.wait_for(client.get(url, params=params, timeout=timeout), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise WeatherLookupError(
            f"Request timed out after {timeout:g} seconds", ErrorKind.TIMEOUT
        ) from exc
