"""Download ENCODE object tables from the portal search API."""

import logging
from typing import List, Optional

import pandas as pd
import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from encode_matrix.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

ENCODE_BASE_URL = "https://www.encodeproject.org"
LIST_SEPARATOR = "; "

# JSON-LD bookkeeping that carries no metadata.
_DROPPED_COLUMNS = ["@type", "@context", "audit"]


def to_encode_type(object_type: str) -> str:
    """Convert a table name to the portal's type name (``antibody_lot`` -> ``AntibodyLot``)."""
    return "".join(part.capitalize() for part in object_type.split("_"))


def _flatten_value(value):
    if isinstance(value, list):
        if not value:
            return None
        return LIST_SEPARATOR.join(str(v) for v in value)
    return value


def clean_table(table: pd.DataFrame) -> pd.DataFrame:
    """Make a normalized search result rectangular and flat.

    List values become ``"; "``-joined strings, empty lists become missing,
    columns with no value at all are dropped and ``@id`` becomes ``id``.
    """
    table = table.copy()
    for col in table.columns:
        if table[col].map(lambda v: isinstance(v, list)).any():
            table[col] = table[col].map(_flatten_value)

    table = table.drop(columns=[c for c in _DROPPED_COLUMNS if c in table.columns])
    table = table.dropna(axis=1, how="all")
    if "@id" in table.columns:
        if "id" in table.columns:
            table = table.drop(columns=["@id"])
        else:
            table = table.rename(columns={"@id": "id"})
    return table


class EncodeClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        base_url: str = ENCODE_BASE_URL,
    ):
        self._session = session or requests.Session()
        self._session.headers.update(
            {"User-Agent": "encode-matrix/0.1.0", "Accept": "application/json"}
        )
        # The portal asks clients to stay under 10 requests per second.
        self._limiter = rate_limiter or RateLimiter(10.0)
        self._base_url = base_url.rstrip("/")

    @property
    def search_url(self) -> str:
        return f"{self._base_url}/search/"

    def search(self, object_type: str) -> List[dict]:
        """Return every object of the given type, or [] if none could be fetched."""
        params = {
            "type": to_encode_type(object_type),
            "limit": "all",
            "format": "json",
            "frame": "object",
        }
        resp = self._http_get(self.search_url, params)
        if resp is None:
            return []
        # The portal answers 404 when a search has no results.
        if resp.status_code == 404:
            logger.info("No %s objects found", object_type)
            return []
        try:
            data = resp.json()
        except ValueError:
            logger.warning("Invalid JSON in %s search results", object_type, exc_info=True)
            return []
        graph = data.get("@graph", []) if isinstance(data, dict) else []
        return graph if isinstance(graph, list) else []

    def extract_table(self, object_type: str) -> pd.DataFrame:
        """Fetch and clean the table of one object type."""
        graph = self.search(object_type)
        if not graph:
            return pd.DataFrame()
        table = clean_table(pd.json_normalize(graph))
        logger.debug("Extracted %s: %d rows, %d columns", object_type, *table.shape)
        return table

    def _http_get(self, url: str, params: dict) -> Optional[requests.Response]:
        try:
            return self._http_get_with_retry(url, params)
        except Exception:
            logger.warning("HTTP GET failed: %s", url, exc_info=True)
            return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    )
    def _http_get_with_retry(self, url: str, params: dict) -> requests.Response:
        self._limiter.acquire()
        resp = self._session.get(url, params=params, timeout=300)
        if resp.status_code == 429:
            raise requests.ConnectionError("Rate limited (429)")
        if resp.status_code != 404:
            resp.raise_for_status()
        return resp
