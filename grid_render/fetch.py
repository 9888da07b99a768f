"""
Paginated download of the US transmission line layer.

Pages are requested in OBJECTID order until a short page comes back or the
offset runs past the hard cap. Any failure aborts the whole download; there is
no partial result and no retry.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable

from grid_render.voltage import annotate_rank

logger = logging.getLogger(__name__)

ARCGIS_QUERY_BASE = (
    "https://services2.arcgis.com/FiaPA4ga0iQKduv3/arcgis/rest/services/"
    "US_Electric_Power_Transmission_Lines/FeatureServer/0/query"
)
OUT_FIELDS = "OBJECTID,VOLT_CLASS,TYPE,STATUS,OWNER"
PAGE_SIZE = 2000
# The layer has roughly 95k segments; stop well past that if paging misbehaves.
MAX_OFFSET = 200_000
DEFAULT_TIMEOUT = 30.0

Opener = Callable[..., object]


class FetchError(RuntimeError):
    """The FeatureServer could not be reached or answered with an error."""


def query_url(offset: int, page_size: int = PAGE_SIZE) -> str:
    params = {
        "where": "1=1",
        "outFields": OUT_FIELDS,
        "returnGeometry": "true",
        "f": "geojson",
        "outSR": "4326",
        "resultOffset": str(offset),
        "resultRecordCount": str(page_size),
        "orderByFields": "OBJECTID",
    }
    return f"{ARCGIS_QUERY_BASE}?{urllib.parse.urlencode(params)}"


def fetch_page(url: str, timeout: float, opener: Opener = urllib.request.urlopen) -> list[dict]:
    try:
        with opener(url, timeout=timeout) as resp:
            payload = resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        try:
            body = exc.read().decode("utf-8", errors="replace")
        except (OSError, http.client.HTTPException):
            body = ""
        raise FetchError(f"ArcGIS request failed ({exc.code}) {body[:200]}") from exc
    except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError) as exc:
        raise FetchError(f"ArcGIS request failed ({exc.__class__.__name__}: {exc})") from exc

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise FetchError("ArcGIS returned malformed JSON") from exc
    if not isinstance(data, dict):
        raise FetchError("ArcGIS returned an unexpected payload")
    # FeatureServer reports query errors with a 200 status and an error object
    if "error" in data:
        error = data["error"] if isinstance(data["error"], dict) else {}
        raise FetchError(f"ArcGIS request failed ({error.get('code')}) {str(error.get('message', ''))[:200]}")
    return list(data.get("features") or [])


def fetch_all_transmission_lines(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    page_size: int = PAGE_SIZE,
    max_offset: int = MAX_OFFSET,
    opener: Opener = urllib.request.urlopen,
) -> dict:
    """
    Download every segment and return one GeoJSON FeatureCollection.

    Each feature gets `properties.voltage_rank` on the way in.
    """
    offset = 0
    collected: list[dict] = []

    while True:
        features = fetch_page(query_url(offset, page_size), timeout, opener=opener)
        for feature in features:
            annotate_rank(feature)
        collected.extend(features)
        logger.debug("Fetched %d features at offset %d", len(features), offset)

        if len(features) < page_size or offset > max_offset:
            break
        offset += page_size

    return {"type": "FeatureCollection", "features": collected}
