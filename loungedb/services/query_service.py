"""Airport lookups joining directory metadata with stored airport records.

Every query returns ``{"cities": [...], "count": N, "airports": [...]}``.
Payloads are read through ``PayloadCache``. A search drops airports that
have never been crawled, along with their cities, so ``count`` and
``cities`` describe the returned records; ``get_by_code`` reports the
missing payload as ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from loungedb.config import get_settings

from .airport_directory import AirportDirectory, AirportRef, load_default_directory
from .cache import PayloadCache
from .crawl.store import StoreLayout
from .errors import AirportNotFound

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 50.0


def _distinct_cities(refs: List[AirportRef]) -> List[str]:
    seen: Dict[str, None] = {}
    for a in refs:
        if a.city and a.city not in seen:
            seen[a.city] = None
    return list(seen)


class AirportQueryService:
    def __init__(self, directory: AirportDirectory, cache: PayloadCache) -> None:
        self.directory = directory
        self.cache = cache

    def get_by_code(self, code: str) -> Dict[str, Any]:
        iata = (code or "").strip().upper()
        ref = self.directory.get(iata) if len(iata) == 3 else None
        if ref is None:
            raise AirportNotFound(iata)
        payload = self.cache.get(ref.code)
        if payload is None:
            logger.info("Airport %s is known but has no stored record", ref.code)
        return {"cities": [ref.city], "count": 1, "airports": [payload]}

    def search_by_name(self, name: str) -> Dict[str, Any]:
        return self._collect(self.directory.search_name(name))

    def search_by_country(self, country_code: str) -> Dict[str, Any]:
        return self._collect(self.directory.search_country(country_code))

    def search_by_position(self, lat: float, lon: float, radius_km: Optional[float] = None) -> Dict[str, Any]:
        # Only a missing or zero radius means "default"; a negative one matches nothing
        radius = DEFAULT_RADIUS_KM if not radius_km else float(radius_km)
        return self._collect(self.directory.nearby(lat, lon, radius))

    def _collect(self, refs: List[AirportRef]) -> Dict[str, Any]:
        found: List[AirportRef] = []
        payloads = []
        for ref in refs:
            payload = self.cache.get(ref.code)
            if payload is not None:
                found.append(ref)
                payloads.append(payload)
        return {"cities": _distinct_cities(found), "count": len(payloads), "airports": payloads}


_service: Optional[AirportQueryService] = None


def get_query_service() -> AirportQueryService:
    """Process-wide service built from settings."""
    global _service
    if _service is None:
        settings = get_settings()
        layout = StoreLayout(settings.data_dir)
        cache = PayloadCache(layout.airports.read_json, ttl_seconds=settings.cache_ttl)
        _service = AirportQueryService(load_default_directory(), cache)
    return _service
