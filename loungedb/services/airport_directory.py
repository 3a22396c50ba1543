"""Static airport reference table.

By default the directory holds every airport with an IATA code, taken from
the table shipped with the ``airportsdata`` package. ``LOUNGEDB_AIRPORTS_PATH``
points at a replacement JSON list of objects ``{iata, name, city, iso2, lat, lon}``.

The directory seeds the airport crawl stage and resolves every query
(code, name, country and radius lookups).
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

import airportsdata

from loungedb.config import get_settings

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371008.8


@dataclass(frozen=True)
class AirportRef:
    code: str
    name: str
    country_code: str
    city: str
    latitude: float
    longitude: float


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two WGS84 points."""
    p = math.pi / 180.0
    dlat = (lat2 - lat1) * p
    dlon = (lon2 - lon1) * p
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1 * p) * math.cos(lat2 * p) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_M * c


def _normalize_code(code: Any) -> str:
    return str(code or "").strip().upper()


def _ref_from_dict(item: Dict[str, Any]) -> Optional[AirportRef]:
    code = _normalize_code(item.get("iata") or item.get("code"))
    if len(code) != 3 or not code.isalpha():
        return None
    try:
        lat = float(item.get("lat", item.get("latitude")))
        lon = float(item.get("lon", item.get("longitude")))
    except (TypeError, ValueError):
        return None
    return AirportRef(
        code=code,
        name=str(item.get("name") or ""),
        country_code=_normalize_code(item.get("iso2") or item.get("country") or item.get("country_code")),
        city=str(item.get("city") or ""),
        latitude=lat,
        longitude=lon,
    )


class AirportDirectory:
    def __init__(self, entries: Iterable[AirportRef]) -> None:
        self._entries: List[AirportRef] = []
        self._by_code: Dict[str, AirportRef] = {}
        for ref in entries:
            if ref.code in self._by_code:
                raise ValueError(f"Duplicate airport code in directory: {ref.code}")
            self._by_code[ref.code] = ref
            self._entries.append(ref)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "AirportDirectory":
        refs = []
        skipped = 0
        for item in records:
            ref = _ref_from_dict(item) if isinstance(item, dict) else None
            if ref is None:
                skipped += 1
                continue
            refs.append(ref)
        if skipped:
            logger.debug("Ignored %d directory rows without a usable IATA code/position", skipped)
        return cls(refs)

    @classmethod
    def from_json_file(cls, path: str) -> "AirportDirectory":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Airport directory {path} must contain a JSON list")
        return cls.from_records(data)

    @classmethod
    def from_airportsdata(cls) -> "AirportDirectory":
        """Every IATA-coded airport known to the ``airportsdata`` package."""
        table = airportsdata.load("IATA")
        return cls.from_records(table.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AirportRef]:
        return iter(self._entries)

    def get(self, code: str) -> Optional[AirportRef]:
        return self._by_code.get(_normalize_code(code))

    def codes(self) -> List[str]:
        return [a.code for a in self._entries]

    def search_name(self, substring: str) -> List[AirportRef]:
        """Case-insensitive substring match on the airport name."""
        q = (substring or "").lower()
        return [a for a in self._entries if q in a.name.lower()]

    def search_country(self, country_code: str) -> List[AirportRef]:
        q = _normalize_code(country_code)
        return [a for a in self._entries if a.country_code == q]

    def nearby(self, lat: float, lon: float, radius_km: float) -> List[AirportRef]:
        limit_m = radius_km * 1000.0
        return [a for a in self._entries if haversine_m(lat, lon, a.latitude, a.longitude) <= limit_m]


_DEFAULT_DIRECTORY: Optional[AirportDirectory] = None


def load_default_directory() -> AirportDirectory:
    """Load (once) the directory configured by settings."""
    global _DEFAULT_DIRECTORY
    if _DEFAULT_DIRECTORY is None:
        path = get_settings().airports_path
        if path:
            _DEFAULT_DIRECTORY = AirportDirectory.from_json_file(path)
        else:
            _DEFAULT_DIRECTORY = AirportDirectory.from_airportsdata()
        logger.info("Loaded %d airports from %s", len(_DEFAULT_DIRECTORY), path or "airportsdata")
    return _DEFAULT_DIRECTORY
