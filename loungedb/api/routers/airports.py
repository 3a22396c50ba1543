from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from loungedb.models.airport import AirportSearchResponse, HealthOut
from loungedb.services.errors import AirportNotFound, QueryValidationError
from loungedb.services.query_service import DEFAULT_RADIUS_KM, get_query_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["airports"])


def _parse_coordinates(lat: Optional[str], lon: Optional[str]) -> tuple:
    try:
        lat_v = float(lat)  # type: ignore[arg-type]
        lon_v = float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise QueryValidationError("Invalid latitude or longitude") from None
    if not (math.isfinite(lat_v) and math.isfinite(lon_v)):
        raise QueryValidationError("Invalid latitude or longitude")
    if not (-90.0 <= lat_v <= 90.0 and -180.0 <= lon_v <= 180.0):
        raise QueryValidationError("Latitude must be within [-90, 90] and longitude within [-180, 180]")
    return lat_v, lon_v


def _parse_radius(radius: Optional[str]) -> float:
    # Missing, malformed, NaN or zero radius falls back to the default;
    # a negative radius is passed through and matches nothing
    try:
        value = float(radius)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_RADIUS_KM
    if math.isnan(value) or value == 0:
        return DEFAULT_RADIUS_KM
    return value


@router.get("/health", response_model=HealthOut)
def api_health():
    return {"status": "ok", "airports": len(get_query_service().directory)}


@router.get("/api/position", response_model=AirportSearchResponse)
def api_search_by_position(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    radius: Optional[str] = Query(None, description="Search radius in km (default 50)"),
):
    try:
        lat_v, lon_v = _parse_coordinates(lat, lon)
    except QueryValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    try:
        return get_query_service().search_by_position(lat_v, lon_v, _parse_radius(radius))
    except Exception:
        logger.exception("Position search failed (lat=%s lon=%s radius=%s)", lat, lon, radius)
        raise HTTPException(status_code=500, detail="Error fetching airport data")


@router.get("/api/name/{name}", response_model=AirportSearchResponse)
def api_search_by_name(name: str):
    try:
        return get_query_service().search_by_name(name)
    except Exception:
        logger.exception("Name search failed for %r", name)
        raise HTTPException(status_code=500, detail="Error fetching airport data")


@router.get("/api/country/{country}", response_model=AirportSearchResponse)
def api_search_by_country(country: str):
    try:
        return get_query_service().search_by_country(country)
    except Exception:
        logger.exception("Country search failed for %r", country)
        raise HTTPException(status_code=500, detail="Error fetching airport data")


# Declared last: the catch-all segment must not shadow the routes above
@router.get("/api/{iata}", response_model=AirportSearchResponse)
def api_get_airport(iata: str):
    try:
        return get_query_service().get_by_code(iata)
    except AirportNotFound:
        raise HTTPException(status_code=404, detail="Airport not found")
    except Exception:
        logger.exception("Lookup failed for %r", iata)
        raise HTTPException(status_code=500, detail="Error fetching airport data")
