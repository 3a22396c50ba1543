import json
import math

import pytest

from loungedb import config
from loungedb.services import airport_directory
from loungedb.services.airport_directory import (
    AirportDirectory,
    AirportRef,
    haversine_m,
    load_default_directory,
)


def test_haversine_known_distances():
    # One degree along a meridian on the mean-radius sphere
    assert math.isclose(haversine_m(0, 0, 1, 0), 111195.08, abs_tol=0.1)
    assert haversine_m(40.6398, -73.7789, 40.6398, -73.7789) == 0.0
    # Antipodal points: half the circumference
    assert math.isclose(haversine_m(0, 0, 0, 180), math.pi * 6371008.8, rel_tol=1e-9)


def test_lookup_is_case_insensitive(directory):
    assert directory.get("jfk").name == "John F. Kennedy International Airport"
    assert directory.get(" lhr ").country_code == "GB"
    assert directory.get("ZZZ") is None


def test_search_name_and_country(directory):
    assert [a.code for a in directory.search_name("LONDON")] == ["LHR", "LGW"]
    assert [a.code for a in directory.search_name("guardia")] == ["LGA"]
    assert directory.search_name("nowhere") == []
    assert [a.code for a in directory.search_country("us")] == ["JFK", "LGA", "EWR"]
    assert directory.search_country("FR") == []


def test_nearby_boundary(directory):
    jfk = directory.get("JFK")
    lga = directory.get("LGA")
    d = haversine_m(jfk.latitude, jfk.longitude, lga.latitude, lga.longitude)
    inside = directory.nearby(jfk.latitude, jfk.longitude, d / 1000 + 1e-6)
    outside = directory.nearby(jfk.latitude, jfk.longitude, d / 1000 - 1e-6)
    assert "LGA" in [a.code for a in inside]
    assert "LGA" not in [a.code for a in outside]
    assert [a.code for a in outside] == ["JFK"]


def test_duplicate_codes_rejected():
    ref = AirportRef("JFK", "x", "US", "New York", 0.0, 0.0)
    with pytest.raises(ValueError):
        AirportDirectory([ref, ref])


def test_from_json_file_skips_unusable_rows(tmp_path):
    path = tmp_path / "airports.json"
    path.write_text(json.dumps([
        {"iata": "jfk", "name": "JFK", "city": "New York", "iso2": "us", "lat": 40.6, "lon": -73.7},
        {"iata": "", "name": "Private strip", "city": "X", "iso2": "US", "lat": 1, "lon": 1},
        {"iata": "ABCD", "name": "ICAO only", "city": "X", "iso2": "US", "lat": 1, "lon": 1},
        {"iata": "NOP", "name": "No position", "city": "X", "iso2": "US"},
    ]), encoding="utf-8")
    d = AirportDirectory.from_json_file(str(path))
    assert d.codes() == ["JFK"]
    assert d.get("JFK").country_code == "US"


def test_airportsdata_directory_covers_iata_airports():
    d = AirportDirectory.from_airportsdata()
    assert len(d) > 5000
    assert len(set(d.codes())) == len(d)
    for code in ("BHX", "BUD", "JFK", "LHR"):
        assert d.get(code) is not None, code
    lhr = d.get("LHR")
    assert lhr.country_code == "GB"
    assert "Heathrow" in lhr.name
    assert math.isclose(lhr.latitude, 51.47, abs_tol=0.05)


@pytest.fixture
def fresh_default_directory(monkeypatch):
    monkeypatch.setattr(airport_directory, "_DEFAULT_DIRECTORY", None)
    config.reset_settings()
    yield
    config.reset_settings()


def test_default_directory_is_the_full_iata_table(monkeypatch, fresh_default_directory):
    monkeypatch.delenv("LOUNGEDB_AIRPORTS_PATH", raising=False)
    d = load_default_directory()
    assert len(d) > 5000
    assert d.get("BHX") is not None
    assert load_default_directory() is d


def test_default_directory_path_override(monkeypatch, fresh_default_directory, tmp_path):
    path = tmp_path / "airports.json"
    path.write_text(json.dumps([
        {"iata": "BHX", "name": "Birmingham Airport", "city": "Birmingham", "iso2": "GB", "lat": 52.45, "lon": -1.75},
    ]), encoding="utf-8")
    monkeypatch.setenv("LOUNGEDB_AIRPORTS_PATH", str(path))
    d = load_default_directory()
    assert d.codes() == ["BHX"]
