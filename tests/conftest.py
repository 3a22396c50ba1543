import shutil
from pathlib import Path

import pytest

from loungedb.services.airport_directory import AirportDirectory, AirportRef


FIXTURES = Path(__file__).parent / "fixtures"

NYC_AIRPORTS = [
    AirportRef("JFK", "John F. Kennedy International Airport", "US", "New York", 40.6398, -73.7789),
    AirportRef("LGA", "LaGuardia Airport", "US", "New York", 40.7772, -73.8726),
    AirportRef("EWR", "Newark Liberty International Airport", "US", "Newark", 40.6925, -74.1687),
    AirportRef("LHR", "London Heathrow Airport", "GB", "London", 51.4706, -0.4619),
    AirportRef("LGW", "London Gatwick Airport", "GB", "London", 51.1481, -0.1903),
]


@pytest.fixture
def directory():
    return AirportDirectory(NYC_AIRPORTS)


@pytest.fixture
def airport_store_dir(tmp_path):
    """A store root whose iata/ folder holds the fixture airport records."""
    dest = tmp_path / "db" / "iata"
    shutil.copytree(FIXTURES / "airports", dest)
    return tmp_path / "db"
