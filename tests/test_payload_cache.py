import pytest

from loungedb.services.cache import PayloadCache
from loungedb.services.errors import RecordParseError


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _counting_loader(values):
    calls = []

    def load(key):
        calls.append(key)
        v = values[key]
        if isinstance(v, BaseException):
            raise v
        return v

    return load, calls


def test_hit_before_ttl_and_refresh_after():
    clock = FakeClock()
    load, calls = _counting_loader({"JFK": {"v": 1}})
    cache = PayloadCache(load, ttl_seconds=3600, clock=clock)

    assert cache.get("JFK") == {"v": 1}
    assert calls == ["JFK"]

    clock.now += 3600 - 0.001
    assert cache.get("JFK") == {"v": 1}
    assert calls == ["JFK"]

    clock.now += 0.002
    assert cache.get("JFK") == {"v": 1}
    assert calls == ["JFK", "JFK"]


def test_reload_picks_up_new_value_after_expiry():
    clock = FakeClock()
    values = {"LHR": {"v": 1}}
    load, _ = _counting_loader(values)
    cache = PayloadCache(load, ttl_seconds=10, clock=clock)
    assert cache.get("LHR") == {"v": 1}
    values["LHR"] = {"v": 2}
    assert cache.get("LHR") == {"v": 1}
    clock.now += 11
    assert cache.get("LHR") == {"v": 2}


@pytest.mark.parametrize("exc", [FileNotFoundError("gone"), RecordParseError("BAD.json"), PermissionError("denied")])
def test_load_failures_return_none_and_are_not_cached(exc):
    load, calls = _counting_loader({"BAD": exc})
    cache = PayloadCache(load, ttl_seconds=60, clock=FakeClock())
    assert cache.get("BAD") is None
    assert cache.get("BAD") is None
    assert calls == ["BAD", "BAD"]
    assert len(cache) == 0


def test_purge_expired():
    clock = FakeClock()
    load, _ = _counting_loader({"A": 1, "B": 2})
    cache = PayloadCache(load, ttl_seconds=10, clock=clock)
    cache.get("A")
    clock.now += 5
    cache.get("B")
    clock.now += 6
    assert cache.purge_expired() == 1
    assert len(cache) == 1
