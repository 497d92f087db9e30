from surf_report.cache import ConditionsCache


def test_put_get_and_expiry(clock):
    cache = ConditionsCache(ttl=600, clock=clock)
    assert cache.get("spot") is None
    cache.put("spot", {"score": 70})
    assert cache.get("spot") == {"score": 70}
    assert "spot" in cache

    clock.advance(599)
    assert cache.get("spot") == {"score": 70}
    clock.advance(1)
    assert cache.get("spot") is None
    assert "spot" not in cache


def test_age(clock):
    cache = ConditionsCache(clock=clock)
    assert cache.age("spot") is None
    cache.put("spot", 1)
    clock.advance(12.7)
    assert cache.age("spot") == 12


def test_per_entry_ttl(clock):
    cache = ConditionsCache(ttl=600, clock=clock)
    cache.put("short", 1, ttl=10)
    cache.put("long", 2)
    clock.advance(11)
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_delete_and_clear(clock):
    cache = ConditionsCache(clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert cache.get("b") is None
