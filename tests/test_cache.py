from cache import TtlCache


class Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_hit_before_expiry_and_lazy_delete_after():
    clock = Clock()
    cache = TtlCache(60, clock=clock)
    cache.set("candidates:chicago", ["a"])

    clock.now += 59
    assert cache.get("candidates:chicago") == ["a"]

    clock.now += 2
    assert len(cache) == 1
    assert cache.get("candidates:chicago") is None
    assert len(cache) == 0


def test_per_entry_ttl_overrides_default():
    clock = Clock()
    cache = TtlCache(3600, clock=clock)
    cache.set("short", 1, ttl_s=5)
    cache.set("long", 2)
    clock.now += 10
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_missing_key_and_clear():
    cache = TtlCache(10)
    assert cache.get("nope") is None
    cache.set("k", "v")
    cache.clear()
    assert cache.get("k") is None
    assert len(cache) == 0
