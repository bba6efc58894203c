from dataclasses import dataclass

from toolkit_utils.cache import Cache


@dataclass(frozen=True)
class Item:
    value: int

    def size(self):
        return self.value


def found(value):
    return lambda item: item.value == value


def test_cache_disabled():
    c = Cache()
    c.set(Item(1))
    assert c.get(found(1)) is None


def test_cache_limited():
    c = Cache(max_size=5)
    assert c.get(found(1)) is None
    c.set(Item(1))
    assert c.get(found(1)) == Item(1)
    c.set(Item(2))
    c.set(Item(3))
    assert c.get(found(1)) is None
    assert c.get(found(3)) == Item(3)
    # Getting an item makes it less likely to get purged
    assert c.get(found(2)) == Item(2)
    c.set(Item(1))
    assert c.get(found(3)) is None
    assert c.get(found(1)) == Item(1)
    assert c.get(found(2)) == Item(2)
    c.set(Item(6))
    assert c.get(found(6)) is None


def test_cache_unlimited_and_delete():
    c = Cache(max_size=-1)
    for v in (1, 2, 3):
        c.set(Item(v))
    assert c.get(found(1)) == Item(1)
    assert c.get(found(2)) == Item(2)
    assert c.get(found(3)) == Item(3)
    c.delete(found(2))
    assert c.get(found(1)) == Item(1)
    assert c.get(found(2)) is None
    assert c.get(found(3)) == Item(3)


def test_delete_frees_room():
    c = Cache(max_size=5)
    c.set(Item(2))
    c.set(Item(3))
    c.delete(found(3))
    c.set(Item(3))
    assert c.get(found(2)) == Item(2)
    assert c.get(found(3)) == Item(3)