from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from logfollow.core import exceptions
from logfollow.tailing.models import WatchedFile
from logfollow.tailing.registry import WatchRegistry


PATH = "/logs/a.log"


def test_insert_and_lookup():
    """Test that an inserted file can be looked up by path."""
    registry = WatchRegistry()
    watched = WatchedFile(PATH)

    assert registry.insert(watched) is watched
    assert registry.lookup(PATH) is watched
    assert PATH in registry
    assert len(registry) == 1


def test_insert_duplicate_rejected():
    """Test that a second entry for the same path is refused."""
    registry = WatchRegistry()
    first = WatchedFile(PATH)
    registry.insert(first)

    with pytest.raises(exceptions.AlreadyWatchedError):
        registry.insert(WatchedFile(PATH))

    assert registry.lookup(PATH) is first
    assert len(registry) == 1


def test_remove_returns_entry():
    registry = WatchRegistry()
    watched = registry.insert(WatchedFile(PATH))

    assert registry.remove(PATH) is watched
    assert registry.lookup(PATH) is None
    assert PATH not in registry


def test_remove_unknown_path():
    registry = WatchRegistry()

    with pytest.raises(exceptions.NotWatchedError):
        registry.remove(PATH)


def test_remove_only_matching_entry():
    """Test that a stale record cannot remove a newer entry for the same path."""
    registry = WatchRegistry()
    stale = WatchedFile(PATH)
    current = registry.insert(WatchedFile(PATH))

    with pytest.raises(exceptions.NotWatchedError):
        registry.remove(PATH, entry=stale)

    assert registry.lookup(PATH) is current
    assert registry.remove(PATH, entry=current) is current


def test_paths_is_snapshot():
    registry = WatchRegistry()
    registry.insert(WatchedFile("/logs/a.log"))
    registry.insert(WatchedFile("/logs/b.log"))

    paths = registry.paths()
    registry.remove("/logs/a.log")

    assert sorted(paths) == ["/logs/a.log", "/logs/b.log"]
    assert list(registry) == ["/logs/b.log"]


def test_concurrent_inserts_single_winner():
    """Test that racing inserts for one path leave exactly one entry."""
    registry = WatchRegistry()

    def try_insert(_: int) -> bool:
        try:
            registry.insert(WatchedFile(PATH))
        except exceptions.AlreadyWatchedError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(try_insert, range(64)))

    assert results.count(True) == 1
    assert len(registry) == 1


if __name__ == "__main__":
    pytest.main(["-vv", __file__])
