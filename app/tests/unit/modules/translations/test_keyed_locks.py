"""Unit tests for the keyed lock registry."""

import threading
import time

import pytest

from modules.translations.locks import KeyedLockRegistry

pytestmark = pytest.mark.unit


class TestKeyedLockRegistry:
    def test_entries_are_freed_after_release(self):
        locks = KeyedLockRegistry()

        with locks.hold("a"):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_same_key_is_mutually_exclusive(self):
        locks = KeyedLockRegistry()
        active = []
        overlaps = []
        guard = threading.Lock()

        def worker():
            with locks.hold("same"):
                with guard:
                    active.append(1)
                    if len(active) > 1:
                        overlaps.append(True)
                time.sleep(0.01)
                with guard:
                    active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLockRegistry()
        entered = threading.Event()

        def other():
            with locks.hold("b"):
                entered.set()

        with locks.hold("a"):
            t = threading.Thread(target=other)
            t.start()
            assert entered.wait(timeout=2)
            t.join()

    def test_lock_released_on_exception(self):
        locks = KeyedLockRegistry()

        with pytest.raises(RuntimeError):
            with locks.hold("a"):
                raise RuntimeError("boom")

        with locks.hold("a"):
            pass
        assert len(locks) == 0
