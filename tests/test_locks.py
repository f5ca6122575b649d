"""Tests for the keyed lock registry."""

import threading
import time

from pharmadesk.core.locks import KeyedLocks


class TestKeyedLocks:

    def test_locks_created_per_key(self):
        locks = KeyedLocks()
        with locks.hold("medicine:1"):
            pass
        with locks.hold("medicine:2", "medicine:1"):
            pass

        assert len(locks) == 2

    def test_reentrant(self):
        locks = KeyedLocks()
        with locks.hold("medicine:1"):
            with locks.hold("medicine:1", "order:1"):
                pass

    def test_same_key_serializes_threads(self):
        locks = KeyedLocks()
        counter = {"value": 0}

        def read_modify_write():
            with locks.hold("medicine:1"):
                current = counter["value"]
                time.sleep(0.001)
                counter["value"] = current + 1

        threads = [threading.Thread(target=read_modify_write) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter["value"] == 20

    def test_released_after_exception(self):
        locks = KeyedLocks()
        try:
            with locks.hold("medicine:1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        acquired = []
        thread = threading.Thread(target=lambda: acquired.append(locks._lock_for("medicine:1").acquire(timeout=1)))
        thread.start()
        thread.join()
        assert acquired == [True]
