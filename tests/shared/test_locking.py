import threading
import time

from shared.locking import KeyedLocks, order_key, tracking_key, tracking_number_key, tracking_order_key, wallet_key


class TestKeys:
    def test_key_namespaces(self):
        assert order_key("o1") == "order:o1"
        assert wallet_key("u1") == "wallet:u1"
        assert tracking_key("t1") == "tracking:t1"
        assert tracking_order_key("o1") == "tracking-order:o1"
        assert tracking_number_key("1Z999") == "tracking-number:1Z999"


class TestKeyedLocks:
    def test_same_key_is_serialized(self):
        locks = KeyedLocks()
        active = []
        overlaps = []

        def worker():
            with locks.hold("order:1"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []

    def test_locks_are_reentrant(self):
        locks = KeyedLocks()
        with locks.hold("order:1", "wallet:1"):
            with locks.hold("wallet:1"):
                pass

    def test_none_and_duplicate_keys_are_ignored(self):
        locks = KeyedLocks()
        with locks.hold("order:1", None, "order:1"):
            pass

    def test_opposite_acquisition_order_does_not_deadlock(self):
        locks = KeyedLocks()
        done = []

        def worker(keys):
            for _ in range(50):
                with locks.hold(*keys):
                    pass
            done.append(keys)

        first = threading.Thread(target=worker, args=(("order:1", "wallet:1"),))
        second = threading.Thread(target=worker, args=(("wallet:1", "order:1"),))
        first.start()
        second.start()
        first.join(timeout=5)
        second.join(timeout=5)

        assert len(done) == 2

    def test_lock_is_released_on_error(self):
        locks = KeyedLocks()
        try:
            with locks.hold("order:1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        acquired = []

        def worker():
            with locks.hold("order:1"):
                acquired.append(True)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join(timeout=1)
        assert acquired == [True]
        assert len(locks) == 0

    def test_released_keys_are_forgotten(self):
        locks = KeyedLocks()
        with locks.hold("order:1", "wallet:1"):
            with locks.hold("wallet:1"):
                assert len(locks) == 2
            assert len(locks) == 2
        assert len(locks) == 0

    def test_keys_do_not_accumulate_across_operations(self):
        locks = KeyedLocks()

        def worker(n):
            for i in range(20):
                with locks.hold(f"order:{n}-{i}", "wallet:shared"):
                    pass

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert len(locks) == 0
