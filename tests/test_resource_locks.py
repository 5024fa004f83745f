import threading
import time

from app.application.services.resource_locks import ResourceLocks


def test_holders_of_one_resource_are_serialized():
    locks = ResourceLocks()
    active = []
    overlaps = []

    def worker():
        with locks.hold("sauna"):
            active.append(1)
            if len(active) > 1:
                overlaps.append(len(active))
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []
    assert len(locks) == 0


def test_different_resources_do_not_block_each_other():
    locks = ResourceLocks()
    entered = threading.Event()

    def other():
        with locks.hold("gym"):
            entered.set()

    with locks.hold("sauna"):
        thread = threading.Thread(target=other)
        thread.start()
        assert entered.wait(timeout=2)
        thread.join()
        assert len(locks) == 1


def test_missing_resource_id_holds_nothing():
    locks = ResourceLocks()

    with locks.hold(None):
        assert len(locks) == 0


def test_lock_is_released_on_error():
    locks = ResourceLocks()

    try:
        with locks.hold("sauna"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert len(locks) == 0
    with locks.hold("sauna"):
        assert len(locks) == 1
