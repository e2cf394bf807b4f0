"""
Tests for cultivo.locking (reader/writer discipline around the store).
"""
import threading
import time
from cultivo.concept import Concept
from cultivo.knowledge import KnowledgeStore
from cultivo.locking import SharedStore


class TestSharedStore:

    def test_readers_share(self):
        shared = SharedStore()
        inside = threading.Barrier(2, timeout=2)

        def reader():
            with shared.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=3)
        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self):
        shared = SharedStore()
        seen = []

        def reader():
            with shared.read() as store:
                seen.append(store.concept_count())

        with shared.write() as store:
            t = threading.Thread(target=reader)
            t.start()
            time.sleep(0.05)
            assert seen == []
            store.add_concept(Concept(label='Chuva'))
        t.join(timeout=2)
        assert seen == [1]

    def test_lock_released_on_error(self):
        shared = SharedStore()
        try:
            with shared.write():
                raise RuntimeError('boom')
        except RuntimeError:
            pass
        with shared.write() as store:
            assert store.concept_count() == 0

    def test_replace(self):
        shared = SharedStore()
        fresh = KnowledgeStore()
        fresh.add_concept(Concept(label='Sol'))
        shared.replace(fresh)
        with shared.read() as store:
            assert store is fresh
