"""
Concurrency tests for revision number allocation.

Concurrent callers must receive distinct, gap-free numbers and must never
write into the same revision directory.
"""

import threading
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

from versioning_core.versioning.revision_store import RevisionStore


WORKERS = 16


def _create_many(store_factory, count):
    barrier = threading.Barrier(count)

    def create(index):
        store = store_factory(index)
        barrier.wait()
        return index, store.create_revision({f"writer-{index}.txt": f"written by {index}"})

    with ThreadPoolExecutor(max_workers=count) as executor:
        return list(executor.map(create, range(count)))


def test_concurrent_creation_shared_store(base_dir):
    store = RevisionStore(base_dir)

    results = _create_many(lambda index: store, WORKERS)

    numbers = sorted(number for _, number in results)
    assert numbers == list(range(1, WORKERS + 1))
    assert store.list_revisions() == numbers


def test_concurrent_creation_separate_instances(base_dir):
    results = _create_many(lambda index: RevisionStore(base_dir), WORKERS)

    numbers = sorted(number for _, number in results)
    assert numbers == list(range(1, WORKERS + 1))


def test_concurrent_creation_does_not_merge_files(base_dir):
    results = _create_many(lambda index: RevisionStore(base_dir), WORKERS)

    for index, number in results:
        revision_dir = base_dir / str(number)
        assert [p.name for p in revision_dir.iterdir()] == [f"writer-{index}.txt"]
        assert (revision_dir / f"writer-{index}.txt").read_text() == f"written by {index}"


def test_relative_and_absolute_paths_share_a_lock(base_dir, monkeypatch):
    base_dir.mkdir()
    monkeypatch.chdir(base_dir.parent)
    stores = [RevisionStore(base_dir), RevisionStore("revisions")]

    results = _create_many(lambda index: stores[index % 2], WORKERS)

    numbers = sorted(number for _, number in results)
    assert numbers == list(range(1, WORKERS + 1))


def _create_in_process(base_dir, index):
    store = RevisionStore(base_dir, max_allocation_retries=8)
    return index, store.create_revision({f"process-{index}.txt": str(index)})


def test_concurrent_creation_across_processes(base_dir):
    base_dir.mkdir()
    count = 6

    with ProcessPoolExecutor(max_workers=count) as executor:
        futures = [executor.submit(_create_in_process, str(base_dir), i) for i in range(count)]
        results = [future.result() for future in futures]

    numbers = sorted(number for _, number in results)
    assert numbers == list(range(1, count + 1))
    for index, number in results:
        assert [p.name for p in (base_dir / str(number)).iterdir()] == [f"process-{index}.txt"]
