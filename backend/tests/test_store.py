import threading

import pytest
from pydantic import ValidationError

from student_api.errors import StudentNotFoundError, StudentValidationError
from student_api.schemas import StudentIn
from student_api.store import StudentStore


def _candidate(name="Ada", age=30, email="a@x.com", **extra):
    return StudentIn(name=name, age=age, email=email, **extra)


def test_create_assigns_sequential_ids(store):
    ids = [store.create(_candidate(name=f"s{i}")).id for i in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_create_ignores_client_id(store):
    created = store.create(_candidate(id=42))
    assert created.id == 1
    with pytest.raises(StudentNotFoundError):
        store.get(42)


def test_invalid_create_does_not_consume_an_id(store):
    with pytest.raises(StudentValidationError) as exc:
        store.create(_candidate(name=""))
    assert [e.field for e in exc.value.errors] == ["name"]
    assert len(store) == 0
    assert store.create(_candidate()).id == 1


def test_deleted_id_is_never_reused(store):
    first = store.create(_candidate())
    store.delete(first.id)
    second = store.create(_candidate())
    assert second.id == 2
    assert [s.id for s in store.list()] == [2]


def test_update_keeps_path_id(store):
    created = store.create(_candidate())
    updated = store.update(created.id, _candidate(name="Grace", age=40, email="g@x.com", id=99))
    assert updated.id == created.id
    assert store.get(created.id).name == "Grace"
    with pytest.raises(StudentNotFoundError):
        store.get(99)


def test_update_validates_before_existence_check(store):
    with pytest.raises(StudentValidationError):
        store.update(7, _candidate(age=-5))
    with pytest.raises(StudentNotFoundError):
        store.update(7, _candidate())


def test_invalid_update_leaves_record_untouched(store):
    created = store.create(_candidate())
    with pytest.raises(StudentValidationError):
        store.update(created.id, _candidate(email=""))
    assert store.get(created.id) == created


def test_not_found_is_symmetric(store):
    created = store.create(_candidate())
    store.delete(created.id)
    for missing in (created.id, 1000):
        with pytest.raises(StudentNotFoundError):
            store.get(missing)
        with pytest.raises(StudentNotFoundError):
            store.update(missing, _candidate())
        with pytest.raises(StudentNotFoundError):
            store.delete(missing)


def test_list_snapshot_is_not_affected_by_later_mutations(store):
    a = store.create(_candidate(name="a"))
    b = store.create(_candidate(name="b"))
    snapshot = store.list()
    store.create(_candidate(name="c"))
    store.update(a.id, _candidate(name="changed"))
    store.delete(b.id)
    assert [(s.id, s.name) for s in snapshot] == [(1, "a"), (2, "b")]


def test_stored_students_are_immutable(store):
    created = store.create(_candidate())
    with pytest.raises(ValidationError):
        created.name = "other"
    assert store.get(created.id).name == "Ada"


def test_concurrent_creates_get_unique_increasing_ids():
    store = StudentStore()
    results = []
    results_lock = threading.Lock()

    def worker(n):
        for i in range(50):
            s = store.create(_candidate(name=f"w{n}-{i}"))
            with results_lock:
                results.append(s.id)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == list(range(1, 401))
    assert len(store) == 400


def test_readers_and_writers_interleave_safely():
    store = StudentStore()
    for i in range(20):
        store.create(_candidate(name=f"seed{i}"))
    errors = []

    def reader():
        for _ in range(200):
            snapshot = store.list()
            ids = [s.id for s in snapshot]
            if ids != sorted(set(ids)):
                errors.append(ids)

    def writer():
        for i in range(100):
            s = store.create(_candidate(name=f"new{i}"))
            store.update(s.id, _candidate(name=f"upd{i}"))
            store.delete(s.id)

    threads = [threading.Thread(target=reader) for _ in range(4)] + [threading.Thread(target=writer) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(store) == 20


def test_list_is_ordered_by_id_after_mixed_mutations(store):
    for name in "abcde":
        store.create(_candidate(name=name))
    store.delete(2)
    store.update(4, _candidate(name="D"))
    store.create(_candidate(name="f"))
    snapshot = store.list()
    assert [s.id for s in snapshot] == [1, 3, 4, 5, 6]
    assert snapshot is not store.list()
