"""
RosterStore behaviour against an in-memory slot and the JSON file slot.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make the roster package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster.domain.students import StudentFields, ValidationIssue  # noqa: E402
from roster.repositories.base import StorageError  # noqa: E402
from roster.repositories.json_storage import JsonFileSlot  # noqa: E402
from roster.services.roster_service import (  # noqa: E402
    PersistFailedError,
    RecordNotFoundError,
    RosterStore,
)


class MemorySlot:
    """Slot kept in a string; can be told to fail reads or writes."""

    def __init__(self, value: str | None = None) -> None:
        self.key = "students_v1"
        self.value = value
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False

    def read(self):
        if self.fail_reads:
            raise StorageError("read refused")
        return self.value

    def write(self, value: str) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        self.writes += 1
        self.value = value


def _fields(name="Ann Lee", student_id="1023", email="a@b.com", contact="5551234567") -> StudentFields:
    return StudentFields(name, student_id, email, contact)


def _ids(values):
    it = iter(values)
    return lambda: next(it)


@pytest.fixture()
def slot():
    return MemorySlot()


@pytest.fixture()
def store(slot):
    roster = RosterStore(slot)
    roster.load()
    return roster


def test_create_appends_and_persists(store, slot):
    record = store.create(_fields())

    assert len(store) == 1
    assert store.records[0] == record
    assert (record.name, record.student_id, record.email, record.contact) == (
        "Ann Lee",
        "1023",
        "a@b.com",
        "5551234567",
    )
    assert json.loads(slot.value) == [record.to_dict()]


def test_invalid_name_leaves_collection_untouched(store, slot):
    result = store.validate("A1", "1023", "a@b.com", "5551234567")

    assert result.issue is ValidationIssue.INVALID_NAME
    assert len(store) == 0
    assert slot.writes == 0


def test_update_replaces_in_place(store):
    first = store.create(_fields())
    second = store.create(_fields(name="Bob Stone", student_id="2048"))

    updated = store.update(first.id, _fields(name="New Name"))

    assert len(store) == 2
    assert [r.id for r in store.records] == [first.id, second.id]
    assert store.records[0] == updated
    assert updated.name == "New Name"
    assert updated.id == first.id
    assert store.records[1] == second


def test_update_missing_record_raises_not_found(store, slot):
    store.create(_fields())
    writes = slot.writes
    with pytest.raises(RecordNotFoundError) as exc:
        store.update("missing", _fields(name="Nobody"))
    assert exc.value.record_id == "missing"
    assert slot.writes == writes


def test_delete_twice_is_not_an_error(store):
    record = store.create(_fields())

    store.delete(record.id)
    assert len(store) == 0
    store.delete(record.id)
    assert len(store) == 0


def test_delete_unknown_id_keeps_records_but_still_persists(store, slot):
    record = store.create(_fields())
    writes = slot.writes

    store.delete("nope")

    assert store.records == (record,)
    assert slot.writes == writes + 1


def test_delete_keeps_order_of_the_rest(store):
    a = store.create(_fields(name="Ann"))
    b = store.create(_fields(name="Bob"))
    c = store.create(_fields(name="Cy"))

    store.delete(b.id)

    assert [r.id for r in store.records] == [a.id, c.id]


def test_clear_is_idempotent(store, slot):
    store.create(_fields())
    store.clear()
    assert len(store) == 0
    store.clear()
    assert len(store) == 0
    assert json.loads(slot.value) == []


def test_reload_reproduces_collection(slot):
    store = RosterStore(slot)
    store.load()
    store.create(_fields(name="Ann Lee"))
    store.create(_fields(name="Bob Stone", student_id="2048"))

    restarted = RosterStore(slot)
    restarted.load()

    assert restarted.records == store.records


def test_search_filters_by_name_or_student_id(store):
    ann = store.create(_fields(name="Ann Lee", student_id="1023"))
    bob = store.create(_fields(name="Bob Stone", student_id="2048"))
    annabel = store.create(_fields(name="annabel", student_id="1999"))

    assert list(store.search("")) == [ann, bob, annabel]
    assert list(store.search("ANN")) == [ann, annabel]
    assert list(store.search("204")) == [bob]
    assert list(store.search("zzz")) == []


def test_search_is_lazy_over_a_snapshot(store):
    store.create(_fields())
    results = store.search("")

    assert iter(results) is results
    store.create(_fields(name="Late Comer"))
    assert len(list(results)) == 1


def test_ids_are_never_reused(slot):
    store = RosterStore(slot, id_factory=_ids(["a", "a", "b", "a", "c"]))
    store.load()

    first = store.create(_fields())
    store.delete(first.id)
    second = store.create(_fields())
    third = store.create(_fields())

    assert [first.id, second.id, third.id] == ["a", "b", "c"]


def test_loaded_ids_are_not_reissued():
    existing = [{"id": "a", "name": "Ann", "studentId": "1", "email": "a@b.com", "contact": "5551234567"}]
    store = RosterStore(MemorySlot(json.dumps(existing)), id_factory=_ids(["a", "z"]))
    store.load()

    assert store.create(_fields()).id == "z"


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "not json",
        '{"students": []}',
        '[{"id": "1"}]',
        '[{"id": 1, "name": "Ann", "studentId": "1", "email": "a@b.com", "contact": "5551234567"}]',
        "[1, 2, 3]",
    ],
)
def test_missing_or_malformed_slot_loads_empty(raw):
    store = RosterStore(MemorySlot(raw))
    store.load()
    assert store.records == ()


def test_unreadable_slot_loads_empty(slot):
    slot.fail_reads = True
    store = RosterStore(slot)
    store.load()
    assert len(store) == 0


def test_failed_write_rolls_back_every_mutation(store, slot):
    kept = store.create(_fields())
    slot.fail_writes = True

    with pytest.raises(PersistFailedError):
        store.create(_fields(name="Bob"))
    with pytest.raises(PersistFailedError):
        store.update(kept.id, _fields(name="Changed"))
    with pytest.raises(PersistFailedError):
        store.delete(kept.id)
    with pytest.raises(PersistFailedError):
        store.clear()

    assert store.records == (kept,)
    assert json.loads(slot.value) == [kept.to_dict()]


def test_json_file_slot_round_trip(tmp_path):
    data_file = tmp_path / "data.json"
    store = RosterStore(JsonFileSlot(data_file, "students_v1"))
    store.load()
    record = store.create(_fields())

    document = json.loads(data_file.read_text(encoding="utf-8"))
    assert json.loads(document["students_v1"]) == [record.to_dict()]

    restarted = RosterStore(JsonFileSlot(data_file, "students_v1"))
    restarted.load()
    assert restarted.records == (record,)
