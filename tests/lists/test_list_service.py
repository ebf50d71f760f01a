from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.class_attendance.class_attendance.common.text import name_key
from src.class_attendance.class_attendance.core.enums import AttendanceFilter, RosterOrder, StudentOrigin
from src.class_attendance.class_attendance.core.exceptions import DuplicateStudentError, NotFoundError, ValidationError
from src.class_attendance.class_attendance.lists.model import AttendanceList, StudentEntry
from src.class_attendance.class_attendance.lists.service import AttendanceListService, RosterService


class InMemoryLists:
    def __init__(self):
        self._items: dict[int, AttendanceList] = {}
        self._clock = datetime(2025, 3, 10, 8, 0, 0)

    def list_all(self):
        return sorted(self._items.values(), key=lambda x: x.created_at, reverse=True)

    def get_by_id(self, list_id: int) -> Optional[AttendanceList]:
        return self._items.get(list_id)

    def create(self, *, name: str) -> int:
        list_id = len(self._items) + 1
        self._clock += timedelta(minutes=1)
        self._items[list_id] = AttendanceList(list_id, name, self._clock, self._clock)
        return list_id

    def rename(self, *, list_id: int, name: str) -> bool:
        old = self._items[list_id]
        self._items[list_id] = AttendanceList(list_id, name, old.created_at, self._clock)
        return True

    def delete(self, list_id: int) -> bool:
        return self._items.pop(list_id, None) is not None


class InMemoryEntries:
    def __init__(self):
        self._rows: dict[int, StudentEntry] = {}

    def list_for_list(self, list_id: int):
        return [e for e in self._rows.values() if e.list_id == list_id]

    def get_entry(self, *, list_id: int, entry_id: int):
        e = self._rows.get(entry_id)
        return e if e and e.list_id == list_id else None

    def add_students(self, *, list_id: int, students):
        existing = {name_key(e.given_names, e.surnames) for e in self.list_for_list(list_id)}
        inserted = skipped = 0
        for st in students:
            key = name_key(st.given_names, st.surnames)
            if key in existing:
                skipped += 1
                continue
            entry_id = len(self._rows) + 1
            self._rows[entry_id] = StudentEntry(
                entry_id=entry_id,
                list_id=list_id,
                student_id=entry_id,
                given_names=st.given_names,
                surnames=st.surnames,
                origin=st.origin,
                present=st.present,
                created_at=datetime(2025, 3, 10, 9, 0, 0),
                dni=st.dni,
                phone=st.phone,
                marked_by=st.marked_by,
                original_order=st.original_order,
            )
            existing.add(key)
            inserted += 1
        return inserted, skipped

    def update_student(self, *, list_id, entry_id, given_names, surnames, dni, phone):
        e = self._rows[entry_id]
        self._rows[entry_id] = StudentEntry(
            **{**e.__dict__, "given_names": given_names, "surnames": surnames, "dni": dni, "phone": phone}
        )
        return True

    def set_attendance(self, *, list_id, entry_id, present, marked_by):
        e = self._rows[entry_id]
        self._rows[entry_id] = StudentEntry(**{**e.__dict__, "present": present, "marked_by": marked_by})
        return True

    def remove_entry(self, *, list_id, entry_id):
        return self._rows.pop(entry_id, None) is not None


@pytest.fixture
def repos():
    return InMemoryLists(), InMemoryEntries()


@pytest.fixture
def roster(repos):
    return RosterService(*repos)


def _seed_excel(entries: InMemoryEntries, list_id: int, names):
    from src.class_attendance.class_attendance.lists.model import NewStudent

    entries.add_students(
        list_id=list_id,
        students=[
            NewStudent(given_names=g, surnames=s, origin=StudentOrigin.EXCEL, original_order=pos)
            for pos, (g, s) in names
        ],
    )


def test_create_list_requires_name(repos):
    svc = AttendanceListService(repos[0])

    with pytest.raises(ValidationError):
        svc.create_list("   ")

    created = svc.create_list("  Álgebra - Grupo 2 ")
    assert created.name == "Álgebra - Grupo 2"


def test_lists_newest_first(repos):
    svc = AttendanceListService(repos[0])
    svc.create_list("Lunes")
    svc.create_list("Martes")

    assert [x.name for x in svc.list_lists()] == ["Martes", "Lunes"]


def test_delete_missing_list_raises(repos):
    with pytest.raises(NotFoundError):
        AttendanceListService(repos[0]).delete_list(42)


def test_manual_student_is_present_and_cleaned(repos, roster):
    list_id = repos[0].create(name="Lunes")

    entry = roster.add_manual_student(
        list_id,
        given_names=" Rosa ",
        surnames=" Flores Ramos ",
        dni="4567-8912",
        phone="987 654 321",
        marked_by="docente@utp.edu.pe",
    )

    assert entry.given_names == "Rosa"
    assert entry.surnames == "Flores Ramos"
    assert entry.dni == "45678912"
    assert entry.phone == "987654321"
    assert entry.present is True
    assert entry.origin == StudentOrigin.MANUAL


@pytest.mark.parametrize(
    "fields",
    [
        {"given_names": "Rosa", "surnames": ""},
        {"given_names": "", "surnames": "Flores"},
        {"given_names": "Rosa", "surnames": "Flores", "dni": "1234567"},
        {"given_names": "Rosa", "surnames": "Flores", "phone": "12345"},
    ],
)
def test_manual_student_validation(repos, roster, fields):
    list_id = repos[0].create(name="Lunes")

    with pytest.raises(ValidationError):
        roster.add_manual_student(list_id, **fields)


def test_manual_student_duplicate_name(repos, roster):
    list_id = repos[0].create(name="Lunes")
    roster.add_manual_student(list_id, given_names="Rosa", surnames="Flores")

    with pytest.raises(DuplicateStudentError):
        roster.add_manual_student(list_id, given_names="  ROSA", surnames="flores ")


def test_manual_student_in_missing_list(roster):
    with pytest.raises(NotFoundError):
        roster.add_manual_student(7, given_names="Rosa", surnames="Flores")


def test_toggle_attendance_records_marker(repos, roster):
    list_id = repos[0].create(name="Lunes")
    _seed_excel(repos[1], list_id, [(1, ("Luis", "Rojas"))])
    entry_id = repos[1].list_for_list(list_id)[0].entry_id

    marked = roster.toggle_attendance(list_id, entry_id, marked_by="jefe@utp.edu.pe")
    assert marked.present is True
    assert marked.marked_by == "jefe@utp.edu.pe"

    unmarked = roster.toggle_attendance(list_id, entry_id)
    assert unmarked.present is False


def test_set_attendance_on_unknown_entry(repos, roster):
    list_id = repos[0].create(name="Lunes")

    with pytest.raises(NotFoundError):
        roster.set_attendance(list_id, 99, present=True)


def test_edit_student_cannot_take_another_name(repos, roster):
    list_id = repos[0].create(name="Lunes")
    _seed_excel(repos[1], list_id, [(1, ("Luis", "Rojas")), (2, ("Carla", "Vega"))])
    carla = repos[1].list_for_list(list_id)[1]

    with pytest.raises(DuplicateStudentError):
        roster.edit_student(list_id, carla.entry_id, given_names="luis", surnames="ROJAS")

    edited = roster.edit_student(list_id, carla.entry_id, given_names="Carla", surnames="Vega Soto", dni="12345678")
    assert edited.surnames == "Vega Soto"
    assert edited.dni == "12345678"


def test_roster_original_order_puts_manual_students_last(repos, roster):
    list_id = repos[0].create(name="Lunes")
    roster.add_manual_student(list_id, given_names="Ana", surnames="Alva")
    _seed_excel(repos[1], list_id, [(3, ("Zoe", "Zapata")), (1, ("Mario", "Mendez"))])

    names = [e.given_names for e in roster.get_roster(list_id)]
    assert names == ["Mario", "Zoe", "Ana"]

    alpha = [e.given_names for e in roster.get_roster(list_id, order=RosterOrder.ALPHABETICAL)]
    assert alpha == ["Ana", "Mario", "Zoe"]


def test_roster_search_and_status_filter(repos, roster):
    list_id = repos[0].create(name="Lunes")
    roster.add_manual_student(list_id, given_names="Ana", surnames="Alva", dni="11112222")
    _seed_excel(repos[1], list_id, [(1, ("Mario", "Mendez")), (2, ("Mariana", "Soto"))])

    assert [e.given_names for e in roster.get_roster(list_id, search="mari")] == ["Mario", "Mariana"]
    assert [e.given_names for e in roster.get_roster(list_id, search="1111")] == ["Ana"]
    assert [e.given_names for e in roster.get_roster(list_id, status=AttendanceFilter.PRESENT)] == ["Ana"]
    assert [e.given_names for e in roster.get_roster(list_id, status=AttendanceFilter.ABSENT)] == ["Mario", "Mariana"]


def test_summary_for_list(repos, roster):
    list_id = repos[0].create(name="Lunes")
    roster.add_manual_student(list_id, given_names="Ana", surnames="Alva", marked_by="a@utp.edu.pe")
    _seed_excel(repos[1], list_id, [(1, ("Mario", "Mendez")), (2, ("Mariana", "Soto"))])

    summary = roster.get_summary(list_id)

    assert (summary.total, summary.present, summary.absent) == (3, 1, 2)
    assert summary.present_manual == 1
    assert summary.absent_excel == 2
