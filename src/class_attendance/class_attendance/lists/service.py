from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.text import name_key
from ..common.validators import optional_digits, require_non_empty
from ..core.constants import DNI_DIGITS, PHONE_DIGITS
from ..core.enums import AttendanceFilter, RosterOrder, StudentOrigin
from ..core.exceptions import DuplicateStudentError, NotFoundError, ValidationError
from ..reports.summary import AttendanceSummary, build_summary
from .model import AttendanceList, NewStudent, StudentEntry
from .repository import AttendanceListRepository, StudentEntryRepository

logger = logging.getLogger(__name__)


class AttendanceListService:
    """Use cases: create/rename/delete attendance lists."""

    def __init__(self, lists: AttendanceListRepository):
        self._lists = lists

    def list_lists(self) -> Sequence[AttendanceList]:
        return self._lists.list_all()

    def get_list(self, list_id: int) -> AttendanceList:
        found = self._lists.get_by_id(list_id)
        if not found:
            raise NotFoundError("La lista de asistencia no existe")
        return found

    def create_list(self, name: Optional[str]) -> AttendanceList:
        name = require_non_empty(name, "El nombre de la lista")
        list_id = self._lists.create(name=name)
        logger.info("attendance list created: id=%s name=%r", list_id, name)
        return self.get_list(list_id)

    def rename_list(self, list_id: int, name: Optional[str]) -> AttendanceList:
        name = require_non_empty(name, "El nombre de la lista")
        self.get_list(list_id)
        self._lists.rename(list_id=list_id, name=name)
        return self.get_list(list_id)

    def delete_list(self, list_id: int) -> None:
        if not self._lists.delete(list_id):
            raise NotFoundError("La lista de asistencia no existe")
        logger.info("attendance list deleted: id=%s", list_id)


def sort_roster(entries: Sequence[StudentEntry], order: RosterOrder) -> list[StudentEntry]:
    if order == RosterOrder.ALPHABETICAL:
        return sorted(entries, key=lambda s: (s.surnames.lower(), s.given_names.lower()))

    # File order first; entries without a file position keep insertion order after them.
    with_order = sorted((e for e in entries if e.original_order is not None), key=lambda e: e.original_order)
    without = [e for e in entries if e.original_order is None]
    return with_order + without


def filter_roster(entries: Sequence[StudentEntry], *, search: str = "", status: AttendanceFilter = AttendanceFilter.ALL):
    term = (search or "").strip().lower()
    out = []
    for s in entries:
        if term and not (
            term in s.given_names.lower() or term in s.surnames.lower() or term in (s.dni or "").lower()
        ):
            continue
        if status == AttendanceFilter.PRESENT and not s.present:
            continue
        if status == AttendanceFilter.ABSENT and s.present:
            continue
        out.append(s)
    return out


class RosterService:
    """Use cases on the students of one list: add, edit, remove, mark attendance.

    A name already known from another list links to the same student; DNI and
    phone sent with it only fill values that student is missing.
    """

    def __init__(self, lists: AttendanceListRepository, entries: StudentEntryRepository):
        self._lists = lists
        self._entries = entries

    def _require_list(self, list_id: int) -> AttendanceList:
        found = self._lists.get_by_id(list_id)
        if not found:
            raise NotFoundError("La lista de asistencia no existe")
        return found

    def _require_entry(self, list_id: int, entry_id: int) -> StudentEntry:
        entry = self._entries.get_entry(list_id=list_id, entry_id=entry_id)
        if not entry:
            raise NotFoundError("El estudiante no existe en esta lista")
        return entry

    def _clean_fields(self, given_names, surnames, dni, phone) -> tuple[str, str, Optional[str], Optional[str]]:
        if not (given_names or "").strip() or not (surnames or "").strip():
            raise ValidationError("Nombre y apellido son obligatorios")
        return (
            given_names.strip(),
            surnames.strip(),
            optional_digits(dni, "DNI", DNI_DIGITS),
            optional_digits(phone, "teléfono", PHONE_DIGITS),
        )

    def _ensure_unique(self, list_id: int, given_names: str, surnames: str, *, ignore_entry: Optional[int] = None):
        key = name_key(given_names, surnames)
        for s in self._entries.list_for_list(list_id):
            if s.entry_id != ignore_entry and name_key(s.given_names, s.surnames) == key:
                raise DuplicateStudentError("Este estudiante ya existe en la lista")

    def add_manual_student(
        self,
        list_id: int,
        *,
        given_names: Optional[str],
        surnames: Optional[str],
        dni: Optional[str] = None,
        phone: Optional[str] = None,
        marked_by: Optional[str] = None,
    ) -> StudentEntry:
        self._require_list(list_id)
        given_names, surnames, dni, phone = self._clean_fields(given_names, surnames, dni, phone)
        self._ensure_unique(list_id, given_names, surnames)

        # Students added by hand are in the room, so they start as present.
        inserted, _ = self._entries.add_students(
            list_id=list_id,
            students=[
                NewStudent(
                    given_names=given_names,
                    surnames=surnames,
                    origin=StudentOrigin.MANUAL,
                    present=True,
                    dni=dni,
                    phone=phone,
                    marked_by=marked_by,
                )
            ],
        )
        if not inserted:
            raise DuplicateStudentError("Este estudiante ya existe en la lista")

        key = name_key(given_names, surnames)
        for s in self._entries.list_for_list(list_id):
            if name_key(s.given_names, s.surnames) == key:
                return s
        raise NotFoundError("El estudiante no existe en esta lista")

    def edit_student(
        self,
        list_id: int,
        entry_id: int,
        *,
        given_names: Optional[str],
        surnames: Optional[str],
        dni: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> StudentEntry:
        self._require_entry(list_id, entry_id)
        given_names, surnames, dni, phone = self._clean_fields(given_names, surnames, dni, phone)
        self._ensure_unique(list_id, given_names, surnames, ignore_entry=entry_id)

        self._entries.update_student(
            list_id=list_id,
            entry_id=entry_id,
            given_names=given_names,
            surnames=surnames,
            dni=dni,
            phone=phone,
        )
        return self._require_entry(list_id, entry_id)

    def remove_student(self, list_id: int, entry_id: int) -> None:
        self._require_entry(list_id, entry_id)
        self._entries.remove_entry(list_id=list_id, entry_id=entry_id)

    def set_attendance(self, list_id: int, entry_id: int, *, present: bool, marked_by: Optional[str] = None) -> StudentEntry:
        self._require_entry(list_id, entry_id)
        self._entries.set_attendance(list_id=list_id, entry_id=entry_id, present=bool(present), marked_by=marked_by)
        return self._require_entry(list_id, entry_id)

    def toggle_attendance(self, list_id: int, entry_id: int, *, marked_by: Optional[str] = None) -> StudentEntry:
        current = self._require_entry(list_id, entry_id)
        return self.set_attendance(list_id, entry_id, present=not current.present, marked_by=marked_by)

    def get_roster(
        self,
        list_id: int,
        *,
        search: str = "",
        status: AttendanceFilter = AttendanceFilter.ALL,
        order: RosterOrder = RosterOrder.ORIGINAL,
    ) -> list[StudentEntry]:
        self._require_list(list_id)
        entries = self._entries.list_for_list(list_id)
        return sort_roster(filter_roster(entries, search=search, status=status), order)

    def get_summary(self, list_id: int) -> AttendanceSummary:
        self._require_list(list_id)
        return build_summary(self._entries.list_for_list(list_id))
