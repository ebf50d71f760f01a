from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceList, NewStudent, StudentEntry


class AttendanceListRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceList]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, list_id: int) -> Optional[AttendanceList]:
        raise NotImplementedError

    def create(self, *, name: str) -> int:
        raise NotImplementedError

    def rename(self, *, list_id: int, name: str) -> bool:
        raise NotImplementedError

    def delete(self, list_id: int) -> bool:
        """Delete the list, its entries, and students left without any list."""

        raise NotImplementedError


class StudentEntryRepository(Protocol):
    def list_for_list(self, list_id: int) -> Sequence[StudentEntry]:
        raise NotImplementedError

    def get_entry(self, *, list_id: int, entry_id: int) -> Optional[StudentEntry]:
        raise NotImplementedError

    def add_students(self, *, list_id: int, students: Sequence[NewStudent]) -> tuple[int, int]:
        """Insert students, skipping names already in the list.

        Returns (inserted, skipped_existing).
        """

        raise NotImplementedError

    def update_student(
        self,
        *,
        list_id: int,
        entry_id: int,
        given_names: str,
        surnames: str,
        dni: Optional[str],
        phone: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_attendance(self, *, list_id: int, entry_id: int, present: bool, marked_by: Optional[str]) -> bool:
        raise NotImplementedError

    def remove_entry(self, *, list_id: int, entry_id: int) -> bool:
        """Remove the entry; drop the student record when no list references it."""

        raise NotImplementedError
