from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import StudentOrigin


@dataclass(frozen=True)
class AttendanceList:
    """Domain entity: a named attendance list (one class session)."""

    list_id: int
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StudentEntry:
    """A student's membership in one list, with the attendance mark."""

    entry_id: int
    list_id: int
    student_id: int
    given_names: str
    surnames: str
    origin: StudentOrigin
    present: bool
    created_at: datetime
    dni: Optional[str] = None
    phone: Optional[str] = None
    marked_by: Optional[str] = None
    original_order: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.given_names} {self.surnames}".strip()


@dataclass(frozen=True)
class NewStudent:
    """Write-model passed to the store when adding students to a list."""

    given_names: str
    surnames: str
    origin: StudentOrigin
    present: bool = False
    dni: Optional[str] = None
    phone: Optional[str] = None
    marked_by: Optional[str] = None
    original_order: Optional[int] = None
