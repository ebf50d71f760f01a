from __future__ import annotations

from enum import Enum


class StudentOrigin(str, Enum):
    """Where a student entry came from: a spreadsheet import or the manual form."""

    EXCEL = "Excel"
    MANUAL = "Manual"


class AttendanceFilter(str, Enum):
    ALL = "todos"
    PRESENT = "presentes"
    ABSENT = "ausentes"


class RosterOrder(str, Enum):
    """Display/export order of a roster."""

    ORIGINAL = "original"
    ALPHABETICAL = "alfabetico"


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    CSV = "csv"
