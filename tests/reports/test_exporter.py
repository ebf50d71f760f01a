from __future__ import annotations

import io
from datetime import date, datetime

import pandas as pd
import pytest

from src.class_attendance.class_attendance.core.constants import STUDENTS_SHEET_NAME, SUMMARY_SHEET_NAME
from src.class_attendance.class_attendance.core.enums import ExportFormat, RosterOrder, StudentOrigin
from src.class_attendance.class_attendance.core.exceptions import NotFoundError, ValidationError
from src.class_attendance.class_attendance.lists.model import AttendanceList, StudentEntry
from src.class_attendance.class_attendance.lists.service import AttendanceListService, RosterService
from src.class_attendance.class_attendance.reports.exporter import (
    STUDENT_COLUMNS,
    export_csv,
    export_filename,
    export_xlsx,
)
from src.class_attendance.class_attendance.reports.service import ReportService
from src.class_attendance.class_attendance.reports.summary import build_summary

STAMP = datetime(2025, 3, 10, 8, 30, 0)


@pytest.fixture
def entries():
    return [
        StudentEntry(1, 1, 1, "María José", "García López", StudentOrigin.EXCEL, True, STAMP, marked_by="a@utp.edu.pe"),
        StudentEntry(2, 1, 2, "Luis", "Rojas", StudentOrigin.MANUAL, False, STAMP, dni="45678912"),
    ]


def test_export_filename_replaces_unsafe_characters():
    assert export_filename("Álgebra 2-B", ExportFormat.XLSX, date(2025, 3, 10)) == "asistencia__lgebra_2_B_2025-03-10.xlsx"
    assert export_filename("", ExportFormat.CSV, date(2025, 3, 10)) == "asistencia_lista_2025-03-10.csv"


def test_xlsx_has_students_and_summary_sheets(entries):
    attendance_list = AttendanceList(1, "Álgebra", STAMP, STAMP)

    content = export_xlsx(attendance_list, entries, build_summary(entries), exported_at=STAMP)
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, header=None, engine="openpyxl")

    assert list(sheets) == [STUDENTS_SHEET_NAME, SUMMARY_SHEET_NAME]

    students = pd.read_excel(io.BytesIO(content), sheet_name=STUDENTS_SHEET_NAME, dtype=str, engine="openpyxl")
    assert list(students.columns) == STUDENT_COLUMNS
    assert students["Nombres"].tolist() == ["María José", "Luis"]
    assert students["Asistencia"].tolist() == ["Presente", "Ausente"]
    assert students["DNI"].tolist() == ["-", "45678912"]

    summary = sheets[SUMMARY_SHEET_NAME]
    labels = dict(zip(summary[0], summary[1]))
    assert labels["Lista:"] == "Álgebra"
    assert labels["Fecha de exportación:"] == "10/03/2025 08:30:00"
    assert labels["Porcentaje de asistencia"] == "50.0%"
    assert labels["a@utp.edu.pe"] == 1


def test_csv_starts_with_bom(entries):
    content = export_csv(entries)

    assert content.startswith(b"\xef\xbb\xbf")
    lines = content.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(STUDENT_COLUMNS)
    assert lines[1].startswith("1,García López,María José")


def test_report_service_export_in_alphabetical_order(store):
    lists = AttendanceListService(store)
    roster = RosterService(store, store)
    created = lists.create_list("Química")
    roster.add_manual_student(created.list_id, given_names="Zoe", surnames="Zapata")
    roster.add_manual_student(created.list_id, given_names="Ana", surnames="Alva")

    export = ReportService(lists, roster).export(created.list_id, "csv", order=RosterOrder.ALPHABETICAL)

    assert export.filename.startswith("asistencia_Qu_mica_")
    assert export.mimetype == "text/csv"
    text = export.content.decode("utf-8-sig").splitlines()
    assert text[1].startswith("1,Alva,Ana")
    assert text[2].startswith("2,Zapata,Zoe")


def test_report_service_rejects_unknown_format(store):
    lists = AttendanceListService(store)
    service = ReportService(lists, RosterService(store, store))
    created = lists.create_list("Química")

    with pytest.raises(ValidationError):
        service.export(created.list_id, "pdf")
    with pytest.raises(NotFoundError):
        service.export(999, "csv")
