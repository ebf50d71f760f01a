from __future__ import annotations

import io
import logging
import re
from datetime import date, datetime
from typing import Optional, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..common.datetime_utils import now_local
from ..core.constants import EXPORT_TITLE, STUDENTS_SHEET_NAME, SUMMARY_SHEET_NAME
from ..core.enums import ExportFormat
from ..core.exceptions import ExportError
from ..lists.model import AttendanceList, StudentEntry
from .summary import AttendanceSummary

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = ["N", "Apellidos", "Nombres", "DNI", "Teléfono", "Origen", "Asistencia", "Marcado por"]
_STUDENT_WIDTHS = [5, 24, 24, 12, 14, 10, 12, 28]

MIMETYPES = {
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv",
}


def export_filename(list_name: str, fmt: ExportFormat, today: Optional[date] = None) -> str:
    today = today or date.today()
    safe = re.sub(r"[^a-zA-Z0-9]", "_", list_name or "") or "lista"
    return f"asistencia_{safe}_{today.strftime('%Y-%m-%d')}.{fmt.value}"


def students_frame(entries: Sequence[StudentEntry]) -> pd.DataFrame:
    rows = [
        [
            idx,
            s.surnames or "-",
            s.given_names,
            s.dni or "-",
            s.phone or "-",
            s.origin.value,
            "Presente" if s.present else "Ausente",
            s.marked_by or "-",
        ]
        for idx, s in enumerate(entries, start=1)
    ]
    return pd.DataFrame(rows, columns=STUDENT_COLUMNS)


def summary_rows(list_name: str, summary: AttendanceSummary, *, exported_at: datetime) -> list[list]:
    rows: list[list] = [
        [EXPORT_TITLE, ""],
        ["Lista:", list_name],
        ["Fecha de exportación:", exported_at.strftime("%d/%m/%Y %H:%M:%S")],
        ["", ""],
        ["ESTADÍSTICAS GENERALES", ""],
        ["Total de estudiantes", summary.total],
        ["Estudiantes presentes", summary.present],
        ["Estudiantes ausentes", summary.absent],
        ["Porcentaje de asistencia", f"{summary.attendance_rate:.1f}%"],
        ["", ""],
        ["DESGLOSE POR ORIGEN", ""],
        ["Presentes del Excel", summary.present_excel],
        ["Presentes agregados manualmente", summary.present_manual],
        ["Ausentes del Excel", summary.absent_excel],
        ["Ausentes agregados manualmente", summary.absent_manual],
        ["", ""],
        ["DESGLOSE POR USUARIO (presentes)", ""],
    ]
    if summary.by_marker:
        rows.extend([who, n] for who, n in summary.by_marker)
    else:
        rows.append(["No hay registros", ""])
    return rows


def export_xlsx(
    attendance_list: AttendanceList,
    entries: Sequence[StudentEntry],
    summary: AttendanceSummary,
    *,
    exported_at: Optional[datetime] = None,
) -> bytes:
    """Workbook with the student sheet and the summary sheet."""

    exported_at = exported_at or now_local()
    out = io.BytesIO()
    try:
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            students_frame(entries).to_excel(writer, index=False, sheet_name=STUDENTS_SHEET_NAME)
            pd.DataFrame(summary_rows(attendance_list.name, summary, exported_at=exported_at)).to_excel(
                writer, index=False, header=False, sheet_name=SUMMARY_SHEET_NAME
            )

            ws_students = writer.sheets[STUDENTS_SHEET_NAME]
            for col, width in enumerate(_STUDENT_WIDTHS, start=1):
                ws_students.column_dimensions[get_column_letter(col)].width = width
            ws_summary = writer.sheets[SUMMARY_SHEET_NAME]
            ws_summary.column_dimensions["A"].width = 34
            ws_summary.column_dimensions["B"].width = 30
    except Exception as e:
        logger.exception("xlsx export failed for list %s", attendance_list.list_id)
        raise ExportError("Error al exportar a Excel") from e

    return out.getvalue()


def export_csv(entries: Sequence[StudentEntry]) -> bytes:
    try:
        text = students_frame(entries).to_csv(index=False)
    except Exception as e:
        raise ExportError("Error al exportar a CSV") from e
    # BOM so spreadsheet programs detect UTF-8 accents.
    return text.encode("utf-8-sig")
