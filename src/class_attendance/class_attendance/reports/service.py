from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ExportFormat, RosterOrder
from ..core.exceptions import ValidationError
from ..lists.service import AttendanceListService, RosterService
from .exporter import MIMETYPES, export_csv, export_filename, export_xlsx


@dataclass(frozen=True)
class ExportFile:
    filename: str
    mimetype: str
    content: bytes


class ReportService:
    def __init__(self, lists: AttendanceListService, roster: RosterService):
        self._lists = lists
        self._roster = roster

    def export(self, list_id: int, fmt: str | ExportFormat, *, order: RosterOrder = RosterOrder.ORIGINAL) -> ExportFile:
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            raise ValidationError("Formato de exportación no soportado. Use xlsx o csv.") from None

        attendance_list = self._lists.get_list(list_id)
        entries = self._roster.get_roster(list_id, order=order)

        if fmt == ExportFormat.XLSX:
            content = export_xlsx(attendance_list, entries, self._roster.get_summary(list_id))
        else:
            content = export_csv(entries)

        return ExportFile(
            filename=export_filename(attendance_list.name, fmt),
            mimetype=MIMETYPES[fmt],
            content=content,
        )
