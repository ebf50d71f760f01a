from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_MAX_UPLOAD_MB
from ..core.enums import StudentOrigin
from ..core.exceptions import NotFoundError
from ..lists.model import NewStudent
from ..lists.repository import AttendanceListRepository, StudentEntryRepository
from .normalizer import RosterNormalizer
from .reader import read_table, validate_upload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    imported: int
    duplicates_skipped: int
    already_in_list: int

    def message(self) -> str:
        msg = f"{self.imported} estudiantes importados"
        if self.duplicates_skipped:
            msg += f", {self.duplicates_skipped} duplicados omitidos en el archivo"
        if self.already_in_list:
            msg += f", {self.already_in_list} ya estaban en la lista"
        return msg


class RosterImportService:
    """Use case: fill a list from an uploaded spreadsheet.

    validate -> read -> normalize -> forward to the store. The store skips
    names already present in the list; the normalizer only de-duplicates
    within the file.
    """

    def __init__(
        self,
        lists: AttendanceListRepository,
        entries: StudentEntryRepository,
        *,
        normalizer: Optional[RosterNormalizer] = None,
        max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB,
    ):
        self._lists = lists
        self._entries = entries
        self._normalizer = normalizer or RosterNormalizer()
        self._max_upload_mb = int(max_upload_mb)

    def import_file(self, list_id: int, *, filename: str, data: bytes) -> ImportResult:
        if not self._lists.get_by_id(list_id):
            raise NotFoundError("La lista de asistencia no existe")

        validate_upload(filename, len(data), max_mb=self._max_upload_mb)
        result = self._normalizer.normalize_table(read_table(data, filename))

        students = [
            NewStudent(
                given_names=r.given_names,
                surnames=r.surnames,
                origin=StudentOrigin.EXCEL,
                present=False,
                original_order=r.original_order,
            )
            for r in result.records
        ]
        inserted, existing = self._entries.add_students(list_id=list_id, students=students) if students else (0, 0)

        logger.info(
            "roster import list=%s file=%s imported=%s duplicates=%s existing=%s",
            list_id,
            filename,
            inserted,
            result.duplicates_skipped,
            existing,
        )
        return ImportResult(imported=inserted, duplicates_skipped=result.duplicates_skipped, already_in_list=existing)
