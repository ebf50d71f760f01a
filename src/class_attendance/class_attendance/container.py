from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import DEFAULT_MAX_UPLOAD_MB
from .database.connection import DatabaseConnection, DBConfig
from .lists.json_store import LocalJsonStore
from .lists.mysql_list_repository import MySQLAttendanceListRepository
from .lists.mysql_student_repository import MySQLStudentEntryRepository
from .lists.repository import AttendanceListRepository, StudentEntryRepository
from .lists.service import AttendanceListService, RosterService
from .reports.service import ReportService
from .roster.service import RosterImportService

STORAGE_MYSQL = "mysql"
STORAGE_LOCAL = "local"


@dataclass(frozen=True)
class Container:
    lists_repo: AttendanceListRepository
    entries_repo: StudentEntryRepository

    list_service: AttendanceListService
    roster_service: RosterService
    import_service: RosterImportService
    report_service: ReportService


def build_repositories(
    *,
    storage_backend: str,
    db_config: Optional[dict] = None,
    local_store_path: Optional[str | Path] = None,
) -> tuple[AttendanceListRepository, StudentEntryRepository]:
    backend = (storage_backend or STORAGE_MYSQL).lower()
    if backend == STORAGE_LOCAL:
        store = LocalJsonStore(local_store_path or "instance/attendance_lists.json")
        return store, store
    if backend == STORAGE_MYSQL:
        conn = DatabaseConnection(DBConfig.from_mapping(db_config or {}))
        return MySQLAttendanceListRepository(conn), MySQLStudentEntryRepository(conn)
    raise ValueError(f"Unknown STORAGE_BACKEND: {storage_backend!r}")


def build_container(
    *,
    lists_repo: AttendanceListRepository,
    entries_repo: StudentEntryRepository,
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB,
) -> Container:
    list_service = AttendanceListService(lists_repo)
    roster_service = RosterService(lists_repo, entries_repo)
    import_service = RosterImportService(lists_repo, entries_repo, max_upload_mb=max_upload_mb)
    report_service = ReportService(list_service, roster_service)

    return Container(
        lists_repo=lists_repo,
        entries_repo=entries_repo,
        list_service=list_service,
        roster_service=roster_service,
        import_service=import_service,
        report_service=report_service,
    )
