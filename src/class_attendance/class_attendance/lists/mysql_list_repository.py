from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceList
from .repository import AttendanceListRepository


def _to_list(row) -> AttendanceList:
    return AttendanceList(
        list_id=int(row["list_id"]),
        name=row["name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class MySQLAttendanceListRepository(AttendanceListRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceList]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT list_id, name, created_at, updated_at
                FROM attendance_lists
                ORDER BY created_at DESC, list_id DESC
                """
            )
            return [_to_list(r) for r in fetchall(cur)]

    def get_by_id(self, list_id: int) -> Optional[AttendanceList]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT list_id, name, created_at, updated_at
                FROM attendance_lists
                WHERE list_id=%s
                """,
                (list_id,),
            )
            row = fetchone(cur)
            return _to_list(row) if row else None

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO attendance_lists (name) VALUES (%s)", (name,))
            return int(cur.lastrowid)

    def rename(self, *, list_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_lists SET name=%s WHERE list_id=%s", (name, list_id))
            return cur.rowcount > 0

    def delete(self, list_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM list_students WHERE list_id=%s", (list_id,))
            student_ids = [int(r["student_id"]) for r in fetchall(cur)]

            # list_students rows go away with the list (ON DELETE CASCADE).
            cur.execute("DELETE FROM attendance_lists WHERE list_id=%s", (list_id,))
            deleted = cur.rowcount > 0

            if deleted and student_ids:
                placeholders = ", ".join(["%s"] * len(student_ids))
                cur.execute(
                    f"""
                    DELETE FROM students
                    WHERE student_id IN ({placeholders})
                      AND NOT EXISTS (SELECT 1 FROM list_students ls WHERE ls.student_id = students.student_id)
                    """,
                    tuple(student_ids),
                )
            return deleted
