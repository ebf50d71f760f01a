from __future__ import annotations

from typing import Optional, Sequence

from ..common.text import name_key
from ..core.enums import StudentOrigin
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, optional_str
from .model import NewStudent, StudentEntry
from .repository import StudentEntryRepository

_ENTRY_COLUMNS = """
    ls.entry_id, ls.list_id, ls.student_id, ls.origin, ls.present, ls.marked_by,
    ls.original_order, ls.created_at,
    s.given_names, s.surnames, s.dni, s.phone
"""


def _to_entry(row) -> StudentEntry:
    original_order = row.get("original_order")
    return StudentEntry(
        entry_id=int(row["entry_id"]),
        list_id=int(row["list_id"]),
        student_id=int(row["student_id"]),
        given_names=row["given_names"],
        surnames=row["surnames"] or "",
        origin=StudentOrigin(row["origin"]),
        present=as_bool(row["present"]),
        created_at=row["created_at"],
        dni=optional_str(row.get("dni")),
        phone=optional_str(row.get("phone")),
        marked_by=optional_str(row.get("marked_by")),
        original_order=int(original_order) if original_order is not None else None,
    )


def _insert_student(cur, given_names: str, surnames: str, *, dni: Optional[str], phone: Optional[str]) -> int:
    cur.execute(
        """
        INSERT INTO students (given_names, surnames, name_key, dni, phone)
        VALUES (%s, %s, %s, %s, %s)
        """,
        (given_names, surnames, name_key(given_names, surnames), dni, phone),
    )
    return int(cur.lastrowid)


def _fill_missing(cur, student_id: int, *, dni: Optional[str], phone: Optional[str]) -> None:
    # A known student keeps its contact data; new values only fill the gaps.
    cur.execute(
        """
        UPDATE students
        SET dni=COALESCE(NULLIF(dni, ''), %s), phone=COALESCE(NULLIF(phone, ''), %s)
        WHERE student_id=%s
        """,
        (dni, phone, student_id),
    )


def _delete_if_orphan(cur, student_id: int) -> None:
    cur.execute(
        """
        DELETE FROM students
        WHERE student_id=%s
          AND NOT EXISTS (SELECT 1 FROM list_students ls WHERE ls.student_id = students.student_id)
        """,
        (student_id,),
    )


class MySQLStudentEntryRepository(StudentEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_list(self, list_id: int) -> Sequence[StudentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM list_students ls
                JOIN students s ON s.student_id = ls.student_id
                WHERE ls.list_id=%s
                ORDER BY ls.entry_id
                """,
                (list_id,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def get_entry(self, *, list_id: int, entry_id: int) -> Optional[StudentEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM list_students ls
                JOIN students s ON s.student_id = ls.student_id
                WHERE ls.list_id=%s AND ls.entry_id=%s
                """,
                (list_id, entry_id),
            )
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def add_students(self, *, list_id: int, students: Sequence[NewStudent]) -> tuple[int, int]:
        inserted = 0
        skipped = 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.name_key
                FROM list_students ls
                JOIN students s ON s.student_id = ls.student_id
                WHERE ls.list_id=%s
                """,
                (list_id,),
            )
            in_list = {r["name_key"] for r in fetchall(cur)}

            for st in students:
                key = name_key(st.given_names, st.surnames)
                if key in in_list:
                    skipped += 1
                    continue

                # A student already known from another list is linked, not duplicated.
                cur.execute(
                    "SELECT student_id FROM students WHERE name_key=%s ORDER BY student_id LIMIT 1",
                    (key,),
                )
                found = fetchone(cur)
                if found:
                    student_id = int(found["student_id"])
                    _fill_missing(cur, student_id, dni=st.dni, phone=st.phone)
                else:
                    student_id = _insert_student(cur, st.given_names, st.surnames, dni=st.dni, phone=st.phone)

                cur.execute(
                    """
                    INSERT INTO list_students (list_id, student_id, origin, present, marked_by, original_order)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (list_id, student_id, st.origin.value, int(st.present), st.marked_by, st.original_order),
                )
                in_list.add(key)
                inserted += 1

            if inserted:
                cur.execute("UPDATE attendance_lists SET updated_at=NOW() WHERE list_id=%s", (list_id,))
        return inserted, skipped

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
        key = name_key(given_names, surnames)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ls.student_id, s.name_key
                FROM list_students ls
                JOIN students s ON s.student_id = ls.student_id
                WHERE ls.list_id=%s AND ls.entry_id=%s
                """,
                (list_id, entry_id),
            )
            row = fetchone(cur)
            if not row:
                return False
            student_id = int(row["student_id"])

            cur.execute(
                "SELECT COUNT(*) AS n FROM list_students WHERE student_id=%s AND entry_id<>%s",
                (student_id, entry_id),
            )
            shared = int(fetchone(cur)["n"]) > 0
            cur.execute(
                "SELECT student_id FROM students WHERE name_key=%s AND student_id<>%s ORDER BY student_id LIMIT 1",
                (key, student_id),
            )
            other = fetchone(cur)

            if key == row["name_key"] or (other is None and not shared):
                cur.execute(
                    """
                    UPDATE students
                    SET given_names=%s, surnames=%s, name_key=%s, dni=%s, phone=%s
                    WHERE student_id=%s
                    """,
                    (given_names, surnames, key, dni, phone, student_id),
                )
                return True

            # The new name already has a student, or the current one is shared: relink this entry.
            if other:
                target_id = int(other["student_id"])
                _fill_missing(cur, target_id, dni=dni, phone=phone)
            else:
                target_id = _insert_student(cur, given_names, surnames, dni=dni, phone=phone)
            cur.execute("UPDATE list_students SET student_id=%s WHERE entry_id=%s", (target_id, entry_id))
            _delete_if_orphan(cur, student_id)
            return True

    def set_attendance(self, *, list_id: int, entry_id: int, present: bool, marked_by: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE list_students
                SET present=%s, marked_by=%s
                WHERE list_id=%s AND entry_id=%s
                """,
                (int(present), marked_by, list_id, entry_id),
            )
            return cur.rowcount > 0

    def remove_entry(self, *, list_id: int, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id FROM list_students WHERE list_id=%s AND entry_id=%s",
                (list_id, entry_id),
            )
            row = fetchone(cur)
            if not row:
                return False
            student_id = int(row["student_id"])

            cur.execute("DELETE FROM list_students WHERE entry_id=%s", (entry_id,))
            _delete_if_orphan(cur, student_id)
            return True
