from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.text import name_key
from ..core.enums import StudentOrigin
from .model import AttendanceList, NewStudent, StudentEntry

logger = logging.getLogger(__name__)


def _empty_state() -> dict[str, Any]:
    return {
        "next_ids": {"list": 1, "student": 1, "entry": 1},
        "lists": [],
        "students": [],
        "entries": [],
    }


def _fill_missing(student: dict[str, Any], *, dni: Optional[str], phone: Optional[str]) -> None:
    # A known student keeps its contact data; new values only fill the gaps.
    if dni and not student.get("dni"):
        student["dni"] = dni
    if phone and not student.get("phone"):
        student["phone"] = phone


class LocalJsonStore:
    """Single-user storage variant: every list lives in one local JSON file.

    Implements both AttendanceListRepository and StudentEntryRepository. Each
    write rewrites the whole file through a temp file + os.replace.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    # ---- file handling -------------------------------------------------

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return _empty_state()
        with self._path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def _save(self, state: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(state, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    @staticmethod
    def _next_id(state: dict[str, Any], kind: str) -> int:
        value = int(state["next_ids"][kind])
        state["next_ids"][kind] = value + 1
        return value

    @staticmethod
    def _touch(state: dict[str, Any], list_id: int) -> None:
        for item in state["lists"]:
            if item["list_id"] == list_id:
                item["updated_at"] = now_local().isoformat()

    # ---- attendance lists ----------------------------------------------

    @staticmethod
    def _to_list(item: dict[str, Any]) -> AttendanceList:
        return AttendanceList(
            list_id=int(item["list_id"]),
            name=item["name"],
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )

    def list_all(self) -> Sequence[AttendanceList]:
        with self._lock:
            state = self._load()
        lists = [self._to_list(item) for item in state["lists"]]
        lists.sort(key=lambda x: (x.created_at, x.list_id), reverse=True)
        return lists

    def get_by_id(self, list_id: int) -> Optional[AttendanceList]:
        with self._lock:
            state = self._load()
        for item in state["lists"]:
            if item["list_id"] == list_id:
                return self._to_list(item)
        return None

    def create(self, *, name: str) -> int:
        with self._lock:
            state = self._load()
            list_id = self._next_id(state, "list")
            stamp = now_local().isoformat()
            state["lists"].append({"list_id": list_id, "name": name, "created_at": stamp, "updated_at": stamp})
            self._save(state)
        return list_id

    def rename(self, *, list_id: int, name: str) -> bool:
        with self._lock:
            state = self._load()
            for item in state["lists"]:
                if item["list_id"] == list_id:
                    item["name"] = name
                    item["updated_at"] = now_local().isoformat()
                    self._save(state)
                    return True
        return False

    def delete(self, list_id: int) -> bool:
        with self._lock:
            state = self._load()
            before = len(state["lists"])
            state["lists"] = [item for item in state["lists"] if item["list_id"] != list_id]
            if len(state["lists"]) == before:
                return False

            state["entries"] = [e for e in state["entries"] if e["list_id"] != list_id]
            self._drop_orphans(state)
            self._save(state)
        logger.info("list %s deleted from local store", list_id)
        return True

    # ---- student entries -----------------------------------------------

    @staticmethod
    def _drop_orphans(state: dict[str, Any]) -> None:
        referenced = {e["student_id"] for e in state["entries"]}
        state["students"] = [s for s in state["students"] if s["student_id"] in referenced]

    @staticmethod
    def _to_entry(entry: dict[str, Any], student: dict[str, Any]) -> StudentEntry:
        return StudentEntry(
            entry_id=int(entry["entry_id"]),
            list_id=int(entry["list_id"]),
            student_id=int(entry["student_id"]),
            given_names=student["given_names"],
            surnames=student["surnames"],
            origin=StudentOrigin(entry["origin"]),
            present=bool(entry["present"]),
            created_at=datetime.fromisoformat(entry["created_at"]),
            dni=student.get("dni"),
            phone=student.get("phone"),
            marked_by=entry.get("marked_by"),
            original_order=entry.get("original_order"),
        )

    def _entries(self, state: dict[str, Any], list_id: int) -> list[StudentEntry]:
        students = {s["student_id"]: s for s in state["students"]}
        return [
            self._to_entry(e, students[e["student_id"]])
            for e in state["entries"]
            if e["list_id"] == list_id and e["student_id"] in students
        ]

    def list_for_list(self, list_id: int) -> Sequence[StudentEntry]:
        with self._lock:
            state = self._load()
        return self._entries(state, list_id)

    def get_entry(self, *, list_id: int, entry_id: int) -> Optional[StudentEntry]:
        for entry in self.list_for_list(list_id):
            if entry.entry_id == entry_id:
                return entry
        return None

    def add_students(self, *, list_id: int, students: Sequence[NewStudent]) -> tuple[int, int]:
        inserted = 0
        skipped = 0
        with self._lock:
            state = self._load()
            in_list = {name_key(e.given_names, e.surnames) for e in self._entries(state, list_id)}
            by_key = {}
            for s in state["students"]:
                by_key.setdefault(s["name_key"], s)

            for st in students:
                key = name_key(st.given_names, st.surnames)
                if key in in_list:
                    skipped += 1
                    continue

                student = by_key.get(key)
                if student is not None:
                    _fill_missing(student, dni=st.dni, phone=st.phone)
                else:
                    student = self._new_student(
                        state, given_names=st.given_names, surnames=st.surnames, dni=st.dni, phone=st.phone
                    )
                    by_key[key] = student

                state["entries"].append(
                    {
                        "entry_id": self._next_id(state, "entry"),
                        "list_id": list_id,
                        "student_id": student["student_id"],
                        "origin": st.origin.value,
                        "present": st.present,
                        "marked_by": st.marked_by,
                        "original_order": st.original_order,
                        "created_at": now_local().isoformat(),
                    }
                )
                in_list.add(key)
                inserted += 1

            if inserted:
                self._touch(state, list_id)
                self._save(state)
        return inserted, skipped

    def _new_student(
        self,
        state: dict[str, Any],
        *,
        given_names: str,
        surnames: str,
        dni: Optional[str],
        phone: Optional[str],
    ) -> dict[str, Any]:
        student = {
            "student_id": self._next_id(state, "student"),
            "given_names": given_names,
            "surnames": surnames,
            "name_key": name_key(given_names, surnames),
            "dni": dni,
            "phone": phone,
        }
        state["students"].append(student)
        return student

    def _find_entry(self, state: dict[str, Any], list_id: int, entry_id: int) -> Optional[dict[str, Any]]:
        for e in state["entries"]:
            if e["list_id"] == list_id and e["entry_id"] == entry_id:
                return e
        return None

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
        with self._lock:
            state = self._load()
            entry = self._find_entry(state, list_id, entry_id)
            if entry is None:
                return False

            key = name_key(given_names, surnames)
            current = next(s for s in state["students"] if s["student_id"] == entry["student_id"])
            shared = any(e is not entry and e["student_id"] == current["student_id"] for e in state["entries"])
            other = next(
                (s for s in state["students"] if s["name_key"] == key and s["student_id"] != current["student_id"]),
                None,
            )

            if key == current["name_key"] or (other is None and not shared):
                current.update(given_names=given_names, surnames=surnames, name_key=key, dni=dni, phone=phone)
            else:
                # The new name already has a student, or the current one is shared: relink this entry.
                if other is None:
                    other = self._new_student(state, given_names=given_names, surnames=surnames, dni=dni, phone=phone)
                else:
                    _fill_missing(other, dni=dni, phone=phone)
                entry["student_id"] = other["student_id"]
                self._drop_orphans(state)
            self._save(state)
        return True

    def set_attendance(self, *, list_id: int, entry_id: int, present: bool, marked_by: Optional[str]) -> bool:
        with self._lock:
            state = self._load()
            entry = self._find_entry(state, list_id, entry_id)
            if entry is None:
                return False
            entry["present"] = bool(present)
            entry["marked_by"] = marked_by
            self._save(state)
        return True

    def remove_entry(self, *, list_id: int, entry_id: int) -> bool:
        with self._lock:
            state = self._load()
            entry = self._find_entry(state, list_id, entry_id)
            if entry is None:
                return False
            state["entries"].remove(entry)
            self._drop_orphans(state)
            self._save(state)
        return True
