from __future__ import annotations

from .model import AttendanceList, StudentEntry


def list_to_dict(item: AttendanceList) -> dict:
    return {
        "id": item.list_id,
        "name": item.name,
        "created_at": item.created_at.isoformat(),
        "updated_at": item.updated_at.isoformat(),
    }


def entry_to_dict(s: StudentEntry) -> dict:
    return {
        "id": s.entry_id,
        "student_id": s.student_id,
        "given_names": s.given_names,
        "surnames": s.surnames,
        "dni": s.dni,
        "phone": s.phone,
        "origin": s.origin.value,
        "present": s.present,
        "marked_by": s.marked_by,
        "original_order": s.original_order,
        "created_at": s.created_at.isoformat(),
    }
