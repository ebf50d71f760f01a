from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_errors, fail, parse_bool
from ..core.enums import AttendanceFilter, RosterOrder
from ..container import Container
from .serializers import entry_to_dict, list_to_dict


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _marked_by(data: dict):
        # Identity comes from the caller; authentication is handled outside this app.
        return (data.get("marked_by") or request.headers.get("X-Marked-By") or "").strip() or None

    @app.route("/api/lists", methods=["GET"], endpoint="lists_index")
    @api_errors
    def lists_index():
        items = container.list_service.list_lists()
        return jsonify({"success": True, "lists": [list_to_dict(i) for i in items]})

    @app.route("/api/lists", methods=["POST"], endpoint="lists_create")
    @api_errors
    def lists_create():
        created = container.list_service.create_list(_payload().get("name"))
        return jsonify({"success": True, "message": "Lista creada", "list": list_to_dict(created)}), 201

    @app.route("/api/lists/<int:list_id>", methods=["PATCH"], endpoint="lists_rename")
    @api_errors
    def lists_rename(list_id: int):
        renamed = container.list_service.rename_list(list_id, _payload().get("name"))
        return jsonify({"success": True, "message": "Lista actualizada", "list": list_to_dict(renamed)})

    @app.route("/api/lists/<int:list_id>", methods=["DELETE"], endpoint="lists_delete")
    @api_errors
    def lists_delete(list_id: int):
        container.list_service.delete_list(list_id)
        return jsonify({"success": True, "message": "Lista eliminada"})

    @app.route("/api/lists/<int:list_id>/students", methods=["GET"], endpoint="students_index")
    @api_errors
    def students_index(list_id: int):
        try:
            status = AttendanceFilter(request.args.get("status") or AttendanceFilter.ALL.value)
            order = RosterOrder(request.args.get("order") or RosterOrder.ORIGINAL.value)
        except ValueError:
            return fail("Parámetro de filtro u orden no válido")

        roster = container.roster_service.get_roster(
            list_id,
            search=request.args.get("search", ""),
            status=status,
            order=order,
        )
        return jsonify({"success": True, "students": [entry_to_dict(s) for s in roster]})

    @app.route("/api/lists/<int:list_id>/students", methods=["POST"], endpoint="students_create")
    @api_errors
    def students_create(list_id: int):
        data = _payload()
        entry = container.roster_service.add_manual_student(
            list_id,
            given_names=data.get("given_names"),
            surnames=data.get("surnames"),
            dni=data.get("dni"),
            phone=data.get("phone"),
            marked_by=_marked_by(data),
        )
        return jsonify({"success": True, "message": "Estudiante agregado", "student": entry_to_dict(entry)}), 201

    @app.route("/api/lists/<int:list_id>/students/<int:entry_id>", methods=["PATCH"], endpoint="students_edit")
    @api_errors
    def students_edit(list_id: int, entry_id: int):
        data = _payload()
        entry = container.roster_service.edit_student(
            list_id,
            entry_id,
            given_names=data.get("given_names"),
            surnames=data.get("surnames"),
            dni=data.get("dni"),
            phone=data.get("phone"),
        )
        return jsonify({"success": True, "message": "Estudiante editado correctamente.", "student": entry_to_dict(entry)})

    @app.route("/api/lists/<int:list_id>/students/<int:entry_id>", methods=["DELETE"], endpoint="students_delete")
    @api_errors
    def students_delete(list_id: int, entry_id: int):
        container.roster_service.remove_student(list_id, entry_id)
        return jsonify({"success": True, "message": "Estudiante eliminado correctamente."})

    @app.route(
        "/api/lists/<int:list_id>/students/<int:entry_id>/attendance",
        methods=["POST"],
        endpoint="students_attendance",
    )
    @api_errors
    def students_attendance(list_id: int, entry_id: int):
        """Set attendance when "present" is sent, otherwise toggle it."""

        data = _payload()
        if "present" in data:
            entry = container.roster_service.set_attendance(
                list_id, entry_id, present=parse_bool(data["present"]), marked_by=_marked_by(data)
            )
        else:
            entry = container.roster_service.toggle_attendance(list_id, entry_id, marked_by=_marked_by(data))
        return jsonify({"success": True, "student": entry_to_dict(entry)})

    @app.route("/api/lists/<int:list_id>/summary", methods=["GET"], endpoint="lists_summary")
    @api_errors
    def lists_summary(list_id: int):
        summary = container.roster_service.get_summary(list_id)
        return jsonify({"success": True, "summary": summary.as_dict()})
