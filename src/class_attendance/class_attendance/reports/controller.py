from __future__ import annotations

from flask import Flask, request

from ..common.http import api_errors, fail
from ..core.enums import RosterOrder
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lists/<int:list_id>/export", methods=["GET"], endpoint="lists_export")
    @api_errors
    def lists_export(list_id: int):
        try:
            order = RosterOrder(request.args.get("order") or RosterOrder.ORIGINAL.value)
        except ValueError:
            return fail("Parámetro de orden no válido")

        export = container.report_service.export(list_id, request.args.get("format", "xlsx"), order=order)
        return app.response_class(
            export.content,
            mimetype=export.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )
