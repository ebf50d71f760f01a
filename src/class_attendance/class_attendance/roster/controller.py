from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_errors, fail
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lists/<int:list_id>/import", methods=["POST"], endpoint="roster_import")
    @api_errors
    def roster_import(list_id: int):
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return fail("Seleccione un archivo para importar")

        result = container.import_service.import_file(list_id, filename=upload.filename, data=upload.read())
        return jsonify(
            {
                "success": True,
                "message": result.message(),
                "imported": result.imported,
                "duplicates_skipped": result.duplicates_skipped,
                "already_in_list": result.already_in_list,
            }
        )
