from __future__ import annotations

import io


def _create_list(client, name="Cálculo I"):
    resp = client.post("/api/lists", json={"name": name})
    assert resp.status_code == 201
    return resp.get_json()["list"]["id"]


def _upload(client, list_id, content: bytes, filename="lista.csv"):
    return client.post(
        f"/api/lists/{list_id}/import",
        data={"file": (io.BytesIO(content), filename)},
        content_type="multipart/form-data",
    )


def test_create_list_requires_name(client):
    resp = client.post("/api/lists", json={"name": "  "})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_list_index_and_rename(client):
    list_id = _create_list(client)

    renamed = client.patch(f"/api/lists/{list_id}", json={"name": "Cálculo II"})
    assert renamed.status_code == 200

    body = client.get("/api/lists").get_json()
    assert [x["name"] for x in body["lists"]] == ["Cálculo II"]


def test_import_toggle_and_summary(client):
    list_id = _create_list(client)
    csv = "Nombres,Apellidos\nMaría José,GARCÍA LÓPEZ\nLuis,ROJAS\n luis ,rojas\n".encode("utf-8")

    resp = _upload(client, list_id, csv)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["imported"] == 2
    assert body["duplicates_skipped"] == 1
    assert body["already_in_list"] == 0

    students = client.get(f"/api/lists/{list_id}/students").get_json()["students"]
    assert [(s["given_names"], s["surnames"]) for s in students] == [
        ("María José", "GARCÍA LÓPEZ"),
        ("Luis", "ROJAS"),
    ]
    assert all(s["origin"] == "Excel" and s["present"] is False for s in students)

    luis = students[1]["id"]
    marked = client.post(
        f"/api/lists/{list_id}/students/{luis}/attendance",
        json={},
        headers={"X-Marked-By": "jefe@utp.edu.pe"},
    ).get_json()["student"]
    assert marked["present"] is True
    assert marked["marked_by"] == "jefe@utp.edu.pe"

    summary = client.get(f"/api/lists/{list_id}/summary").get_json()["summary"]
    assert summary["total"] == 2
    assert summary["present"] == 1
    assert summary["attendance_rate"] == 50.0
    assert summary["by_marker"] == [{"marked_by": "jefe@utp.edu.pe", "count": 1}]

    present = client.get(f"/api/lists/{list_id}/students?status=presentes").get_json()["students"]
    assert [s["given_names"] for s in present] == ["Luis"]


def test_import_without_file(client):
    list_id = _create_list(client)

    resp = client.post(f"/api/lists/{list_id}/import", data={}, content_type="multipart/form-data")

    assert resp.status_code == 400


def test_import_rejects_unknown_extension(client):
    list_id = _create_list(client)

    resp = _upload(client, list_id, b"hola", filename="lista.txt")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_manual_student_then_duplicate(client):
    list_id = _create_list(client)
    payload = {"given_names": "Rosa", "surnames": "Flores", "dni": "45678912"}

    first = client.post(f"/api/lists/{list_id}/students", json=payload)
    assert first.status_code == 201
    student = first.get_json()["student"]
    assert student["origin"] == "Manual"
    assert student["present"] is True

    again = client.post(f"/api/lists/{list_id}/students", json=payload)
    assert again.status_code == 400
    assert again.get_json()["message"] == "Este estudiante ya existe en la lista"


def test_edit_and_delete_student(client):
    list_id = _create_list(client)
    entry_id = client.post(
        f"/api/lists/{list_id}/students", json={"given_names": "Rosa", "surnames": "Flores"}
    ).get_json()["student"]["id"]

    edited = client.patch(
        f"/api/lists/{list_id}/students/{entry_id}",
        json={"given_names": "Rosa Elena", "surnames": "Flores", "phone": "987654321"},
    ).get_json()["student"]
    assert edited["given_names"] == "Rosa Elena"
    assert edited["phone"] == "987654321"

    assert client.delete(f"/api/lists/{list_id}/students/{entry_id}").status_code == 200
    assert client.delete(f"/api/lists/{list_id}/students/{entry_id}").status_code == 404


def test_export_csv_download(client):
    list_id = _create_list(client, "Física")
    client.post(f"/api/lists/{list_id}/students", json={"given_names": "Rosa", "surnames": "Flores"})

    resp = client.get(f"/api/lists/{list_id}/export?format=csv")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "asistencia_F_sica_" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\xef\xbb\xbf")


def test_export_bad_format_and_missing_list(client):
    list_id = _create_list(client)

    assert client.get(f"/api/lists/{list_id}/export?format=pdf").status_code == 400
    assert client.get("/api/lists/999/export?format=xlsx").status_code == 404
    assert client.get("/api/lists/999/students").status_code == 404


def test_bad_filter_parameter(client):
    list_id = _create_list(client)

    resp = client.get(f"/api/lists/{list_id}/students?status=quizas")

    assert resp.status_code == 400


def test_upload_over_size_limit_gets_413(app):
    app.config["MAX_CONTENT_LENGTH"] = 1024
    client = app.test_client()
    list_id = _create_list(client)

    resp = _upload(client, list_id, b"Nombres,Apellidos\n" + b"x" * 5000)

    assert resp.status_code == 413
    body = resp.get_json()
    assert body["success"] is False
    assert "demasiado grande" in body["message"]
