import os

UPLOAD_URL = "/api/v1/files/upload"


def test_upload_and_download(client, app):
    resp = client.post(UPLOAD_URL, files={"file": ("diagram.png", b"\x89PNG-data", "image/png")})
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["originalName"] == "diagram.png"
    assert body["mimeType"] == "image/png"
    assert body["size"] == len(b"\x89PNG-data")
    assert body["filename"].endswith(".png")
    assert body["url"] == f"/uploads/{body['filename']}"
    assert os.path.isfile(app.state.file_service.resolve(body["filename"]))

    download = client.get(f"/api/v1/files/{body['filename']}")
    assert download.status_code == 200
    assert download.content == b"\x89PNG-data"
    assert download.headers["content-type"] == "application/octet-stream"
    assert download.headers["content-disposition"].startswith("inline")

    static = client.get(body["url"])
    assert static.status_code == 200
    assert static.content == b"\x89PNG-data"


def test_upload_rejects_disallowed_type(client):
    resp = client.post(UPLOAD_URL, files={"file": ("run.sh", b"echo hi", "text/x-shellscript")})
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Invalid file type. Allowed: ")


def test_upload_requires_file(client):
    resp = client.post(UPLOAD_URL, data={"other": "value"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "A file must be provided"


def test_upload_too_large_leaves_nothing_behind(client, app):
    service = app.state.file_service
    service.max_file_size = 4
    resp = client.post(UPLOAD_URL, files={"file": ("big.pdf", b"0123456789", "application/pdf")})
    assert resp.status_code == 413
    assert resp.json()["message"] == "File too large"
    assert os.listdir(service.upload_root) == []


def test_download_missing_and_traversal(client, app):
    assert client.get("/api/v1/files/missing.png").status_code == 404

    outside = os.path.join(os.path.dirname(app.state.file_service.upload_root), "secret.txt")
    with open(outside, "wb") as fh:
        fh.write(b"secret")
    resp = client.get("/api/v1/files/..%2Fsecret.txt")
    assert resp.status_code == 404
