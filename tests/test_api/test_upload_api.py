import io


def _upload(client, headers, name="photo.png", content_type="image/png", data=b"\x89PNG fake"):
    return client.post(
        "/api/admin/upload/single",
        data={"file": (io.BytesIO(data), name, content_type)},
        headers=headers,
        content_type="multipart/form-data",
    )


def test_upload_requires_admin(client):
    response = client.post(
        "/api/admin/upload/single",
        data={"file": (io.BytesIO(b"x"), "photo.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 401


def test_single_upload_and_download(client, admin_headers):
    response = _upload(client, admin_headers)

    assert response.status_code == 200
    saved = response.get_json()["data"]
    assert saved["originalname"] == "photo.png"
    assert saved["filename"] != "photo.png"

    served = client.get(saved["url"])
    assert served.status_code == 200
    assert served.data == b"\x89PNG fake"


def test_rejects_disallowed_type(client, admin_headers):
    response = _upload(client, admin_headers, name="shell.php", content_type="application/x-php")

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_missing_file(client, admin_headers):
    response = client.post(
        "/api/admin/upload/single", data={}, headers=admin_headers, content_type="multipart/form-data"
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "No file uploaded"


def test_oversized_upload_is_413(make_app):
    app = make_app(uploads={"max_file_size": 16})
    client = app.test_client()
    token = client.post(
        "/api/admin/login", json={"username": "admin", "password": "s3cret-pass"}
    ).get_json()["token"]

    response = _upload(client, {"Authorization": f"Bearer {token}"}, data=b"x" * 64)
    assert response.status_code == 413
    assert response.get_json()["success"] is False


def test_multiple_list_and_delete(client, admin_headers):
    response = client.post(
        "/api/admin/upload/multiple",
        data={
            "files": [
                (io.BytesIO(b"one"), "one.mp3", "audio/mpeg"),
                (io.BytesIO(b"two"), "two.webm", "video/webm"),
            ]
        },
        headers=admin_headers,
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    saved = response.get_json()["data"]
    assert len(saved) == 2

    listing = client.get("/api/admin/upload/list", headers=admin_headers).get_json()["data"]
    assert {item["filename"] for item in listing} == {item["filename"] for item in saved}

    deleted = client.delete(f"/api/admin/upload/{saved[0]['filename']}", headers=admin_headers)
    assert deleted.status_code == 200
    again = client.delete(f"/api/admin/upload/{saved[0]['filename']}", headers=admin_headers)
    assert again.status_code == 404
    assert len(client.get("/api/admin/upload/list", headers=admin_headers).get_json()["data"]) == 1


def test_too_many_files(client, admin_headers):
    files = [(io.BytesIO(b"x"), f"f{index}.png", "image/png") for index in range(6)]
    response = client.post(
        "/api/admin/upload/multiple",
        data={"files": files},
        headers=admin_headers,
        content_type="multipart/form-data",
    )
    assert response.status_code == 400


def test_unknown_upload_is_404(client):
    assert client.get("/uploads/nothing-here.png").status_code == 404
