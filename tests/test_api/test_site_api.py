def test_site_data_includes_services_and_logs_page_view(client, app):
    response = client.get("/api/site-data")

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["title"]
    assert len(body["data"]["services"]) == 4
    assert body["data"]["audio"] == {"url": "", "autoplay": False}

    with app.app_context():
        assert app.extensions["event_log"].count_event("page_view") == 1


def test_list_services(client):
    body = client.get("/api/services").get_json()
    assert body["success"] is True
    assert [service["name"] for service in body["data"]][:2] == ["Mobile App Mods", "Game Modifications"]


def test_get_service_by_id(client):
    first = client.get("/api/services").get_json()["data"][0]

    response = client.get(f"/api/services/{first['id']}")
    assert response.status_code == 200
    assert response.get_json()["data"]["name"] == first["name"]


def test_unknown_service_is_404(client):
    response = client.get("/api/services/9999")
    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "Service not found"}
