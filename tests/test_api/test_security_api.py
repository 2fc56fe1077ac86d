def test_security_status(client, admin_headers):
    client.get("/api/site-data")

    response = client.get("/api/admin/security/status", headers=admin_headers)

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert set(data) == {"firewall", "access", "blocked"}
    assert {"totalEvents", "last24h", "blockedIPs", "highSeverityEvents", "recentEvents"} <= set(data["firewall"])
    assert data["access"]["totalIPs"] >= 1
    assert data["access"]["scrapingThreshold"] == 50


def test_block_and_unblock_ip(client, admin_headers):
    blocked = client.post(
        "/api/admin/security/block", json={"ip": "203.0.113.7", "reason": "abuse"}, headers=admin_headers
    )
    assert blocked.status_code == 200

    denied = client.get("/api/site-data", environ_base={"REMOTE_ADDR": "203.0.113.7"})
    assert denied.status_code == 403
    assert denied.get_json()["code"] == "FIREWALL_BLOCKED"

    status = client.get("/api/admin/security/status", headers=admin_headers).get_json()["data"]
    assert status["firewall"]["blockedIPs"] == 1
    assert status["blocked"][0]["ip"] == "203.0.113.7"
    assert status["blocked"][0]["reason"] == "abuse"

    unblocked = client.delete("/api/admin/security/block/203.0.113.7", headers=admin_headers)
    assert unblocked.status_code == 200
    assert client.get("/api/site-data", environ_base={"REMOTE_ADDR": "203.0.113.7"}).status_code == 200

    again = client.delete("/api/admin/security/block/203.0.113.7", headers=admin_headers)
    assert again.status_code == 404


def test_block_requires_valid_ip(client, admin_headers):
    response = client.post("/api/admin/security/block", json={"ip": "not-an-ip"}, headers=admin_headers)
    assert response.status_code == 400
    assert "ip" in response.get_json()["errors"]

    assert client.delete("/api/admin/security/block/not-an-ip", headers=admin_headers).status_code == 400


def test_security_routes_require_admin(client):
    assert client.get("/api/admin/security/status").status_code == 401
    assert client.post("/api/admin/security/block", json={"ip": "203.0.113.7"}).status_code == 401


def test_security_logs_export(client, admin_headers):
    client.get("/api/site-data", headers={"Referer": "http://copycat.example/page"})

    response = client.get("/api/admin/security/logs", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["Content-Disposition"].startswith("attachment; filename=security-logs-")
    body = response.get_json()
    assert body["count"] == len(body["securityLogs"])
    referers = [e for e in body["securityLogs"] if e["event"] == "suspicious_referer"]
    assert referers[0]["data"]["referer"] == "http://copycat.example/page"


def test_security_logs_require_token(client):
    assert client.get("/api/admin/security/logs").status_code == 401
