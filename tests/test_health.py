"""
Health endpoints and cross-cutting HTTP behaviour (headers, JSON errors).
"""


def test_health_ok(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    data = res.get_json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["status"] == "ok"


def test_liveness(client):
    res = client.get("/api/health/live")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_security_headers(client):
    res = client.get("/api/health/live")
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "frame-ancestors 'none'" in res.headers["Content-Security-Policy"]
    assert res.headers["Cache-Control"] == "no-store"


def test_request_id_is_echoed(client):
    res = client.get("/api/health/live", headers={"X-Request-ID": "abc123"})
    assert res.headers["X-Request-ID"] == "abc123"
    assert "X-Request-Duration-Ms" in res.headers


def test_request_id_is_generated(client):
    res = client.get("/api/health/live")
    assert len(res.headers["X-Request-ID"]) == 12


def test_unknown_route_is_json_404(client):
    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.get_json()["code"] == "ERR_NOT_FOUND"


def test_wrong_method_is_json_405(client):
    res = client.delete("/api/health/live")
    assert res.status_code == 405
    assert res.get_json()["code"] == "ERR_METHOD_NOT_ALLOWED"


def test_rate_limit_storage_comes_from_config(app):
    from producthub import limiter

    assert limiter._storage_uri is None
    assert app.config["RATELIMIT_STORAGE_URI"] == "memory://"
