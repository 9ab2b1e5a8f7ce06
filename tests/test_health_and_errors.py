import re

from pymongo.errors import ServerSelectionTimeoutError

from portfolio_api.extensions import mongo
from portfolio_api.services.feedback import FeedbackService


def test_api_health_ok(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["environment"]["MONGODB_URI"] is True
    assert body["environment"]["MONGODB_DB"] == "portfolio_test"
    assert body["uptime"] >= 0
    assert body["memory"]["rss_bytes"] > 0
    assert body["memory"]["peak_rss_kb"] > 0
    assert "timestamp" in body


def test_api_health_reports_store_failure(client, monkeypatch):
    def down():
        raise ServerSelectionTimeoutError("no primary")
    monkeypatch.setattr(mongo, "ping", down)

    resp = client.get("/api/health")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Database connection failed"
    assert "no primary" in body["error"]


def test_liveness_probe_does_not_touch_store(client, monkeypatch):
    def down():
        raise AssertionError("no store access expected")
    monkeypatch.setattr(mongo, "connect", down)
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_root_lists_endpoints(client):
    body = client.get("/").get_json()
    assert body["status"] == "running"
    assert body["endpoints"]["feedback"]["post"] == "/api/feedback"


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope?x=1")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["error"] == "Not Found"
    assert "/api/nope?x=1" in body["message"]


def test_method_not_allowed_is_json(client):
    resp = client.put("/api/feedback")
    assert resp.status_code == 405
    assert resp.get_json()["error"] == "Method Not Allowed"


def _explode(*a, **kw):
    raise RuntimeError("kaboom")


def test_uncaught_error_is_generic_500(app, client, monkeypatch):
    monkeypatch.setattr(FeedbackService, "list_by_slug", _explode)

    resp = client.get("/api/feedback?slug=/x")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Internal Server Error"
    assert "stack" not in body
    assert "kaboom" not in resp.get_data(as_text=True)


def test_uncaught_error_includes_stack_in_debug(app, client, monkeypatch):
    monkeypatch.setitem(app.config, "DEBUG", True)
    monkeypatch.setattr(FeedbackService, "list_by_slug", _explode)

    body = client.get("/api/feedback?slug=/x").get_json()
    assert re.search(r"RuntimeError: kaboom", body["stack"])
