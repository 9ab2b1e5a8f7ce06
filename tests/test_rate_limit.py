import pytest

from portfolio_api import create_app
from portfolio_api.extensions import limiter


@pytest.fixture()
def limited_app(app):
    # Shared extensions get rebound to a throttled app for this test only
    limited = create_app({
        "RATELIMIT_ENABLED": True,
        "RATELIMIT_STORAGE_URI": "memory://",
        "FEEDBACK_RATE_LIMIT": "2 per minute",
    })
    limiter.reset()
    yield limited
    # Back to the unthrottled testing setup
    create_app()
    limiter.reset()


def _post(client, peer, forwarded=None):
    headers = {"X-Forwarded-For": forwarded} if forwarded else {}
    return client.post(
        "/api/feedback",
        json={"slug": "/rl", "message": "hi"},
        headers=headers,
        environ_base={"REMOTE_ADDR": peer},
    )


def test_rotating_forwarded_header_does_not_bypass_limit(limited_app):
    client = limited_app.test_client()
    codes = [_post(client, "198.51.100.20", forwarded=f"203.0.113.{i}").status_code for i in range(4)]
    assert codes == [201, 201, 429, 429]


def test_limit_is_per_peer(limited_app):
    client = limited_app.test_client()
    assert [_post(client, "198.51.100.30").status_code for _ in range(3)] == [201, 201, 429]
    assert _post(client, "198.51.100.31").status_code == 201


def test_rate_limited_response_is_json(limited_app):
    client = limited_app.test_client()
    for _ in range(2):
        _post(client, "198.51.100.40")
    resp = _post(client, "198.51.100.40")
    assert resp.status_code == 429
    assert resp.get_json()["error"] == "rate_limited"


def test_proxy_fix_trusts_configured_hops_only(app):
    proxied = create_app({
        "RATELIMIT_ENABLED": True,
        "RATELIMIT_STORAGE_URI": "memory://",
        "FEEDBACK_RATE_LIMIT": "1 per minute",
        "PROXY_FIX_HOPS": 1,
    })
    limiter.reset()
    try:
        client = proxied.test_client()
        # One trusted proxy: the last XFF hop becomes the peer, so distinct clients are keyed apart
        assert _post(client, "10.0.0.1", forwarded="203.0.113.1").status_code == 201
        assert _post(client, "10.0.0.1", forwarded="203.0.113.1").status_code == 429
        assert _post(client, "10.0.0.1", forwarded="203.0.113.2").status_code == 201
    finally:
        create_app()
        limiter.reset()
