from flask_talisman import Talisman


def init_security(app):
    """
    Production/staging security headers for a JSON API.
    Nothing is rendered server-side, so the CSP only needs to allow the API itself.
    """
    csp = {
        "default-src": ["'none'"],
        "connect-src": ["'self'"],
        "frame-ancestors": ["'none'"],
        "base-uri": ["'none'"],
        "form-action": ["'none'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=app.config.get("FORCE_HTTPS", True),
        strict_transport_security=True,
        session_cookie_secure=True,
        frame_options="DENY",
        referrer_policy="no-referrer",
    )
