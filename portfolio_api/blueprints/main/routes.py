from datetime import datetime, timezone

from flask import current_app

from portfolio_api import __version__
from portfolio_api.extensions import limiter
from . import bp


@bp.get("/")
def index():
    """Service banner with the endpoint map."""
    return {
        "message": "Portfolio Backend API",
        "version": __version__,
        "status": "running",
        "environment": current_app.config.get("APP_ENV"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "health": "/api/health",
            "feedback": {
                "get": "/api/feedback?slug=<slug>",
                "post": "/api/feedback",
                "delete": "/api/feedback/:id",
            },
            "realtime": {"send": "chat:send", "receive": "chat:newMessage"},
        },
    }, 200


@bp.get("/healthz")
@limiter.exempt
def healthz():
    # Liveness only; /api/health also checks MongoDB
    return {"status": "ok"}, 200
