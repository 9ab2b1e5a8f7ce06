import os
import resource
import time
from datetime import datetime, timezone

from flask import current_app, jsonify
from pymongo.errors import PyMongoError

from portfolio_api.extensions import limiter
from . import bp

_STARTED = time.monotonic()


def _current_rss_bytes():
    """Resident set size right now, from /proc (None where /proc is absent)."""
    try:
        with open("/proc/self/statm") as fh:
            resident_pages = int(fh.read().split()[1])
    except (OSError, ValueError, IndexError):
        return None
    return resident_pages * os.sysconf("SC_PAGE_SIZE")


def _memory_snapshot() -> dict:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {
        "rss_bytes": _current_rss_bytes(),
        # ru_maxrss is KiB on Linux
        "peak_rss_kb": usage.ru_maxrss,
    }


@bp.get("/health")
@limiter.exempt
def health():
    """Ping MongoDB and report a process snapshot."""
    now = datetime.now(timezone.utc).isoformat()
    cfg = current_app.config
    try:
        current_app.extensions["mongo"].ping()
    except PyMongoError as e:
        current_app.logger.exception("Health check failed")
        return jsonify({
            "success": False,
            "message": "Database connection failed",
            "timestamp": now,
            "error": str(e),
        }), 500

    return jsonify({
        "success": True,
        "message": "Server is healthy",
        "timestamp": now,
        "environment": {
            "APP_ENV": cfg.get("APP_ENV"),
            "PORT": cfg.get("PORT"),
            "MONGODB_URI": bool(cfg.get("MONGODB_URI")),
            "MONGODB_DB": cfg.get("MONGODB_DB"),
            "CORS_ORIGIN": cfg.get("CORS_ORIGIN"),
        },
        "uptime": round(time.monotonic() - _STARTED, 3),
        "memory": _memory_snapshot(),
    }), 200
