import os
import traceback
from datetime import datetime, timezone

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

__version__ = "1.0.0"

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    load_dotenv(".env")

from .config import get_config, parse_origins  # noqa: E402
from .extensions import cors, limiter, mongo, socketio  # noqa: E402
from .observability import init_logging, init_request_logging, init_sentry  # noqa: E402
from .security import init_security  # noqa: E402


def _now():
    return datetime.now(timezone.utc).isoformat()


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.json.ensure_ascii = False  # Korean names stay readable

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    env_key = (app.config.get("APP_ENV") or "development").lower()

    # Trust X-Forwarded-For only as far as the configured proxy chain
    hops = int(app.config.get("PROXY_FIX_HOPS") or 0)
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)

    # Rate limit storage: Redis when provided, in-process otherwise
    storage_uri = os.getenv("REDIS_URL") or "memory://"
    app.config.setdefault("RATELIMIT_STORAGE_URI", storage_uri)

    # --- Observability & Security ---
    init_logging(app)
    init_sentry(app)
    init_request_logging(app)
    if env_key in ("staging", "production"):
        if storage_uri == "memory://":
            app.logger.warning("REDIS_URL not set; rate limits are per-process")
        init_security(app)

    # Init extensions (mongo.init_app fails fast on missing MONGODB_URI / MONGODB_DB)
    mongo.init_app(app)
    limiter.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": parse_origins(app.config.get("CORS_ORIGIN"))}},
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        supports_credentials=False,
    )
    socketio.init_app(
        app,
        cors_allowed_origins=parse_origins(app.config.get("SOCKET_CORS_ORIGIN")),
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE"),
    )

    # Blueprints
    from .blueprints.main import bp as main_bp
    from .blueprints.api import bp as api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    # Socket.IO event handlers register on import
    from . import realtime  # noqa: F401

    register_error_handlers(app)

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    return app


def register_error_handlers(app):
    """Every error leaves as JSON; stack traces only with DEBUG on."""

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            "error": "Not Found",
            "message": f"Path '{request.full_path.rstrip('?')}' was not found.",
            "timestamp": _now(),
        }), 404

    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        payload = {"error": "rate_limited", "code": 429, "timestamp": _now()}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        return payload, 429, headers

    @app.errorhandler(500)
    def server_error(e):
        original = getattr(e, "original_exception", None) or e
        app.logger.error("unhandled_error", exc_info=original, extra={"event": "unhandled_error", "path": request.path})
        payload = {
            "error": "Internal Server Error",
            "message": "An unexpected server error occurred.",
            "timestamp": _now(),
        }
        if app.debug and (app.config.get("APP_ENV") or "").lower() != "production":
            payload["stack"] = "".join(traceback.format_exception(type(original), original, original.__traceback__))
        return jsonify(payload), 500

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({
            "error": e.name,
            "message": e.description,
            "timestamp": _now(),
        }), e.code
