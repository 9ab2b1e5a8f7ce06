import os


def _flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    APP_ENV = os.getenv("APP_ENV", "development")

    # MongoDB (required; create_app() refuses to start without both)
    MONGODB_URI = os.getenv("MONGODB_URI")
    MONGODB_DB = os.getenv("MONGODB_DB")
    MONGO_CONNECT_TIMEOUT_MS = int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", "10000"))
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    MONGO_SOCKET_TIMEOUT_MS = int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "45000"))

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT") or 4000)
    MAX_CONTENT_LENGTH = 1024 * 1024  # 1 MB JSON bodies

    # Cross-origin: "*" or a comma separated list
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")
    SOCKET_CORS_ORIGIN = os.getenv("SOCKET_CORS_ORIGIN", "http://localhost:3000,http://localhost:5173")
    SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE") or None

    # Feedback behaviour
    FEEDBACK_DEFAULT_NAME = os.getenv("FEEDBACK_DEFAULT_NAME", "익명")
    FEEDBACK_EXPOSE_CLIENT_IP = _flag("FEEDBACK_EXPOSE_CLIENT_IP")
    FEEDBACK_RATE_LIMIT = os.getenv("FEEDBACK_RATE_LIMIT", "30 per minute")

    # Flask-Limiter: off globally; per-route limits only
    RATELIMIT_DEFAULT = None
    RATELIMIT_HEADERS_ENABLED = True

    # Number of trusted reverse proxies in front of the app (0 = none)
    PROXY_FIX_HOPS = int(os.getenv("PROXY_FIX_HOPS", "0"))

    # Uncaught errors always go through the JSON 500 handler, even with DEBUG on
    PROPAGATE_EXCEPTIONS = False

    # Logging / misc
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    FORCE_HTTPS = _flag("FORCE_HTTPS", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = False
    MONGODB_URI = os.getenv("TEST_MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB = os.getenv("TEST_MONGODB_DB", "portfolio_test")
    RATELIMIT_ENABLED = False
    SOCKETIO_ASYNC_MODE = "threading"


_ENV_MAP = {
    "development": DevelopmentConfig,
    "staging": ProductionConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    env = os.getenv("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)


def parse_origins(value):
    """Turn a CORS setting into either "*" or a list of trimmed origins."""
    if value is None:
        return "*"
    if isinstance(value, (list, tuple)):
        return [o.strip() for o in value if o and o.strip()]
    value = value.strip()
    if not value or value == "*":
        return "*"
    return [o.strip() for o in value.split(",") if o.strip()]
