"""
Process entry point.

    flask --app wsgi.py run            # plain HTTP (no websocket upgrade)
    python wsgi.py                     # HTTP + Socket.IO via socketio.run()
    gunicorn -k eventlet -w 1 wsgi:app # production
"""
import logging
import signal
import sys

from pymongo.errors import PyMongoError

from portfolio_api import create_app
from portfolio_api.extensions import mongo, socketio

logger = logging.getLogger("portfolio_api.wsgi")

try:
    app = create_app()
except RuntimeError as exc:
    # Missing required configuration: refuse to serve anything
    logging.basicConfig(level=logging.ERROR)
    logger.error("startup_config_error %s", exc)
    sys.exit(1)


def _shutdown(signum, frame):
    mongo.close()
    logger.info("shutdown signal=%s", signum)
    sys.exit(0)


signal.signal(signal.SIGINT, _shutdown)
signal.signal(signal.SIGTERM, _shutdown)


def main():
    try:
        mongo.connect()
    except PyMongoError as exc:
        logger.error("startup_db_unreachable %s", exc)
        sys.exit(1)

    host = app.config["HOST"]
    port = app.config["PORT"]
    app.logger.info(
        "server_starting",
        extra={"event": "server_starting", "host": host, "port": port, "env": app.config.get("APP_ENV")},
    )
    # The werkzeug dev server only backs the "threading" mode; eventlet/gevent bring their own
    extra = {"allow_unsafe_werkzeug": True} if socketio.server.eio.async_mode == "threading" else {}
    socketio.run(app, host=host, port=port, debug=app.debug, use_reloader=False, **extra)


if __name__ == "__main__":
    main()
