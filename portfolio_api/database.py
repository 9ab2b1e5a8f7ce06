"""
MongoDB connection gateway.

One MongoGateway is created per process (see extensions.py) and bound to the
Flask app via init_app(). The first connect() builds the client, pings the
server and memoizes it; later calls hand back the same database handle.
"""
import logging
import threading

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class MongoGateway:
    # Swapped for mongomock.MongoClient in tests
    client_class = MongoClient

    def __init__(self, app=None):
        self._client = None
        self._lock = threading.Lock()
        self.uri = None
        self.db_name = None
        self.client_options = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        uri = app.config.get("MONGODB_URI")
        db_name = app.config.get("MONGODB_DB")
        if not uri:
            raise RuntimeError("Missing required environment variable: MONGODB_URI")
        if not db_name:
            raise RuntimeError("Missing required environment variable: MONGODB_DB")

        self.uri = uri
        self.db_name = db_name
        self.client_options = {
            "connectTimeoutMS": app.config.get("MONGO_CONNECT_TIMEOUT_MS", 10000),
            "serverSelectionTimeoutMS": app.config.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000),
            "socketTimeoutMS": app.config.get("MONGO_SOCKET_TIMEOUT_MS", 45000),
        }
        app.extensions["mongo"] = self

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> Database:
        """Return the configured database, connecting on first use."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._open()
        return self._client[self.db_name]

    @property
    def db(self) -> Database:
        return self.connect()

    def _open(self):
        if not self.uri or not self.db_name:
            raise RuntimeError("MongoGateway used before init_app()")

        client = self.client_class(self.uri, **self.client_options)
        try:
            client.admin.command("ping")
        except PyMongoError:
            logger.exception("mongo_connect_failed", extra={"event": "mongo_connect_failed", "db": self.db_name})
            client.close()
            raise
        logger.info("mongo_connected", extra={"event": "mongo_connected", "db": self.db_name})
        return client

    def ping(self) -> dict:
        return self.connect().client.admin.command("ping")

    def close(self):
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.info("mongo_closed", extra={"event": "mongo_closed", "db": self.db_name})
