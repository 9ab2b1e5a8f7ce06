import os
# Ensure the app factory picks the Testing config
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("TEST_MONGODB_DB", "portfolio_test")

import mongomock
import pytest

from portfolio_api import create_app
from portfolio_api.extensions import mongo, socketio
from portfolio_api.models import FEEDBACK_COLLECTION

# In-memory MongoDB for the whole test session
mongo.client_class = mongomock.MongoClient


@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config.update(
        TESTING=True,
        FEEDBACK_EXPOSE_CLIENT_IP=False,
        FEEDBACK_DEFAULT_NAME="익명",
    )
    yield app
    mongo.close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def collection(app):
    return mongo.db[FEEDBACK_COLLECTION]


@pytest.fixture()
def socket_client(app):
    sc = socketio.test_client(app)
    sc.get_received()  # drop anything sent on connect
    yield sc
    if sc.is_connected():
        sc.disconnect()


@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE and AFTER each test
    mongo.db[FEEDBACK_COLLECTION].delete_many({})
    yield
    mongo.db[FEEDBACK_COLLECTION].delete_many({})
