import os
import sys

import pytest

# Ensure the backend root (containing the `undercover` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

os.environ.setdefault("SOCKETIO_ASYNC_MODE", "threading")

from undercover.config import Config
from undercover.game import service
from undercover.server import create_app


@pytest.fixture(autouse=True)
def clean_rooms():
    service.clear_rooms()
    yield
    service.clear_rooms()


@pytest.fixture()
def test_config(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        TRUST_PROXY_HEADERS = False
        WORDLISTS_FILE = str(tmp_path / "wordlists.json")
        DISCONNECT_GRACE_SEC = 3600

    return TestConfig


@pytest.fixture()
def app_and_socketio(test_config):
    return create_app(test_config)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_and_socketio):
    app, socketio = app_and_socketio
    clients = []

    def make():
        c = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(c)
        return c

    yield make

    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def word_lists(flask_app):
    return flask_app.extensions["wordlists"]


@pytest.fixture()
def timers(flask_app):
    return flask_app.extensions["disconnect_timers"]
