import os
import sys
import pytest

# Ensure the backend root (containing the `duet` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from duet import create_app, db, socketio
from duet.services.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = ['http://localhost:3000']


class RecordingEmitter:
    """Stands in for Flask-SocketIO; keeps every emit in order."""

    def __init__(self):
        self.sent = []

    def emit(self, event, data, to=None, namespace=None):
        self.sent.append((to, event, data))

    def received(self, sid, event=None):
        return [data for to, name, data in self.sent if to == sid and (event is None or name == event)]

    def clear(self):
        self.sent.clear()


class RecordingGateway:
    def __init__(self, error=None):
        self.recorded = []
        self.error = error

    def record_turn(self, identity):
        if self.error is not None:
            raise self.error
        self.recorded.append(identity)


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def session(emitter, gateway):
    return GameSession(emitter, gateway)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import duet.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_connect(flask_app):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
