import os
import sys
import random
import pytest

# Ensure the backend root (containing the `pong_server` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from pong_server import create_app, socketio
from pong_server.services.games import GameSettings, RoomStore, SessionManager
from pong_server.services.games.scheduler import ManualTickScheduler


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    TICK_SCHEDULER = 'manual'
    BALL_SEED = 1234


class RecordingBroadcaster:
    """Captures outbound events instead of sending them."""

    def __init__(self):
        self.events = []
        self.members = {}

    def enter_room(self, connection_id, room_id):
        self.members.setdefault(room_id, set()).add(connection_id)

    def leave_room(self, connection_id, room_id):
        self.members.get(room_id, set()).discard(connection_id)

    def emit(self, event, payload, room_id):
        self.events.append((event, payload, room_id))

    def names(self, room_id=None):
        return [e for e, _, rid in self.events if room_id is None or rid == room_id]

    def payloads(self, event):
        return [p for e, p, _ in self.events if e == event]

    def clear(self):
        self.events.clear()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def settings():
    return GameSettings()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def scheduler():
    return ManualTickScheduler()


@pytest.fixture()
def manager(settings, broadcaster, scheduler):
    return SessionManager(RoomStore(), settings, broadcaster, scheduler, rng=random.Random(7))
