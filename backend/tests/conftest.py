import os
import sys
import pytest

# Ensure the backend root (containing the `turnclock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from turnclock import create_app, get_engine, socketio
from turnclock.services.clock import TurnClockEngine, ManualClock


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    DEFAULT_PLAYER_TIME_MS = 600000
    TICK_INTERVAL_MS = 1000
    MIN_PLAYERS = 2
    CORS_ORIGINS = ['http://localhost:3000']


class RecordingNotifier:
    def __init__(self):
        self.published = []

    def publish(self, players, status):
        self.published.append((players, status))

    @property
    def last(self):
        return self.published[-1][0]

    @property
    def last_status(self):
        return self.published[-1][1]


@pytest.fixture()
def clock():
    return ManualClock(interval_ms=1000)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def engine(clock, notifier):
    return TurnClockEngine(clock, notifier, default_time_ms=600000)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def app_engine(flask_app):
    return get_engine(flask_app)


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
