import os
import sys
import pytest

# Ensure the backend root (containing the `obs_timer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from obs_timer import create_app, db, socketio
from config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DEFAULT_COUNTDOWN_MS = 5 * 60 * 1000
    DEFAULT_FONT_SIZE = 48
    DEFAULT_THEME = 'dark'
    DEFAULT_SHOW_MILLISECONDS = True
    FONT_SIZE_MIN = 24
    FONT_SIZE_MAX = 120
    SESSION_ID_LENGTH = 10


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import obs_timer.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


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


class FakeScheduler:
    """Stands in for background tasks: spawned loops only run when driven."""

    def __init__(self):
        self.tasks = []
        self.sleeps = []
        self.on_sleep = None

    def spawn(self, fn):
        self.tasks.append(fn)

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        if self.on_sleep:
            self.on_sleep(len(self.sleeps))


@pytest.fixture()
def scheduler():
    return FakeScheduler()


class ManualClock:

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def clock():
    return ManualClock(1_000)
