import os
import sys
import pytest

# Ensure the backend root (containing the `namegame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from namegame import create_app, db, socketio, override_store
from namegame.services.verification import CLASSIFIER_EXTENSION, MatchClassifier, SearchHit


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    MIN_GROUP_MEMBERS = 4
    QUERY_DELAY_SEC = 0
    NAME_DELAY_SEC = 0
    RETRY_BACKOFF_SEC = 0
    VERIFY_MAX_RETRIES = 3
    REQUIRE_LECTURER_LOGIN = False
    BCRYPT_LOG_ROUNDS = 4


class FakeOracle:
    """In-memory oracle: query text -> hits. Records every query it receives."""

    def __init__(self, hits=None, default=None):
        self.hits = dict(hits or {})
        self.default = list(default or [])
        self.queries = []

    def search(self, query, limit=5):
        self.queries.append((query, limit))
        return list(self.hits.get(query, self.default))[:limit]


def no_sleep(_seconds):
    return None


def make_classifier(oracle, **kwargs):
    return MatchClassifier(oracle, sleep=no_sleep, **kwargs)


def singer_hit(title, year='1985'):
    return SearchHit(title=title, snippet=f'{title} (נולד ב-{year}) הוא זמר ישראלי')


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import namegame.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    override_store.reset()


@pytest.fixture()
def fake_oracle(flask_app):
    oracle = FakeOracle()
    flask_app.extensions[CLASSIFIER_EXTENSION] = make_classifier(oracle)
    return oracle


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
