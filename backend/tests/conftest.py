import os
import sys
import pytest

# Ensure the backend root (containing the `flagstats` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from flagstats import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_KEY = 'test-store'
    DEFAULT_RULE_SET = 'NFL_FLAG'
    CORS_ORIGINS = ['http://localhost:5173']
    EXPORT_FILENAME = 'flag5v5-stats.json'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import flagstats.models  # noqa: F401
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


@pytest.fixture()
def roster(client):
    """Three players added through the API: Alice, Bob and Cara."""
    added = {}
    for name, jersey in (('Alice', '7'), ('Bob', '12'), ('Cara', None)):
        body = {'name': name}
        if jersey:
            body['jersey'] = jersey
        added[name] = client.post('/api/players', json=body).get_json()
    return added
