"""Shared fixtures: an app on in-memory SQLite with fake OAuth providers.

Route tests must not hold an app context open while using the test client,
otherwise Flask-Login's per-request user cache would leak between requests.
Service tests use the ``ctx`` fixture instead.
"""

import pytest
from flask import redirect

from secretboard import create_app
from secretboard.extensions import db as _db
from secretboard.extensions import oauth as _oauth
from secretboard.models import User

COOKIE_NAME = 'test_session'

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'AUTH_COOKIE_NAME': COOKIE_NAME,
    'OAUTH_CALLBACK_BASE_URL': None,
    'GOOGLE_CLIENT_ID': None,
    'GOOGLE_CLIENT_SECRET': None,
    'FACEBOOK_APP_ID': None,
    'FACEBOOK_APP_SECRET': None,
    'LOG_LEVEL': 'WARNING',
}


class FakeProvider:
    """Stands in for an OAuth strategy: no network, scripted outcome."""

    def __init__(self, name, id_field, label):
        self.name = name
        self.id_field = id_field
        self.label = label
        self.profile = {'id': f'{name}-123', 'name': 'Test Person'}
        self.failure = None
        self.callback_urls = []

    def begin(self, callback_url):
        self.callback_urls.append(callback_url)
        return redirect(f'https://{self.name}.example.com/consent')

    def complete(self):
        if self.failure is not None:
            raise self.failure
        return self.profile


@pytest.fixture
def providers():
    return {
        'google': FakeProvider('google', 'google_id', 'Google'),
        'facebook': FakeProvider('facebook', 'facebook_id', 'Facebook'),
    }


@pytest.fixture
def app(providers):
    app = create_app(dict(TEST_CONFIG), providers=providers)
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def oauth_registry():
    """Undo any Authlib client registrations a test makes on the shared registry."""
    registry = dict(_oauth._registry)
    clients = dict(_oauth._clients)
    yield _oauth
    _oauth._registry.clear()
    _oauth._registry.update(registry)
    _oauth._clients.clear()
    _oauth._clients.update(clients)


@pytest.fixture
def google_app(oauth_registry):
    """App wired to the real Authlib Google client (dummy credentials)."""
    config = dict(TEST_CONFIG, GOOGLE_CLIENT_ID='gid', GOOGLE_CLIENT_SECRET='gsecret')
    app = create_app(config)
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['secretboard']


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def db():
    return _db


def all_users(app):
    """Fresh read of the users table, outside any request."""
    with app.app_context():
        _db.session.expire_all()
        return [
            {
                'id': u.id,
                'username': u.username,
                'google_id': u.google_id,
                'facebook_id': u.facebook_id,
                'secret': u.secret,
            }
            for u in _db.session.execute(_db.select(User).order_by(User.id)).scalars()
        ]


def register(client, username='alice', password='pw123'):
    return client.post('/register', data={'username': username, 'password': password})


def login(client, username='alice', password='pw123'):
    return client.post('/login', data={'username': username, 'password': password})
