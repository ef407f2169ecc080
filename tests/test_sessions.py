"""Tests for the server-side session store and the auth gate built on it."""

from datetime import timedelta

import pytest
from sqlalchemy import delete

from secretboard.errors import SessionInvalid
from secretboard.models import User, UserSession
from secretboard.services.sessions import SessionManager


@pytest.fixture
def user(ctx, db):
    u = User(username='alice')
    db.session.add(u)
    db.session.commit()
    return u


class TestSessionManager:
    def test_create_then_resolve(self, services, user):
        token = services.sessions.create(user.id)
        assert services.sessions.resolve(token) == user.id

    def test_tokens_are_fresh_and_long(self, services, user):
        tokens = {services.sessions.create(user.id) for _ in range(5)}
        assert len(tokens) == 5
        assert all(len(t) >= 40 for t in tokens)

    def test_token_does_not_embed_user_id(self, services, user):
        token = services.sessions.create(user.id)
        row = services.sessions.db.session.get(UserSession, token)
        assert row.user_id == user.id
        assert token != str(user.id)

    def test_destroy_invalidates_immediately(self, services, user):
        token = services.sessions.create(user.id)
        services.sessions.destroy(token)
        assert services.sessions.resolve(token) is None

    def test_destroy_only_affects_that_token(self, services, user):
        keep = services.sessions.create(user.id)
        drop = services.sessions.create(user.id)
        services.sessions.destroy(drop)
        assert services.sessions.resolve(keep) == user.id

    def test_destroy_unknown_or_empty_token_is_a_noop(self, services, user):
        services.sessions.destroy('no-such-token')
        services.sessions.destroy(None)

    @pytest.mark.parametrize('token', [None, '', 'forged-token'])
    def test_resolve_unknown_token(self, services, user, token):
        assert services.sessions.resolve(token) is None

    def test_expired_session_resolves_to_none_and_is_removed(self, db, user):
        manager = SessionManager(db, lifetime=timedelta(seconds=-1))
        token = manager.create(user.id)
        assert manager.resolve(token) is None
        assert db.session.get(UserSession, token) is None

    def test_deserialize_returns_user(self, services, user):
        token = services.sessions.create(user.id)
        assert services.sessions.deserialize(token).username == 'alice'

    def test_deserialize_missing_user_invalidates_session(self, services, db, user):
        token = services.sessions.create(user.id)
        db.session.execute(delete(User).where(User.id == user.id))
        db.session.commit()
        db.session.expunge_all()

        with pytest.raises(SessionInvalid):
            services.sessions.deserialize(token)
        assert services.sessions.resolve(token) is None


class TestAuthGate:
    def test_authenticated_with_live_token(self, services, user):
        token = services.sessions.create(user.id)
        assert services.gate.is_authenticated(token)
        assert services.gate.current_user(token).id == user.id

    def test_anonymous_without_token(self, services, user):
        assert not services.gate.is_authenticated(None)
        assert services.gate.current_user(None) is None

    def test_anonymous_after_destroy(self, services, user):
        token = services.sessions.create(user.id)
        services.sessions.destroy(token)
        assert not services.gate.is_authenticated(token)

    def test_dangling_session_is_anonymous_not_an_error(self, services, db, user):
        token = services.sessions.create(user.id)
        db.session.execute(delete(User).where(User.id == user.id))
        db.session.commit()
        db.session.expunge_all()

        assert services.gate.current_user(token) is None
